from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple
import logging
from core.catalog import VaccineCatalog
from utils.validate import validate_priority_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriorityEntry:
    vaccine_id: str
    rank: int
    enabled: bool = True


@dataclass(frozen=True)
class PrioritySnapshot:
    """Immutable copy of a priority list handed to the schedule engine."""

    entries: Tuple[PriorityEntry, ...] = ()
    disabled: FrozenSet[str] = frozenset()
    """Vaccines switched off without being ranked."""

    def ordered_vaccine_ids(self) -> List[str]:
        return [e.vaccine_id for e in sorted(self.entries, key=lambda e: e.rank)]

    def entry_for(self, vaccine_id: str) -> Optional[PriorityEntry]:
        for entry in self.entries:
            if entry.vaccine_id == vaccine_id:
                return entry
        return None

    def is_enabled(self, vaccine_id: str) -> bool:
        """Vaccines missing from the list are scheduled; only explicitly disabled ones are skipped."""
        if vaccine_id in self.disabled:
            return False
        entry = self.entry_for(vaccine_id)
        return entry is None or entry.enabled

    def rank_key(self, vaccine_id: str, catalog: VaccineCatalog) -> int:
        """
        Effective rank of a vaccine, lower is more important.

        Ranked entries come first, then vaccines absent from the list in
        catalog order, then ids known to neither.
        """
        ordered = self.ordered_vaccine_ids()
        if vaccine_id in ordered:
            return ordered.index(vaccine_id)
        idx = catalog.index_of(vaccine_id)
        if idx is not None:
            return len(ordered) + idx
        return len(ordered) + len(catalog)

    def snapshot(self) -> "PrioritySnapshot":
        return self


class PriorityList:
    """
    User ordered ranking of vaccines.

    The ordering is only ever replaced as a whole via `reorder`, which keeps
    every change auditable through `revision`.
    """

    def __init__(self, vaccine_ids: Iterable[str] = (), disabled: Iterable[str] = ()):
        self._order: List[str] = validate_priority_order(vaccine_ids)
        self._disabled = set(disabled)
        self.revision = 0

    @classmethod
    def from_catalog(cls, catalog: VaccineCatalog) -> "PriorityList":
        """Default list: every catalog vaccine, with only the recommended ones enabled."""
        return cls(
            [r.vaccine_id for r in catalog.all_rules()],
            disabled=[r.vaccine_id for r in catalog.all_rules() if not r.recommended],
        )

    def ordered_vaccine_ids(self) -> List[str]:
        return list(self._order)

    def reorder(self, vaccine_ids: Iterable[str]) -> None:
        """Atomically replace the whole ordering. Enabled flags are kept, also for ids dropped from it."""
        new_order = validate_priority_order(vaccine_ids)
        self._order = new_order
        self.revision += 1
        logger.debug(f"Priority list reordered: {new_order}")

    def move(self, from_idx: int, to_idx: int) -> None:
        """Move one entry, expressed as a whole-list reorder."""
        order = list(self._order)
        order.insert(to_idx, order.pop(from_idx))
        self.reorder(order)

    def set_enabled(self, vaccine_id: str, enabled: bool) -> None:
        if enabled:
            self._disabled.discard(vaccine_id)
        else:
            self._disabled.add(vaccine_id)
        self.revision += 1

    def is_enabled(self, vaccine_id: str) -> bool:
        return vaccine_id not in self._disabled

    def rank_of(self, vaccine_id: str) -> Optional[int]:
        try:
            return self._order.index(vaccine_id)
        except ValueError:
            return None

    def entries(self) -> List[PriorityEntry]:
        return [
            PriorityEntry(vaccine_id=vid, rank=idx, enabled=self.is_enabled(vid))
            for idx, vid in enumerate(self._order)
        ]

    def unranked_disabled(self) -> List[str]:
        """Disabled vaccines that are not part of the ordering, sorted by id."""
        return sorted(self._disabled.difference(self._order))

    def snapshot(self) -> PrioritySnapshot:
        return PrioritySnapshot(
            entries=tuple(self.entries()),
            disabled=frozenset(self.unranked_disabled()),
        )

    def as_dict(self) -> Dict[str, bool]:
        """Enabled flag per ranked vaccine, then False for each unranked disabled one."""
        flags = {vid: self.is_enabled(vid) for vid in self._order}
        flags.update((vid, False) for vid in self.unranked_disabled())
        return flags

    def __len__(self) -> int:
        return len(self._order)
