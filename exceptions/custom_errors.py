class UnknownVaccineIdError(Exception):
    """Raised when a vaccine id is not present in the vaccine catalog."""

    def __init__(self, vaccine_id: str):
        super().__init__(f"Unknown vaccine id: {vaccine_id!r}")
        self.vaccine_id = vaccine_id


class InvalidDoseDateError(Exception):
    """Raised when a dose date is impossible for the profile (before birth, in the future, out of series order)."""

    pass


class DoseSequenceError(Exception):
    """Raised when a dose's series position clashes with another recorded dose of the same vaccine."""

    pass


class MissingRuleFieldError(Exception):
    """Raised when a catalog entry lacks the interval or age data needed to schedule it."""

    def __init__(self, vaccine_id: str, fields):
        super().__init__(f"Rule {vaccine_id!r} is missing: {', '.join(fields)}")
        self.vaccine_id = vaccine_id
        self.fields = tuple(fields)


class DuplicateVaccineIdError(Exception):
    """Raised when the same vaccine id is defined twice in one catalog."""

    pass


class InvalidPriorityOrderError(Exception):
    """Raised when a priority ordering contains duplicates."""

    pass


class FileReadingError(Exception):
    """Raised when there is an error reading a file."""

    pass


class FileContentError(Exception):
    """Raised when the content of a file is not as expected."""

    pass


# Mapping of recoverable exceptions to the prompt shown when an edit is rejected
RECOVERABLE_ERRORS = {
    UnknownVaccineIdError: "Pick a vaccine from the catalog.",
    InvalidDoseDateError: "Check the date the dose was given.",
    DoseSequenceError: "Check which dose in the series this was.",
    InvalidPriorityOrderError: "Each vaccine may appear only once in the priority list.",
    FileReadingError: "The file could not be opened.",
    FileContentError: "The file does not contain the expected columns.",
}


def user_prompt_for(error: Exception) -> str:
    """Return the correction prompt for a recoverable error, falling back to its message."""
    for error_type, prompt in RECOVERABLE_ERRORS.items():
        if isinstance(error, error_type):
            return prompt
    return str(error)
