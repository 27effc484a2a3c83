class StatementError(Exception):
    """Base class for failures surfaced to callers of the pipeline."""


class StatementReadError(StatementError):
    def __init__(self, message: str = "Failed to read file"):
        super().__init__(message)


class StandardizationError(StatementError):
    def __init__(self, message: str = "Failed to standardize statement"):
        super().__init__(message)
