class OptimizerError(Exception):
    """Base class for all schedule optimizer exceptions."""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(OptimizerError):
    """Raised when optimizer configuration or a recurrence rule is invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details)
