class InvalidInput(ValueError):
    """Raised when a caller-supplied parameter is out of its valid range."""

    def __init__(self, field, message):
        self.field = field
        super().__init__(f"{field}: {message}")


class DomainError(ValueError):
    """Raised when a rate law is evaluated outside its mathematical domain."""
