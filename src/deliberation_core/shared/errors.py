"""Base exceptions for the deliberation core.

Domain-specific exceptions extend these in the domain layer.
"""


class DeliberationError(Exception):
    """Base exception for all deliberation core errors."""

    def __init__(self, message: str, *args: object, **kwargs: object) -> None:
        self.message = message
        super().__init__(message, *args)


class ConfigurationError(DeliberationError):
    """Exception for structurally invalid configuration."""

    pass


class InputError(DeliberationError):
    """Exception for inputs that violate an operation's preconditions."""

    pass
