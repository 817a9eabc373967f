from deliberation_core.shared.errors import (
    ConfigurationError,
    DeliberationError,
    InputError,
)

__all__ = [
    "BracketStateError",
    "ConfigurationError",
    "DeliberationError",
    "FatalError",
    "InputError",
    "InvalidDatePresetError",
    "UnknownModeError",
    "UnknownProtocolError",
]


class FatalError(DeliberationError):
    pass


class UnknownModeError(ConfigurationError):
    def __init__(self, mode: str, *args: object, **kwargs: object) -> None:
        self.mode = mode
        super().__init__(f"Unknown deliberation mode: '{mode}'", *args)


class InvalidDatePresetError(ConfigurationError):
    def __init__(self, preset: str, *args: object, **kwargs: object) -> None:
        self.preset = preset
        super().__init__(
            f"Invalid date range preset: '{preset}'. "
            "Expected one of: 7d, 30d, 90d, all",
            *args,
        )


class UnknownProtocolError(ConfigurationError):
    def __init__(self, protocol: str, *args: object, **kwargs: object) -> None:
        self.protocol = protocol
        super().__init__(f"Unknown parse protocol: '{protocol}'", *args)


class BracketStateError(InputError):
    """Raised when a bracket operation sees rounds in an impossible state."""

    def __init__(
        self,
        message: str,
        round_number: int | None = None,
        *args: object,
        **kwargs: object,
    ) -> None:
        self.round_number = round_number
        enhanced_message = message
        if round_number is not None:
            enhanced_message = f"[round {round_number}] {enhanced_message}"
        super().__init__(enhanced_message, *args)
