"""Exceptions raised while converting RAML documents."""


class ConversionError(Exception):
    """Base class for every error raised by the converter."""


class FatalInputError(ConversionError):
    """The input cannot be converted at all (missing document, unreadable file)."""


class MappingError(ConversionError):
    """A single type, security scheme or operation could not be mapped."""

    def __init__(self, kind: str, name: str, reason: str):
        self.kind = kind
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to map {kind} '{name}': {reason}")


class StrictModeError(ConversionError):
    """Raised after a strict conversion pass that recorded mapping failures."""

    def __init__(self, failures: list[MappingError]):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} mapping failure(s):"]
        lines.extend(f"  - {failure}" for failure in self.failures)
        super().__init__("\n".join(lines))
