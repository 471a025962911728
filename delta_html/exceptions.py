"""Package-specific exception types."""

from __future__ import annotations


class DeltaError(Exception):
    """Base class for errors raised while rendering a delta."""


class UnsupportedDeltaTypeError(DeltaError, TypeError):
    """Raised when a delta is neither a JSON document nor a mapping.

    Args:
        value: The rejected input.
    """

    def __init__(self, value: object):
        self.kind = type(value).__name__
        super().__init__(
            f"The delta has an unsupported type ({self.kind}). "
            "Only JSON strings and mappings are supported."
        )


class FormatError(DeltaError, ValueError):
    """Raised when a delta does not have the expected shape.

    Represents missing or malformed ``ops`` and invalid JSON input.
    """


class MalformedOperationError(FormatError):
    """Raised when an operation is not a mapping carrying an ``insert``.

    Args:
        index: Zero-based position of the offending operation.
        reason: Short description of what is wrong with it.
    """

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Malformed operation at index {index}: {reason}")


class InvalidAttributeError(FormatError):
    """Raised when an attribute value falls outside its supported domain.

    Args:
        name: Attribute key, for example ``"header"``.
        value: The offending value.
    """

    def __init__(self, name: str, value: object):
        self.name = name
        self.value = value
        super().__init__(f"Unsupported value for `{name}` attribute: {value!r}")
