# publicview/core/exceptions.py

"""Custom exception hierarchy for publicview.

Redaction itself is total over acyclic input; the errors below come from the
wire encoders, from cycle detection, and from configuration loading.
"""


class PublicViewError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(PublicViewError):
    """Raised when settings or the field policy file are invalid."""

    pass


class MarshalError(PublicViewError):
    """Raised when a redacted value tree cannot be encoded to the wire format."""

    pass


class CyclicReferenceError(MarshalError):
    """Raised when a value refers back to one of its own ancestors."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Cyclic reference detected at value of type '{type_name}'")
