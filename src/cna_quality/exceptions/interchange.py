"""Interchange (TOSCA template) exceptions."""

from typing import Optional

from .base import CnaQualityError


class InterchangeError(CnaQualityError):
    """Base class for template conversion and import errors."""

    pass


class TemplateFormatError(InterchangeError):
    """Raised when a service template cannot be read as an architecture model."""

    def __init__(self, reason: str, key: Optional[str] = None):
        details = {"reason": reason}
        if key is not None:
            details["key"] = key
        super().__init__(f"Malformed service template: {reason}", details=details)
        self.reason = reason
        self.key = key


class UnknownKeyError(InterchangeError, KeyError):
    """Raised when a template key or entity id has no counterpart in a key/id map."""

    def __init__(self, kind: str, value: str):
        super().__init__(f"No {kind} mapped for {value!r}", details={kind: value})
        self.kind = kind
        self.value = value

    def __str__(self) -> str:
        return CnaQualityError.__str__(self)
