"""Error taxonomy for the MetaCPAN client.

Every error raised by the client derives from `MetaCPANError`, so callers can
catch the whole family at one boundary. Spec and kind errors also derive from
the matching builtin (`ValueError`, `NotImplementedError`).
"""

from __future__ import annotations


class MetaCPANError(Exception):
    """Generic client error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def name(self) -> str:
        """Error name."""
        return self.__class__.__name__

    def __str__(self) -> str:
        return f"{self.name}({self.message})"


class InvalidSpecShape(MetaCPANError, ValueError):
    """A search spec mapping is malformed."""


class UnknownEntityKind(MetaCPANError, ValueError):
    """The entity kind token is not one of the supported kinds."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown entity kind: {kind!r}")
        self.kind = kind


class EntityNotImplemented(MetaCPANError, NotImplementedError):
    """The entity kind is recognised but has no implementation."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Entity kind {kind!r} is not implemented")
        self.kind = kind


class NotFoundError(MetaCPANError):
    """The backend reports that the requested resource does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Resource not found: {path}")
        self.path = path


class TransportError(MetaCPANError):
    """Network or backend failure."""

    def __init__(self, path: str, reason: str, *, status: int | None = None) -> None:
        super().__init__(f"Failed to fetch '{path}': {reason}")
        self.path = path
        self.reason = reason
        self.status = status


class DecodeError(MetaCPANError):
    """A successful response carries malformed JSON or misses required fields."""
