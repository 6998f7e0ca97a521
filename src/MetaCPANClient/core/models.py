from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional


@dataclass(frozen=True, slots=True)
class EntityRecord:
    """Read-only record returned by the MetaCPAN API.

    Records are built only from decoded responses and never change
    afterwards. The full document is kept in `data`; subclasses add a few
    typed accessors for commonly used fields.

    Attributes:
        id: Value of the kind's identifying field.
        data: Decoded document as returned by the backend.
    """

    kind: ClassVar[str] = ""

    id: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def get(self, key: str, default: Any = None) -> Any:
        """Return a document field, or `default` when absent."""
        return self.data.get(key, default)

    def _str(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        return str(value) if value is not None else None


@dataclass(frozen=True, slots=True)
class Author(EntityRecord):
    """A CPAN author, identified by PAUSE ID."""

    kind: ClassVar[str] = "author"

    @property
    def pauseid(self) -> str:
        return self.id

    @property
    def name(self) -> Optional[str]:
        return self._str("name")

    @property
    def email(self) -> tuple[str, ...]:
        # The backend sends either a single address or a list.
        raw = self.data.get("email")
        if raw is None:
            return ()
        if isinstance(raw, (list, tuple)):
            return tuple(str(item) for item in raw)
        return (str(raw),)


@dataclass(frozen=True, slots=True)
class Module(EntityRecord):
    """A module document, identified by its documented package name."""

    kind: ClassVar[str] = "module"

    @property
    def distribution(self) -> Optional[str]:
        return self._str("distribution")

    @property
    def release(self) -> Optional[str]:
        return self._str("release")

    @property
    def author(self) -> Optional[str]:
        return self._str("author")


@dataclass(frozen=True, slots=True)
class Distribution(EntityRecord):
    """A distribution, identified by name (e.g. ``Moose``)."""

    kind: ClassVar[str] = "distribution"

    @property
    def name(self) -> str:
        return self.id


@dataclass(frozen=True, slots=True)
class Release(EntityRecord):
    """A single uploaded release, identified by ``<dist>-<version>``."""

    kind: ClassVar[str] = "release"

    @property
    def name(self) -> str:
        return self.id

    @property
    def distribution(self) -> Optional[str]:
        return self._str("distribution")

    @property
    def version(self) -> Optional[str]:
        return self._str("version")

    @property
    def author(self) -> Optional[str]:
        return self._str("author")

    @property
    def date(self) -> Optional[str]:
        return self._str("date")

    @property
    def status(self) -> Optional[str]:
        return self._str("status")


@dataclass(frozen=True, slots=True)
class File(EntityRecord):
    """A file inside a release."""

    kind: ClassVar[str] = "file"

    @property
    def path(self) -> Optional[str]:
        return self._str("path")

    @property
    def release(self) -> Optional[str]:
        return self._str("release")


@dataclass(frozen=True, slots=True)
class Favorite(EntityRecord):
    """A user's ++ on a distribution."""

    kind: ClassVar[str] = "favorite"

    @property
    def user(self) -> Optional[str]:
        return self._str("user")

    @property
    def distribution(self) -> Optional[str]:
        return self._str("distribution")


@dataclass(frozen=True, slots=True)
class Rating(EntityRecord):
    """A CPAN ratings entry."""

    kind: ClassVar[str] = "rating"

    @property
    def distribution(self) -> Optional[str]:
        return self._str("distribution")

    @property
    def rating(self) -> Optional[float]:
        value = self.data.get("rating")
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            return None
        try:
            return float(value)
        except ValueError:
            return None
