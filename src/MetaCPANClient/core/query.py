"""Search spec model.

A search spec is what callers write to describe a MetaCPAN search. It is a
tagged union with three constructors:

- `SimpleSpec`: field -> value matches, all of which must hold
- `EitherSpec`: any child spec matches (OR)
- `AllSpec`: every child spec matches (AND)

`EitherSpec` and `AllSpec` carry an optional `exclude` list, the `not`
modifier. Its children must not match.

Callers usually write plain mappings, in the same shape the backend DSL
borrows its vocabulary from::

    {"either": [{"name": "Dave *"}, {"name": "David *"}],
     "not": [{"email": "*gmail.com"}]}

`parse_search_spec` validates such a mapping into the typed union. Values
containing ``*`` are wildcard matches; any other value is an exact term.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union

from MetaCPANClient.core.errors import InvalidSpecShape

EITHER_KEY = "either"
ALL_KEY = "all"
NOT_KEY = "not"
WILDCARD = "*"

Scalar = Union[str, int, float, bool]
_SCALAR_TYPES = (str, int, float, bool)


@dataclass(frozen=True, slots=True)
class SimpleSpec:
    """Field matches joined by AND.

    Attributes:
        fields: ``(field, value)`` pairs, sorted by field name.
    """

    fields: tuple[tuple[str, Scalar], ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise InvalidSpecShape("simple spec must contain at least one field")
        for field, value in self.fields:
            if not isinstance(field, str) or not field.strip():
                raise InvalidSpecShape(f"spec field name must be a non-empty string: {field!r}")
            if field in (EITHER_KEY, ALL_KEY, NOT_KEY):
                raise InvalidSpecShape(f"'{field}' is reserved and cannot be used as a field name")
            if not isinstance(value, _SCALAR_TYPES):
                raise InvalidSpecShape(f"value for field '{field}' must be a scalar, got {type(value).__name__}")
        object.__setattr__(self, "fields", tuple(sorted(self.fields, key=lambda pair: pair[0])))

    @classmethod
    def of(cls, **fields: Scalar) -> SimpleSpec:
        """Build a simple spec from keyword arguments."""
        return cls(fields=tuple(fields.items()))


@dataclass(frozen=True, slots=True)
class EitherSpec:
    """Any child spec matches."""

    children: tuple[SearchSpec, ...]
    exclude: tuple[SearchSpec, ...] = ()

    def __post_init__(self) -> None:
        _check_group(EITHER_KEY, self.children, self.exclude)
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "exclude", tuple(self.exclude))


@dataclass(frozen=True, slots=True)
class AllSpec:
    """Every child spec matches."""

    children: tuple[SearchSpec, ...]
    exclude: tuple[SearchSpec, ...] = ()

    def __post_init__(self) -> None:
        _check_group(ALL_KEY, self.children, self.exclude)
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "exclude", tuple(self.exclude))


SearchSpec = Union[SimpleSpec, EitherSpec, AllSpec]
_SPEC_TYPES = (SimpleSpec, EitherSpec, AllSpec)


def is_search_spec(value: object) -> bool:
    """Return True when value is a typed spec or a spec mapping."""
    return isinstance(value, _SPEC_TYPES) or isinstance(value, Mapping)


def parse_search_spec(raw: SearchSpec | Mapping[str, Any]) -> SearchSpec:
    """Validate a spec mapping into the typed spec union.

    Args:
        raw: Spec mapping, or an already typed spec (returned unchanged).

    Returns:
        Typed search spec.

    Raises:
        InvalidSpecShape: If the mapping is not a well-formed spec.
    """
    return _parse(raw, "spec")


def _parse(raw: object, path: str) -> SearchSpec:
    if isinstance(raw, _SPEC_TYPES):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidSpecShape(f"{path} must be a mapping, got {type(raw).__name__}")
    if not raw:
        raise InvalidSpecShape(f"{path} must not be empty")

    has_either = EITHER_KEY in raw
    has_all = ALL_KEY in raw
    if has_either and has_all:
        raise InvalidSpecShape(f"{path} cannot combine '{EITHER_KEY}' and '{ALL_KEY}'")

    if has_either or has_all:
        mode = EITHER_KEY if has_either else ALL_KEY
        extra = sorted(str(key) for key in raw if key not in (mode, NOT_KEY))
        if extra:
            raise InvalidSpecShape(f"{path} mixes '{mode}' with field keys: {', '.join(extra)}")
        children = _parse_list(raw[mode], f"{path}.{mode}")
        exclude: tuple[SearchSpec, ...] = ()
        if NOT_KEY in raw:
            exclude = _parse_list(raw[NOT_KEY], f"{path}.{NOT_KEY}")
        spec_type = EitherSpec if has_either else AllSpec
        return spec_type(children=children, exclude=exclude)

    # Negating a bare field spec has no agreed meaning yet.
    if NOT_KEY in raw:
        raise InvalidSpecShape(f"{path} uses '{NOT_KEY}' without '{EITHER_KEY}' or '{ALL_KEY}'")

    try:
        return SimpleSpec(fields=tuple(raw.items()))
    except InvalidSpecShape as error:
        raise InvalidSpecShape(f"{path}: {error.message}") from error


def _parse_list(value: object, path: str) -> tuple[SearchSpec, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidSpecShape(f"{path} must be a list of specs")
    if not value:
        raise InvalidSpecShape(f"{path} must not be empty")
    return tuple(_parse(item, f"{path}[{idx}]") for idx, item in enumerate(value))


def _check_group(mode: str, children: Sequence[object], exclude: Sequence[object]) -> None:
    if not children:
        raise InvalidSpecShape(f"'{mode}' must contain at least one spec")
    for child in (*children, *exclude):
        if not isinstance(child, _SPEC_TYPES):
            raise InvalidSpecShape(f"'{mode}' children must be search specs, got {type(child).__name__}")
