"""Type expressions used to declare argument and field types.

A type expression is one of:

- a wildcard (`ANY` / `UNTYPED`) that accepts every value;
- a plain Python class, checked with `isinstance`;
- a `TypeExpression` instance (`ListOf`, `UnionOf`) or class (`Boolean`)
  that knows how to check a value itself.

`is_valid` never raises; callers turn a `False` into an ``"invalid"`` tag.
"""

from __future__ import annotations

import enum
import types
import typing

from interactor.core.exceptions import DeclarationError

__all__ = [
    "ANY",
    "UNTYPED",
    "Boolean",
    "ListOf",
    "TypeExpression",
    "UnionOf",
    "Wildcard",
    "any_type",
    "array_of",
    "coerce",
    "describe",
    "is_valid",
    "is_wildcard",
    "list_of",
    "union_of",
    "untyped",
]


class Wildcard(enum.Enum):
    """Sentinels accepting any value, including None."""

    ANY = "any"
    UNTYPED = "untyped"

    def __repr__(self) -> str:
        return f"<{self.value}>"


ANY = Wildcard.ANY
UNTYPED = Wildcard.UNTYPED


class TypeExpression:
    """Base class for composite type expressions."""

    __slots__ = ()

    def is_valid(self, value: typing.Any) -> bool:  # pragma: no cover - abstract
        raise NotImplementedError


class ListOf(TypeExpression):
    """A list (or tuple) whose elements all match `element_type`.

    None elements are always accepted.
    """

    __slots__ = ("element_type",)

    def __init__(self, element_type: typing.Any):
        self.element_type = element_type

    def is_valid(self, value: typing.Any) -> bool:
        if not isinstance(value, list | tuple):
            return False
        return all(is_valid(self.element_type, element) for element in value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ListOf) and other.element_type == self.element_type

    def __hash__(self) -> int:
        return hash((ListOf, self.element_type))

    def __repr__(self) -> str:
        return f"ListOf({describe(self.element_type)})"


class UnionOf(TypeExpression):
    """Matches None or any of `types`."""

    __slots__ = ("types",)

    def __init__(self, *types: typing.Any):
        if not types:
            raise ValueError("UnionOf requires at least one type")
        self.types = types

    def is_valid(self, value: typing.Any) -> bool:
        if value is None:
            return True
        return any(is_valid(member, value) for member in self.types)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UnionOf) and other.types == self.types

    def __hash__(self) -> int:
        return hash((UnionOf, self.types))

    def __repr__(self) -> str:
        return f"UnionOf({', '.join(describe(t) for t in self.types)})"


class Boolean(TypeExpression):
    """Accepts the literal truthy/falsy representations a form or env var produces.

    Membership is compared with exact types so that ``1.0`` or ``Decimal(1)``
    are rejected while ``1`` and ``True`` are accepted.
    """

    TRUE_VALUES: typing.ClassVar[tuple[typing.Any, ...]] = (
        True, 1, "1", "t", "T", "true", "TRUE", "on", "ON", "yes", "YES",
    )  # fmt: skip
    FALSE_VALUES: typing.ClassVar[tuple[typing.Any, ...]] = (
        False, 0, "0", "f", "F", "false", "FALSE", "off", "OFF", "no", "NO",
    )  # fmt: skip

    __slots__ = ()

    @classmethod
    def is_valid(cls, value: typing.Any) -> bool:  # type: ignore[override]
        return any(
            type(value) is type(candidate) and value == candidate
            for candidate in (*cls.TRUE_VALUES, *cls.FALSE_VALUES)
        )


def is_wildcard(type_expression: typing.Any) -> bool:
    """Return True for `ANY`/`UNTYPED` (and their string spellings)."""
    if isinstance(type_expression, Wildcard):
        return True
    return isinstance(type_expression, str) and type_expression in ("any", "untyped")


def is_valid(type_expression: typing.Any, value: typing.Any) -> bool:
    """Return whether `value` satisfies `type_expression`.

    None always passes; whether a value must be present is decided by the
    attribute's presence check, not here.
    """
    if value is None or is_wildcard(type_expression):
        return True
    if isinstance(type_expression, TypeExpression):
        return type_expression.is_valid(value)
    if isinstance(type_expression, type):
        if issubclass(type_expression, TypeExpression):
            return type_expression.is_valid(value)
        return isinstance(value, type_expression)
    return False


def coerce(type_expression: typing.Any) -> typing.Any:
    """Normalize a declared type into something `is_valid` understands.

    ``int | None`` and ``typing.Optional[int]`` become `UnionOf`, ``list[int]``
    becomes `ListOf` and ``typing.Any`` becomes `ANY`.

    Raises:
        DeclarationError: For anything that is neither a class, a wildcard,
            nor a type expression (for example ``"int"`` or ``dict[str, int]``).
    """
    if is_wildcard(type_expression):
        return type_expression
    if type_expression is typing.Any:
        return ANY
    if isinstance(type_expression, ListOf):
        return ListOf(coerce(type_expression.element_type))
    if isinstance(type_expression, UnionOf):
        return UnionOf(*(coerce(member) for member in type_expression.types))
    if isinstance(type_expression, TypeExpression):
        return type_expression
    origin = typing.get_origin(type_expression)
    if origin is typing.Union or origin is types.UnionType:
        return UnionOf(*(coerce(member) for member in typing.get_args(type_expression)))
    if origin is list:
        args = typing.get_args(type_expression)
        return ListOf(coerce(args[0]) if args else ANY)
    if isinstance(type_expression, type) and origin is None:
        return type_expression
    raise DeclarationError(f"Unsupported type expression: {type_expression!r}")


def describe(type_expression: typing.Any) -> str:
    """Human readable name of a type expression, used in reprs and docs."""
    if isinstance(type_expression, Wildcard):
        return type_expression.value
    if isinstance(type_expression, type):
        return type_expression.__name__
    return repr(type_expression)


# --- Declaration helpers ---


def any_type() -> Wildcard:
    """Return the `ANY` wildcard."""
    return ANY


def untyped() -> Wildcard:
    """Return the `UNTYPED` wildcard."""
    return UNTYPED


def list_of(element_type: typing.Any) -> ListOf:
    """Return a list type expression for `element_type`."""
    return ListOf(element_type)


array_of = list_of


def union_of(*types: typing.Any) -> UnionOf:
    """Return a union type expression over `types`."""
    return UnionOf(*types)
