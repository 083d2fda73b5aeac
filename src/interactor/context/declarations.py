"""Class-body declarations of arguments and return fields.

Used both on interactors and on standalone context classes::

    class CreateUser(Interactor):
        login = argument(str, "The login for the user", required=True)
        user = returns(User, "The created user", required=True)

The declaration objects are collected by ``__init_subclass__`` in
declaration order and replaced by attribute accessors.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import typing

from interactor.context.attribute import NO_DEFAULT

DeclarationKind = typing.Literal["argument", "returns"]


@dataclasses.dataclass(frozen=True, slots=True)
class Declaration:
    """A pending argument or return field declaration."""

    kind: DeclarationKind
    type: typing.Any
    description: str | None = None
    required: bool = False
    default: typing.Any = NO_DEFAULT

    def options(self) -> dict[str, typing.Any]:
        return {"required": self.required, "default": self.default}


def argument(
    type: typing.Any,  # noqa: A002
    description: str | None = None,
    *,
    required: bool = False,
    default: typing.Any = NO_DEFAULT,
) -> typing.Any:
    """Declare an input argument in a class body."""
    return Declaration("argument", type, description, required, default)


def returns(
    type: typing.Any,  # noqa: A002
    description: str | None = None,
    *,
    required: bool = False,
    default: typing.Any = NO_DEFAULT,
) -> typing.Any:
    """Declare an output field in a class body."""
    return Declaration("returns", type, description, required, default)


def collect(namespace: Mapping[str, typing.Any]) -> list[tuple[str, Declaration]]:
    """Return the declarations of a class namespace in definition order."""
    return [(name, value) for name, value in namespace.items() if isinstance(value, Declaration)]
