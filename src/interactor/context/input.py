"""Input context: the declared arguments of an interactor."""

from __future__ import annotations

import typing

from interactor.context.attribute import NO_DEFAULT, Attribute
from interactor.context.base import Context


class Input(Context):
    """Holds and validates the arguments an interactor was called with.

    Example:
        class CreateUserInput(Input):
            email = argument(str, "The email address of the user", required=True)

        CreateUserInput(email="hello@example.com").arguments
        # {'email': 'hello@example.com'}
    """

    _declaration_kinds = frozenset({"argument"})

    @classmethod
    def argument(
        cls,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ) -> Attribute:
        """Declare an argument after the class has been defined."""
        return cls._declare(name, type, description, required=required, default=default)

    @classmethod
    def argument_names(cls) -> tuple[str, ...]:
        return cls.attribute_names()

    @property
    def arguments(self) -> dict[str, typing.Any]:
        """Map argument names to their values."""
        return self.to_dict()
