"""Output context: the declared return fields of an interactor."""

from __future__ import annotations

import typing

from interactor.context.attribute import NO_DEFAULT, Attribute
from interactor.context.base import Context
from interactor.context.result import ResultData
from interactor.core.exceptions import DeclarationError


class Output(Context):
    """Holds and validates the fields an interactor returns."""

    _declaration_kinds = frozenset({"returns"})

    @classmethod
    def returns(
        cls,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ) -> Attribute:
        """Declare a return field after the class has been defined."""
        return cls._declare(name, type, description, required=required, default=default)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return cls.attribute_names()

    @classmethod
    def _check_name(cls, name: str) -> None:
        super()._check_name(name)
        # Field names also become attributes of the result snapshot.
        if name in ResultData.RESERVED_NAMES:
            raise DeclarationError(f"{name!r} is reserved on result data")

    @property
    def fields(self) -> dict[str, typing.Any]:
        """Map field names to their values."""
        return self.to_dict()
