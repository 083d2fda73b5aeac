"""Runtime context: the working surface handed to business logic."""

from __future__ import annotations

from collections.abc import Mapping
import typing

from interactor.context.base import Context


class Runtime(Context):
    """Input and output declarations plus an open table for ad-hoc values.

    Declared names behave as on any context. Undeclared names are stored in
    a side table without type or presence checks; reading one that was
    never written returns None.
    """

    _declaration_kinds = frozenset()

    def __init__(self, values: Mapping[str, typing.Any] | None = None, /, **kwargs: typing.Any):
        object.__setattr__(self, "_table", {})
        super().__init__(values, **kwargs)

    def _read_undeclared(self, name: str) -> typing.Any:
        return self._table.get(name)

    def _write_undeclared(self, name: str, value: typing.Any) -> None:
        self._table[name] = value

    @property
    def attributes(self) -> dict[str, typing.Any]:
        """Ad-hoc values overlaid with the declared attribute values."""
        return {**self._table, **self._attributes.values()}

    def to_dict(self) -> dict[str, typing.Any]:
        return self.attributes
