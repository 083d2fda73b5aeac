"""Immutable snapshot of an output context handed back to callers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import dataclasses
import typing

from pydantic_core import to_json


class ResultData:
    """Base class of the per-interactor result snapshot.

    `for_fields` generates a frozen dataclass with one field per declared
    output field, so a successful result reads ``result.data.user`` or
    ``result.data["user"]``. The snapshot copies the field mapping, not the
    values themselves.
    """

    __slots__ = ()

    RESERVED_NAMES: typing.ClassVar[frozenset[str]] = frozenset(
        {"for_fields", "from_mapping", "get", "keys", "to_dict", "to_json", "RESERVED_NAMES"}
    )

    @classmethod
    def for_fields(cls, owner_name: str, field_names: Iterable[str]) -> type[ResultData]:
        """Generate the snapshot class for an interactor's output fields."""
        return dataclasses.make_dataclass(
            f"{owner_name}Result",
            [(name, typing.Any, dataclasses.field(default=None)) for name in field_names],
            bases=(cls,),
            frozen=True,
            slots=True,
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, typing.Any]) -> ResultData:
        """Build a snapshot from `values`, ignoring names that are not fields."""
        names = {field.name for field in dataclasses.fields(cls)}  # type: ignore[arg-type]
        return cls(**{name: value for name, value in values.items() if name in names})

    def keys(self) -> tuple[str, ...]:
        return tuple(field.name for field in dataclasses.fields(self))  # type: ignore[arg-type]

    def get(self, name: str, default: typing.Any = None) -> typing.Any:
        return getattr(self, name) if name in self.keys() else default

    def to_dict(self) -> dict[str, typing.Any]:
        return {name: getattr(self, name) for name in self.keys()}

    def to_json(self) -> str:
        return to_json(self.to_dict(), serialize_unknown=True).decode()

    def __getitem__(self, name: str) -> typing.Any:
        if name not in self.keys():
            raise KeyError(name)
        return getattr(self, name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, name: object) -> bool:
        return name in self.keys()
