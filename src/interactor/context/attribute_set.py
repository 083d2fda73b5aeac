"""Ordered, name-keyed collection of attributes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import typing

from interactor.context.attribute import NO_DEFAULT, Attribute


class AttributeSet:
    """Insertion-ordered mapping of attribute name to `Attribute`.

    Names are normalized with ``str()`` on insertion and lookup, so
    ``StrEnum`` members and plain strings resolve to the same slot.
    """

    __slots__ = ("_set",)

    def __init__(self, *attributes: Attribute):
        self._set: dict[str, Attribute] = {}
        self.merge(attributes)

    def add(
        self,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ) -> Attribute:
        """Create an attribute and insert it, replacing any with the same name."""
        attribute = Attribute(name, type, description, required=required, default=default)
        self._set[attribute.name] = attribute
        return attribute

    def find(self, name: typing.Any) -> Attribute | None:
        """Return the attribute named `name`, or None."""
        return self._set.get(str(name))

    def merge(self, attributes: Iterable[Attribute]) -> None:
        """Insert `attributes`, overwriting on name collision."""
        for attribute in attributes:
            self._set[attribute.name] = attribute

    def clone(self) -> AttributeSet:
        """Return an independent set of unassigned attribute copies."""
        return AttributeSet(*(attribute.copy() for attribute in self._set.values()))

    @property
    def attributes(self) -> tuple[Attribute, ...]:
        return tuple(self._set.values())

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._set)

    def values(self) -> dict[str, typing.Any]:
        """Map each attribute name to its current value."""
        return {name: attribute.value for name, attribute in self._set.items()}

    def __contains__(self, name: object) -> bool:
        return str(name) in self._set

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self._set.values())

    def __len__(self) -> int:
        return len(self._set)

    def __repr__(self) -> str:
        return f"AttributeSet({', '.join(self._set)})"
