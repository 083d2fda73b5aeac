"""A single named, typed value slot of a context."""

from __future__ import annotations

from collections.abc import Sized
import copy
import enum
import typing

from interactor.context.errors import ErrorTag
from interactor.core.type_expressions import coerce, describe, is_valid, is_wildcard


class _Sentinel(enum.Enum):
    NO_DEFAULT = "no default"
    UNSET = "unset"

    def __repr__(self) -> str:
        return f"<{self.value}>"


NO_DEFAULT = _Sentinel.NO_DEFAULT
_UNSET = _Sentinel.UNSET


def is_blank(value: typing.Any) -> bool:
    """Return True for None, False, empty/whitespace strings and empty collections.

    Numbers (including 0) are never blank.
    """
    if value is None or value is False or value is _UNSET:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


class Attribute:
    """A declared argument or return field.

    Declarations on a context class act as templates; every context instance
    works on its own `copy()` so assigned values and error messages never leak
    between instances.

    Note that a blank user value (``None``, ``False``, ``""``, ``[]``...) falls
    back to the default. A caller passing ``False`` for an attribute that
    defaults to ``True`` therefore reads back ``True``.
    """

    __slots__ = ("_default", "_value", "description", "error_messages", "name", "required", "type")

    def __init__(
        self,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ):
        """Initialize the attribute declaration."""
        self.name = str(name)
        self.type = coerce(type)
        self.description = description
        self.required = bool(required)
        self._default = default
        self._value: typing.Any = _UNSET
        self.error_messages: list[str] = []

    @property
    def has_default(self) -> bool:
        return self._default is not NO_DEFAULT

    @property
    def default_value(self) -> typing.Any:
        """The declared default, or None when no default was declared."""
        return None if self._default is NO_DEFAULT else self._default

    @property
    def value(self) -> typing.Any:
        """The assigned value unless blank, otherwise the default."""
        if not is_blank(self._value):
            return self._value
        return self.default_value

    def assign_value(self, value: typing.Any) -> None:
        """Overwrite the user-provided value; validation happens in `validate`."""
        self._value = value

    def validate(self) -> list[str]:
        """Recompute `error_messages` and return them.

        Presence and type are checked independently; a None value is never
        reported as invalid.
        """
        self.error_messages = []
        value = self.value
        if self.required and is_blank(value):
            self.error_messages.append(ErrorTag.BLANK)
        if value is not None and not is_wildcard(self.type) and not is_valid(self.type, value):
            self.error_messages.append(ErrorTag.INVALID)
        return self.error_messages

    @property
    def is_valid(self) -> bool:
        return not self.error_messages

    def copy(self) -> Attribute:
        """Return an unassigned copy with the same declaration."""
        return Attribute(
            self.name,
            self.type,
            self.description,
            required=self.required,
            default=copy.deepcopy(self._default),
        )

    def __repr__(self) -> str:
        parts = [f"{self.name!r}", describe(self.type)]
        if self.required:
            parts.append("required=True")
        if self.has_default:
            parts.append(f"default={self._default!r}")
        return f"Attribute({', '.join(parts)})"
