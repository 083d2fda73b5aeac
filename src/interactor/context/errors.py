"""Field-keyed error aggregate shared by contexts and results."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import enum
import typing

GENERIC = "generic"


class ErrorTag(enum.StrEnum):
    """Tags produced by attribute validation."""

    BLANK = "blank"
    INVALID = "invalid"


_TAG_MESSAGES: dict[str, str] = {
    ErrorTag.BLANK: "can't be blank",
    ErrorTag.INVALID: "is invalid",
}


def humanize(field: str) -> str:
    """Return a sentence-case label for a field name (``password_confirmation`` -> ``Password confirmation``)."""
    return field.replace("_", " ").strip().capitalize()


class Errors(Mapping[str, list[str]]):
    """Ordered mapping from field name to the list of its messages.

    Messages are either `ErrorTag` values or free-form strings coming from
    validation rules or from `Interactor.fail`.
    """

    __slots__ = ("_messages",)

    def __init__(self, initial: Mapping[str, typing.Any] | None = None):
        self._messages: dict[str, list[str]] = {}
        if initial:
            self.merge(initial)

    def add(self, field: str, message: str) -> None:
        """Append `message` to `field`."""
        self._messages.setdefault(str(field), []).append(message)

    def merge(self, other: Mapping[str, typing.Any]) -> None:
        """Append every message of `other`; scalar values are treated as one message."""
        for field, messages in other.items():
            if isinstance(messages, str) or not isinstance(messages, Iterable):
                messages = [messages]
            for message in messages:
                self.add(field, message)

    def clear(self) -> None:
        """Remove every message."""
        self._messages.clear()

    @property
    def is_empty(self) -> bool:
        """True when no field has messages."""
        return not self._messages

    def full_messages(self) -> list[str]:
        """Sentence-style messages, e.g. ``"Email can't be blank"``.

        Messages recorded under the generic key are returned unchanged.
        """
        return [
            full_message(field, message)
            for field, messages in self._messages.items()
            for message in messages
        ]

    def to_dict(self) -> dict[str, list[str]]:
        """Return a plain copy of the aggregate."""
        return {field: list(messages) for field, messages in self._messages.items()}

    def __getitem__(self, field: str) -> list[str]:
        return self._messages[str(field)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"


def full_message(field: str, message: typing.Any) -> str:
    """Render a single field message the way `Errors.full_messages` does."""
    text = _TAG_MESSAGES.get(message, message) if isinstance(message, str) else str(message)
    if field == GENERIC:
        return text
    return f"{humanize(field)} {text}"
