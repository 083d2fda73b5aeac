"""The success/failure envelope returned by every interactor invocation.

Results are immutable and only built through `Result.success` and
`Result.failure`, so status, data and errors are always consistent.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import enum
from types import MappingProxyType
import typing

from pydantic_core import to_json

from interactor.context.errors import GENERIC, Errors, full_message

_FACTORY = object()


class Status(enum.IntEnum):
    """Status codes of an interactor result."""

    SUCCESS = 0
    FAILED_AT_INPUT = 1
    FAILED_AT_RUNTIME = 2
    FAILED_AT_OUTPUT = 3


ErrorsLike = str | Errors | Mapping[str, typing.Any] | None


class Messages(tuple[str, ...]):
    """Read-only messages of one field; compares equal to a list of the same messages."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, list):
            other = tuple(other)
        return tuple.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    __hash__ = tuple.__hash__

    def __repr__(self) -> str:
        return repr(list(self))


def normalize_errors(errors: ErrorsLike) -> Mapping[str, Messages]:
    """Return a read-only field → messages mapping.

    A bare string becomes ``{"generic": [string]}``; mapping values that are
    not sequences are wrapped as single messages.
    """
    if errors is None:
        return MappingProxyType({})
    if isinstance(errors, str):
        return MappingProxyType({GENERIC: Messages((errors,))})
    aggregate = errors if isinstance(errors, Errors) else Errors(errors)
    return MappingProxyType(
        {field: Messages(messages) for field, messages in aggregate.items()}
    )


def _serialize(data: typing.Any) -> typing.Any:
    to_dict = getattr(data, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(data, Mapping):
        return dict(data)
    return data


@dataclasses.dataclass(frozen=True, slots=True)
class Result:
    """Outcome of an interactor.

    Attributes:
        status: One of `Status`.
        data: The result snapshot on success; on failure whatever output
            state existed, or an empty mapping.
        errors: Field name → messages; ``"generic"`` holds messages that do
            not belong to a field.
    """

    status: Status
    data: typing.Any = dataclasses.field(default_factory=lambda: MappingProxyType({}))
    errors: Mapping[str, Messages] = dataclasses.field(
        default_factory=lambda: MappingProxyType({})
    )
    _token: object = dataclasses.field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Reject construction outside the factories."""
        if self._token is not _FACTORY:
            raise TypeError("Results are created with Result.success() or Result.failure()")

    @classmethod
    def success(cls, data: typing.Any = None) -> Result:
        """Return a successful result wrapping `data`."""
        return cls(
            status=Status.SUCCESS,
            data=MappingProxyType({}) if data is None else data,
            _token=_FACTORY,
        )

    @classmethod
    def failure(
        cls,
        errors: ErrorsLike = None,
        *,
        data: typing.Any = None,
        status: Status = Status.FAILED_AT_RUNTIME,
    ) -> Result:
        """Return a failed result.

        Args:
            errors: A message (stored under ``"generic"``), an `Errors`
                aggregate, or a mapping of field → message(s).
            data: Whatever output state existed when the failure happened.
            status: The failing stage; defaults to `Status.FAILED_AT_RUNTIME`.

        Raises:
            ValueError: If `status` is `Status.SUCCESS`.
        """
        status = Status(status)
        if status is Status.SUCCESS:
            raise ValueError("a failed result cannot have status SUCCESS")
        return cls(
            status=status,
            data=MappingProxyType({}) if data is None else data,
            errors=normalize_errors(errors),
            _token=_FACTORY,
        )

    @property
    def is_success(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    successful = is_success
    failed = is_failure

    def full_messages(self) -> list[str]:
        """Sentence-style error messages, e.g. ``"Login can't be blank"``."""
        return [
            full_message(field, message)
            for field, messages in self.errors.items()
            for message in messages
        ]

    def to_dict(self) -> dict[str, typing.Any]:
        """Return ``{success, status, errors, data}`` with `data` serialized."""
        return {
            "success": self.is_success,
            "status": int(self.status),
            "errors": {field: list(messages) for field, messages in self.errors.items()},
            "data": _serialize(self.data),
        }

    def to_json(self) -> str:
        return to_json(self.to_dict(), serialize_unknown=True).decode()
