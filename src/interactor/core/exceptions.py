"""Exceptions raised by interactors and their declarations"""  # noqa: D415

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from interactor.core.result import Result


class InteractorError(Exception):
    """Base exception for the interactor library"""  # noqa: D415


class DeclarationError(InteractorError, ValueError):
    """Raised when an argument, field, rule or hook declaration is invalid"""  # noqa: D415


class InteractorFailure(InteractorError):
    """Raised when an interactor fails; carries the failed `Result`.

    `perform_or_raise` surfaces one of the subclasses below so callers can
    match on the stage that failed. `perform` catches it and returns
    `result` instead.
    """

    def __init__(self, result: Result, message: str | None = None):
        """Initialize with the failed result and an optional message."""
        self.result = result
        super().__init__(message or self._default_message(result))

    @staticmethod
    def _default_message(result: Result) -> str:
        messages = result.full_messages()
        return "; ".join(messages) if messages else f"failed with status {result.status.name}"


class InputValidationError(InteractorFailure):
    """Raised when declared arguments fail validation before `interact` runs"""  # noqa: D415


class OutputValidationError(InteractorFailure):
    """Raised when declared return fields fail validation after `interact`"""  # noqa: D415


class ExplicitFailure(InteractorFailure):
    """Raised when business logic calls `fail()`"""  # noqa: D415


class UnhandledError(InteractorFailure):
    """Raised by `perform_or_raise` when an unexpected exception escapes"""  # noqa: D415
