"""Execution options for a single interactor invocation.

Options follow a resolve-once, freeze-then-flow pattern: they are resolved
from the environment and per-call overrides when an interactor is created,
then never change for that invocation.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import logging
import typing

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class Options:
    """Immutable execution options.

    Attributes:
        skip_perform_callbacks: Run `interact()` without perform hooks.
        skip_rollback: Never call `rollback()` on explicit failure.
        skip_rollback_callbacks: Run `rollback()` without rollback hooks.
        validate: Master switch; when False neither context is validated.
        validate_input_context: Validate arguments before `interact()`.
        validate_output_context: Validate return fields after `interact()`.
    """

    skip_perform_callbacks: bool = False
    skip_rollback: bool = False
    skip_rollback_callbacks: bool = False
    validate: bool = True
    validate_input_context: bool = True
    validate_output_context: bool = True

    @property
    def should_validate_input(self) -> bool:
        return self.validate and self.validate_input_context

    @property
    def should_validate_output(self) -> bool:
        return self.validate and self.validate_output_context

    def with_overrides(
        self, overrides: Mapping[str, typing.Any] | None = None, /, **kwargs: typing.Any
    ) -> Options:
        """Return new options with known fields replaced.

        Unknown fields are ignored with a warning.
        """
        known = {field.name for field in dataclasses.fields(self)}
        changes: dict[str, bool] = {}
        for name, value in {**(overrides or {}), **kwargs}.items():
            if name not in known:
                log.warning("Ignoring unknown interactor option %r", name)
                continue
            changes[name] = bool(value)
        return dataclasses.replace(self, **changes) if changes else self

    def to_dict(self) -> dict[str, bool]:
        return dataclasses.asdict(self)
