"""The interactor pipeline and its lifecycle hooks."""

from .base import Interactor
from .hooks import (
    HookChain,
    Phase,
    Timing,
    after_fail,
    after_input_context_create,
    after_input_context_validation,
    after_output_context_create,
    after_output_context_validation,
    after_perform,
    after_rollback,
    after_runtime_context_create,
    around_fail,
    around_input_context_create,
    around_input_context_validation,
    around_output_context_create,
    around_output_context_validation,
    around_perform,
    around_rollback,
    around_runtime_context_create,
    before_fail,
    before_input_context_create,
    before_input_context_validation,
    before_output_context_create,
    before_output_context_validation,
    before_perform,
    before_rollback,
    before_runtime_context_create,
)

__all__ = [  # noqa: RUF022
    "Interactor",
    "HookChain",
    "Phase",
    "Timing",
    "before_input_context_create",
    "around_input_context_create",
    "after_input_context_create",
    "before_input_context_validation",
    "around_input_context_validation",
    "after_input_context_validation",
    "before_runtime_context_create",
    "around_runtime_context_create",
    "after_runtime_context_create",
    "before_perform",
    "around_perform",
    "after_perform",
    "before_output_context_create",
    "around_output_context_create",
    "after_output_context_create",
    "before_output_context_validation",
    "around_output_context_validation",
    "after_output_context_validation",
    "before_rollback",
    "around_rollback",
    "after_rollback",
    "before_fail",
    "around_fail",
    "after_fail",
]
