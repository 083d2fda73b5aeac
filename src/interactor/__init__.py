"""Interactors: single-purpose business objects with typed input and output."""

import importlib.metadata
import logging

from interactor.config import InteractorSettings, Options, resolve_options
from interactor.context import (
    NO_DEFAULT,
    Attribute,
    AttributeSet,
    Errors,
    Input,
    Output,
    ResultData,
    Runtime,
    argument,
    returns,
)
from interactor.core.exceptions import (
    DeclarationError,
    ExplicitFailure,
    InputValidationError,
    InteractorError,
    InteractorFailure,
    OutputValidationError,
    UnhandledError,
)
from interactor.core.result import Result, Status
from interactor.core.type_expressions import (
    ANY,
    UNTYPED,
    Boolean,
    ListOf,
    UnionOf,
    any_type,
    array_of,
    list_of,
    union_of,
    untyped,
)
from interactor.pipeline import Interactor, Phase, Timing
from interactor.pipeline.hooks import (
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
from interactor.telemetry import SimpleReporter, TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("interactor")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Interactor
    "Interactor",
    "argument",
    "returns",
    # Results
    "Result",
    "ResultData",
    "Status",
    "Errors",
    # Contexts (standalone declarations)
    "Attribute",
    "AttributeSet",
    "Input",
    "Output",
    "Runtime",
    "NO_DEFAULT",
    # Type expressions
    "ANY",
    "UNTYPED",
    "Boolean",
    "ListOf",
    "UnionOf",
    "any_type",
    "untyped",
    "list_of",
    "array_of",
    "union_of",
    # Configuration
    "InteractorSettings",
    "Options",
    "resolve_options",
    # Telemetry (extension points)
    "SimpleReporter",
    "TelemetryContext",
    "TelemetryReporter",
    # Hooks
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
    # Exceptions
    "InteractorError",
    "DeclarationError",
    "InteractorFailure",
    "InputValidationError",
    "OutputValidationError",
    "ExplicitFailure",
    "UnhandledError",
]
