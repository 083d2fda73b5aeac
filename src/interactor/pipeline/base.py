"""The interactor: one unit of business logic with typed input and output.

An invocation moves through a fixed sequence of transitions::

    input_context_create -> input_context_validation
        -> runtime_context_create -> perform (interact)
        -> output_context_create -> output_context_validation -> success

Each transition runs inside a telemetry scope and is wrapped by the hooks
registered for it. Validation failures and `fail()` short-circuit to a
failure `Result`; `fail()` runs `rollback()` first. An output validation
failure does not run `rollback()`.

Example:
    class CreateUser(Interactor):
        login = argument(str, "The login for the user", required=True)
        password = argument(str, "The password for the user", required=True)
        password_confirmation = argument(str, "The password confirmation")

        user = returns(User, "The created user", required=True)

        def interact(self):
            self.context.user = User(login=self.context.login)
            if self.context.password != self.context.password_confirmation:
                self.fail(password=["invalid"])

        def rollback(self):
            if self.context.user:
                self.context.user.destroy()

    result = CreateUser.perform(login="me", password="pw", password_confirmation="pw")
    result.is_success  # True
    result.data.user   # <User>
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
import logging
import threading
import typing

from interactor.config import Options, resolve_options
from interactor.context import declarations
from interactor.context.attribute import NO_DEFAULT, Attribute
from interactor.context.errors import GENERIC, Errors
from interactor.context.input import Input
from interactor.context.output import Output
from interactor.context.result import ResultData
from interactor.context.runtime import Runtime
from interactor.core import type_expressions
from interactor.core.exceptions import (
    DeclarationError,
    ExplicitFailure,
    InputValidationError,
    InteractorFailure,
    OutputValidationError,
    UnhandledError,
)
from interactor.core.result import ErrorsLike, Result, Status
from interactor.pipeline import hooks
from interactor.pipeline.hooks import HookChain, Phase, Timing
from interactor.telemetry import TelemetryContext, TelemetryContextProtocol, TelemetryReporter

log = logging.getLogger(__name__)

# Guards the write-once context class templates of every interactor class.
_TEMPLATE_LOCK = threading.RLock()

_INPUT = "_input_context_template"
_OUTPUT = "_output_context_template"
_RUNTIME = "_runtime_context_template"
_RESULT = "_result_data_template"


def _parent_interactor(cls: type[Interactor]) -> type[Interactor] | None:
    for base in cls.__mro__[1:]:
        if isinstance(base, type) and issubclass(base, Interactor):
            return base
    return None


class Interactor:
    """Base class of all interactors.

    Subclasses declare arguments and return fields, implement `interact`
    and optionally `rollback`, then are invoked with `perform` (never
    raises) or `perform_or_raise`.
    """

    Boolean = type_expressions.Boolean

    # Reporters receiving the telemetry scopes of every invocation.
    telemetry_reporters: typing.ClassVar[tuple[TelemetryReporter, ...]] = ()

    _hooks: typing.ClassVar[HookChain] = HookChain()

    def __init_subclass__(cls, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)
        for phase, timing, callback in hooks.collect(vars(cls)):
            cls._hooks = cls._hooks.add(phase, timing, callback)
        for name, declaration in declarations.collect(vars(cls)):
            delattr(cls, name)
            if declaration.kind == "argument":
                cls.argument(name, declaration.type, declaration.description, **declaration.options())
            else:
                cls.returns(name, declaration.type, declaration.description, **declaration.options())

    # --- Context class templates ---

    @classmethod
    def _template(cls, attr: str, factory: Callable[[], typing.Any]) -> typing.Any:
        # Look only at this class' own namespace; templates are never inherited.
        existing = cls.__dict__.get(attr)
        if existing is not None:
            return existing
        with _TEMPLATE_LOCK:
            existing = cls.__dict__.get(attr)
            if existing is None:
                existing = factory()
                setattr(cls, attr, existing)
                log.debug("Built %s for %s", existing.__name__, cls.__name__)
            return existing

    @classmethod
    def _reset_derived_templates(cls) -> None:
        with _TEMPLATE_LOCK:
            for attr in (_RUNTIME, _RESULT):
                if attr in cls.__dict__:
                    delattr(cls, attr)

    @classmethod
    def _context_namespace(cls, suffix: str) -> dict[str, str]:
        return {"__module__": cls.__module__, "__qualname__": f"{cls.__qualname__}.{suffix}"}

    @classmethod
    def input_context_class(cls) -> type[Input]:
        """The input context class of this interactor, created on first use."""

        def build() -> type[Input]:
            parent = _parent_interactor(cls)
            base = parent.input_context_class() if parent else Input
            return type(f"{cls.__name__}Input", (base,), cls._context_namespace("Input"))

        return cls._template(_INPUT, build)

    @classmethod
    def output_context_class(cls) -> type[Output]:
        """The output context class of this interactor, created on first use."""

        def build() -> type[Output]:
            parent = _parent_interactor(cls)
            base = parent.output_context_class() if parent else Output
            return type(f"{cls.__name__}Output", (base,), cls._context_namespace("Output"))

        return cls._template(_OUTPUT, build)

    @classmethod
    def runtime_context_class(cls) -> type[Runtime]:
        """Runtime context class merging input and output declarations (output wins)."""

        def build() -> type[Runtime]:
            runtime = type(f"{cls.__name__}Runtime", (Runtime,), cls._context_namespace("Runtime"))
            runtime._merge_declarations(cls.input_context_class().declared_attributes())
            runtime._merge_declarations(cls.output_context_class().declared_attributes())
            return runtime

        return cls._template(_RUNTIME, build)

    @classmethod
    def result_data_class(cls) -> type[ResultData]:
        """Frozen dataclass holding the output fields of a successful result."""
        return cls._template(
            _RESULT,
            lambda: ResultData.for_fields(cls.__name__, cls.output_context_class().field_names()),
        )

    @classmethod
    def accepts_arguments_matching(cls, input_context_class: type[Input]) -> None:
        """Replace this interactor's input context with a subclass of a standalone `Input`.

        Later `argument` calls extend the subclass, never the shared class.
        """
        if not (isinstance(input_context_class, type) and issubclass(input_context_class, Input)):
            raise DeclarationError(f"{input_context_class!r} is not an Input context class")
        for name in input_context_class.attribute_names():
            Runtime._check_name(name)
        with _TEMPLATE_LOCK:
            derived = type(f"{cls.__name__}Input", (input_context_class,), cls._context_namespace("Input"))
            setattr(cls, _INPUT, derived)
            cls._reset_derived_templates()

    @classmethod
    def returns_data_matching(cls, output_context_class: type[Output]) -> None:
        """Replace this interactor's output context with a subclass of a standalone `Output`."""
        if not (isinstance(output_context_class, type) and issubclass(output_context_class, Output)):
            raise DeclarationError(f"{output_context_class!r} is not an Output context class")
        for name in output_context_class.attribute_names():
            Runtime._check_name(name)
        with _TEMPLATE_LOCK:
            derived = type(f"{cls.__name__}Output", (output_context_class,), cls._context_namespace("Output"))
            setattr(cls, _OUTPUT, derived)
            cls._reset_derived_templates()

    # --- Declarations ---

    @classmethod
    def argument(
        cls,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ) -> Attribute:
        """Declare an input argument."""
        Runtime._check_name(str(name))
        with _TEMPLATE_LOCK:
            attribute = cls.input_context_class().argument(
                name, type, description, required=required, default=default
            )
            cls._reset_derived_templates()
        return attribute

    @classmethod
    def returns(
        cls,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ) -> Attribute:
        """Declare an output field."""
        Runtime._check_name(str(name))
        with _TEMPLATE_LOCK:
            attribute = cls.output_context_class().returns(
                name, type, description, required=required, default=default
            )
            cls._reset_derived_templates()
        return attribute

    @classmethod
    def argument_names(cls) -> tuple[str, ...]:
        return cls.input_context_class().argument_names()

    @classmethod
    def arguments(cls) -> tuple[Attribute, ...]:
        return cls.input_context_class().declared_attributes()

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return cls.output_context_class().field_names()

    @classmethod
    def fields(cls) -> tuple[Attribute, ...]:
        return cls.output_context_class().declared_attributes()

    @classmethod
    def input_validates(cls, *fields: str, **rules: typing.Any) -> None:
        """Register pydantic-backed rules on arguments, e.g. ``input_validates("email", pattern=r".+@.+")``."""
        cls.input_context_class().validates(*fields, **rules)

    @classmethod
    def output_validates(cls, *fields: str, **rules: typing.Any) -> None:
        """Register pydantic-backed rules on return fields."""
        cls.output_context_class().validates(*fields, **rules)

    @classmethod
    def add_hook(
        cls,
        phase: Phase | str,
        timing: Timing | str,
        callback: Callable[..., typing.Any],
    ) -> None:
        """Register a lifecycle hook, e.g. ``add_hook("perform", "before", fn)``."""
        cls._hooks = cls._hooks.add(phase, timing, callback)

    # --- Invocation ---

    @classmethod
    def perform(
        cls,
        values: Mapping[str, typing.Any] | None = None,
        /,
        *,
        options: Options | Mapping[str, typing.Any] | None = None,
        **kwargs: typing.Any,
    ) -> Result:
        """Run the interactor and return its `Result`; never raises on failure."""
        return cls(values, **kwargs).with_options(options).run()

    @classmethod
    def perform_or_raise(
        cls,
        values: Mapping[str, typing.Any] | None = None,
        /,
        *,
        options: Options | Mapping[str, typing.Any] | None = None,
        **kwargs: typing.Any,
    ) -> Result:
        """Run the interactor and return its successful `Result`.

        Raises:
            InteractorFailure: The subclass matching the failing stage, with
                the failed result on ``.result``.
        """
        return cls(values, **kwargs).with_options(options).run_or_raise()

    def __init__(self, values: Mapping[str, typing.Any] | None = None, /, **kwargs: typing.Any):
        """Store the raw input; nothing is validated until the interactor runs."""
        self._values = values
        self._kwargs = kwargs
        self._options: Options | None = None
        self._telemetry: TelemetryContextProtocol = TelemetryContext()
        self.input: Input | None = None
        self.output: Output | None = None
        self._context: Runtime | None = None

    def with_options(
        self,
        options: Options | Mapping[str, typing.Any] | None = None,
        /,
        **overrides: typing.Any,
    ) -> typing.Self:
        """Set the execution options for this invocation and return self."""
        self._options = resolve_options(options, **overrides)
        return self

    @property
    def options(self) -> Options:
        if self._options is None:
            self._options = resolve_options()
        return self._options

    @property
    def context(self) -> Runtime | None:
        """The runtime context; available from `runtime_context_create` on."""
        return self._context

    def run(self) -> Result:
        """Run the interactor and return its `Result`, successful or not."""
        try:
            return self.run_or_raise()
        except InteractorFailure as e:
            return e.result

    def run_or_raise(self) -> Result:
        """Run the interactor, raising `InteractorFailure` on any failure."""
        name = type(self).__name__
        try:
            return self._run()
        except InteractorFailure as e:
            log.info("%s failed with %s: %s", name, e.result.status.name, dict(e.result.errors))
            raise
        except Exception as e:
            log.error("Unhandled error in %s: %s", name, e, exc_info=True)
            message = str(e) or type(e).__name__
            raise UnhandledError(Result.failure(message)) from e

    def _run(self) -> Result:
        self._telemetry = TelemetryContext(*type(self).telemetry_reporters)
        raw_input = {str(key): value for key, value in {**(self._values or {}), **self._kwargs}.items()}
        with self._telemetry("interactor", interactor=type(self).__name__):
            self._create_and_validate_input_context(raw_input)
            self._create_runtime_context(raw_input)
            self._transition(
                Phase.PERFORM, self.interact, skip_hooks=self.options.skip_perform_callbacks
            )
            self._create_and_validate_output_context()
            result = Result.success(self._result_data())
        log.debug("%s succeeded", type(self).__name__)
        return result

    def _transition(
        self,
        phase: Phase,
        transition: Callable[[], typing.Any],
        *,
        skip_hooks: bool = False,
    ) -> typing.Any:
        with self._telemetry(phase.value):
            log.debug("%s: %s", type(self).__name__, phase.value)
            if skip_hooks:
                return transition()
            return type(self)._hooks.run(phase, self, transition)

    def _create_and_validate_input_context(self, raw_input: dict[str, typing.Any]) -> None:
        input_class = type(self).input_context_class()
        self.input = self._transition(Phase.INPUT_CONTEXT_CREATE, lambda: input_class(raw_input))
        if not self.options.should_validate_input:
            return
        if not self._transition(Phase.INPUT_CONTEXT_VALIDATION, self.input.validate):
            raise InputValidationError(
                Result.failure(self.input.errors, status=Status.FAILED_AT_INPUT)
            )

    def _create_runtime_context(self, raw_input: dict[str, typing.Any]) -> None:
        runtime_class = type(self).runtime_context_class()
        self._context = self._transition(
            Phase.RUNTIME_CONTEXT_CREATE, lambda: runtime_class(raw_input)
        )

    def _create_and_validate_output_context(self) -> None:
        output_class = type(self).output_context_class()
        context = typing.cast(Runtime, self._context)
        self.output = self._transition(
            Phase.OUTPUT_CONTEXT_CREATE, lambda: output_class(context.attributes)
        )
        if not self.options.should_validate_output:
            return
        if not self._transition(Phase.OUTPUT_CONTEXT_VALIDATION, self.output.validate):
            raise OutputValidationError(
                Result.failure(self.output.errors, status=Status.FAILED_AT_OUTPUT)
            )

    def _result_data(self) -> ResultData:
        if self.output is not None:
            values = self.output.fields
        elif self._context is not None:
            values = self._context.attributes
        else:
            values = {}
        return type(self).result_data_class().from_mapping(values)

    # --- Business logic ---

    def interact(self) -> None:
        """Implement the business logic here, reading and writing `self.context`."""

    def rollback(self) -> None:
        """Undo partial side effects after `fail()`; runs before the failure is raised."""

    def fail(self, errors: ErrorsLike = None, /, **field_errors: typing.Any) -> typing.NoReturn:
        """Stop the interactor with a failure.

        Runs `rollback()` (unless disabled by the options), then raises
        `ExplicitFailure` carrying a ``FAILED_AT_RUNTIME`` result whose data
        is the output state at this point.

        Example:
            self.fail("Something went wrong")
            self.fail(password=["invalid"])
            self.fail(user.errors)
        """
        aggregate = Errors()
        if isinstance(errors, str):
            aggregate.add(GENERIC, errors)
        elif errors:
            aggregate.merge(errors)
        aggregate.merge(field_errors)
        result = self._transition(Phase.FAIL, lambda: self._fail_transition(aggregate))
        raise ExplicitFailure(result)

    def _fail_transition(self, errors: Errors) -> Result:
        if not self.options.skip_rollback:
            self._transition(
                Phase.ROLLBACK, self.rollback, skip_hooks=self.options.skip_rollback_callbacks
            )
        return Result.failure(errors, data=self._result_data(), status=Status.FAILED_AT_RUNTIME)

    def instrument(self, name: str, **metadata: typing.Any) -> AbstractContextManager[typing.Any]:
        """Open a telemetry scope nested under the current transition.

        Example:
            with self.instrument("charge_card", provider="stripe"):
                gateway.charge(...)
        """
        return self._telemetry(name, **metadata)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} options={self.options.to_dict()!r}>"

    # --- Type helpers (defined last; they shadow builtins inside this class body) ---

    @classmethod
    def any(cls) -> type_expressions.Wildcard:
        return type_expressions.ANY

    @classmethod
    def untyped(cls) -> type_expressions.Wildcard:
        return type_expressions.UNTYPED

    @classmethod
    def list(cls, element_type: typing.Any) -> type_expressions.ListOf:
        return type_expressions.list_of(element_type)

    array = list

    @classmethod
    def union(cls, *types: typing.Any) -> type_expressions.UnionOf:
        return type_expressions.union_of(*types)
