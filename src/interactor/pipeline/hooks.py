"""Lifecycle hooks around the transitions of the interactor pipeline.

A hook is a ``(phase, timing, callback)`` triple. Hooks are declared with
the decorators below inside an interactor class body::

    class CreateUser(Interactor):
        @before_perform
        def log_start(self):
            ...

        @around_rollback
        @contextmanager
        def in_transaction(self):
            with db.transaction():
                yield

or registered afterwards with `Interactor.add_hook`. ``before`` and
``after`` callbacks receive the interactor. ``around`` callbacks receive the
interactor and return a context manager entered around the transition.
``after`` callbacks only run when the transition completed without raising.

Hooks observe the pipeline; an ``around`` hook that swallows the
transition's exception is outside that contract.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
import contextlib
import dataclasses
import enum
import typing

from interactor.core.exceptions import DeclarationError

_HOOK_MARKER = "__interactor_hooks__"


class Phase(enum.StrEnum):
    """Pipeline transitions that can be hooked."""

    INPUT_CONTEXT_CREATE = "input_context_create"
    INPUT_CONTEXT_VALIDATION = "input_context_validation"
    RUNTIME_CONTEXT_CREATE = "runtime_context_create"
    PERFORM = "perform"
    OUTPUT_CONTEXT_CREATE = "output_context_create"
    OUTPUT_CONTEXT_VALIDATION = "output_context_validation"
    ROLLBACK = "rollback"
    FAIL = "fail"


class Timing(enum.StrEnum):
    BEFORE = "before"
    AROUND = "around"
    AFTER = "after"


@dataclasses.dataclass(frozen=True, slots=True)
class Hook:
    phase: Phase
    timing: Timing
    callback: Callable[..., typing.Any]


class HookChain:
    """Immutable, ordered collection of hooks for one interactor class."""

    __slots__ = ("_hooks",)

    def __init__(self, hooks: Iterable[Hook] = ()):
        self._hooks = tuple(hooks)

    def add(self, phase: Phase | str, timing: Timing | str, callback: Callable[..., typing.Any]) -> HookChain:
        """Return a new chain with the hook appended.

        Raises:
            DeclarationError: If the phase or timing is unknown or the
                callback is not callable.
        """
        try:
            hook = Hook(Phase(phase), Timing(timing), callback)
        except ValueError as e:
            raise DeclarationError(str(e)) from e
        if not callable(callback):
            raise DeclarationError(f"{timing}_{phase} hook must be callable, got {callback!r}")
        return HookChain((*self._hooks, hook))

    def extend(self, hooks: Iterable[Hook]) -> HookChain:
        return HookChain((*self._hooks, *hooks))

    def select(self, phase: Phase, timing: Timing) -> tuple[Hook, ...]:
        return tuple(h for h in self._hooks if h.phase is phase and h.timing is timing)

    def run(self, phase: Phase, target: typing.Any, transition: Callable[[], typing.Any]) -> typing.Any:
        """Run `transition` wrapped by the hooks registered for `phase`.

        Order: every ``before`` hook, then the ``around`` hooks entered in
        registration order (the first registered is outermost), then the
        transition, then every ``after`` hook. Returns the transition's
        return value.
        """
        for hook in self.select(phase, Timing.BEFORE):
            hook.callback(target)
        with contextlib.ExitStack() as stack:
            for hook in self.select(phase, Timing.AROUND):
                stack.enter_context(hook.callback(target))
            outcome = transition()
        for hook in self.select(phase, Timing.AFTER):
            hook.callback(target)
        return outcome

    def __iter__(self) -> Iterator[Hook]:
        return iter(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)


def collect(namespace: Mapping[str, typing.Any]) -> list[tuple[Phase, Timing, Callable[..., typing.Any]]]:
    """Return the hooks marked by decorators in a class namespace, in definition order."""
    found = []
    for value in namespace.values():
        for phase, timing in getattr(value, _HOOK_MARKER, ()):
            found.append((phase, timing, value))
    return found


def _marker(phase: Phase, timing: Timing) -> Callable[[Callable[..., typing.Any]], Callable[..., typing.Any]]:
    def decorator(func: Callable[..., typing.Any]) -> Callable[..., typing.Any]:
        marks = getattr(func, _HOOK_MARKER, ())
        try:
            setattr(func, _HOOK_MARKER, (*marks, (phase, timing)))
        except AttributeError as e:
            raise DeclarationError(f"cannot register {func!r} as a {timing}_{phase} hook") from e
        return func

    decorator.__name__ = f"{timing}_{phase}"
    decorator.__doc__ = f"Register the decorated method as a {timing} {phase.replace('_', ' ')} hook."
    return decorator


before_input_context_create = _marker(Phase.INPUT_CONTEXT_CREATE, Timing.BEFORE)
around_input_context_create = _marker(Phase.INPUT_CONTEXT_CREATE, Timing.AROUND)
after_input_context_create = _marker(Phase.INPUT_CONTEXT_CREATE, Timing.AFTER)

before_input_context_validation = _marker(Phase.INPUT_CONTEXT_VALIDATION, Timing.BEFORE)
around_input_context_validation = _marker(Phase.INPUT_CONTEXT_VALIDATION, Timing.AROUND)
after_input_context_validation = _marker(Phase.INPUT_CONTEXT_VALIDATION, Timing.AFTER)

before_runtime_context_create = _marker(Phase.RUNTIME_CONTEXT_CREATE, Timing.BEFORE)
around_runtime_context_create = _marker(Phase.RUNTIME_CONTEXT_CREATE, Timing.AROUND)
after_runtime_context_create = _marker(Phase.RUNTIME_CONTEXT_CREATE, Timing.AFTER)

before_perform = _marker(Phase.PERFORM, Timing.BEFORE)
around_perform = _marker(Phase.PERFORM, Timing.AROUND)
after_perform = _marker(Phase.PERFORM, Timing.AFTER)

before_output_context_create = _marker(Phase.OUTPUT_CONTEXT_CREATE, Timing.BEFORE)
around_output_context_create = _marker(Phase.OUTPUT_CONTEXT_CREATE, Timing.AROUND)
after_output_context_create = _marker(Phase.OUTPUT_CONTEXT_CREATE, Timing.AFTER)

before_output_context_validation = _marker(Phase.OUTPUT_CONTEXT_VALIDATION, Timing.BEFORE)
around_output_context_validation = _marker(Phase.OUTPUT_CONTEXT_VALIDATION, Timing.AROUND)
after_output_context_validation = _marker(Phase.OUTPUT_CONTEXT_VALIDATION, Timing.AFTER)

before_rollback = _marker(Phase.ROLLBACK, Timing.BEFORE)
around_rollback = _marker(Phase.ROLLBACK, Timing.AROUND)
after_rollback = _marker(Phase.ROLLBACK, Timing.AFTER)

before_fail = _marker(Phase.FAIL, Timing.BEFORE)
around_fail = _marker(Phase.FAIL, Timing.AROUND)
after_fail = _marker(Phase.FAIL, Timing.AFTER)
