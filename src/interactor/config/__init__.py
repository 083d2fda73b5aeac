"""Configuration for interactor execution.

Key components:
- InteractorSettings: environment-backed defaults (``INTERACTOR_*``)
- Options: immutable per-invocation execution options
- resolve_options: merge per-call overrides over the environment defaults
"""

from collections.abc import Mapping
from typing import Any

from .schema import InteractorSettings
from .types import Options


def resolve_options(
    options: Options | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> Options:
    """Resolve the options for one invocation.

    Precedence: keyword overrides > `options` > ``INTERACTOR_*`` environment
    variables > defaults. An `Options` instance is taken as complete and the
    environment is not consulted.

    Example:
        resolve_options(skip_rollback=True)
        resolve_options({"validate": False})
    """
    if isinstance(options, Options):
        return options.with_overrides(overrides)
    base = Options(**InteractorSettings().option_defaults())
    return base.with_overrides(options or {}, **overrides)


def telemetry_enabled() -> bool:
    """Return whether ``INTERACTOR_TELEMETRY`` enables telemetry."""
    return InteractorSettings().telemetry


__all__ = [
    "InteractorSettings",
    "Options",
    "resolve_options",
    "telemetry_enabled",
]
