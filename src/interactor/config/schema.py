"""Configuration schema and validation using Pydantic.

Environment variables with the ``INTERACTOR_`` prefix provide process-wide
defaults for execution options and telemetry; per-call options override
them.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InteractorSettings(BaseSettings):
    """Pydantic settings schema for interactor defaults.

    Values are coerced by pydantic, so ``INTERACTOR_SKIP_ROLLBACK=1`` or
    ``=true`` both enable the flag.
    """

    model_config = SettingsConfigDict(
        env_prefix="INTERACTOR_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    # --- Execution option defaults ---

    skip_perform_callbacks: bool = Field(
        default=False,
        description="Run interact() without the perform hooks",
    )
    skip_rollback: bool = Field(
        default=False,
        description="Never call rollback() when an interactor fails",
    )
    skip_rollback_callbacks: bool = Field(
        default=False,
        description="Run rollback() without the rollback hooks",
    )
    validate_contexts: bool = Field(
        default=True,
        alias="INTERACTOR_VALIDATE",
        description="Master switch for input and output validation",
    )
    validate_input_context: bool = Field(
        default=True,
        description="Validate arguments before interact()",
    )
    validate_output_context: bool = Field(
        default=True,
        description="Validate return fields after interact()",
    )

    # --- Telemetry ---

    telemetry: bool = Field(
        default=False,
        description="Enable telemetry scopes for registered reporters",
    )

    def option_defaults(self) -> dict[str, bool]:
        """Return the execution option defaults keyed by `Options` field name."""
        return {
            "skip_perform_callbacks": self.skip_perform_callbacks,
            "skip_rollback": self.skip_rollback,
            "skip_rollback_callbacks": self.skip_rollback_callbacks,
            "validate": self.validate_contexts,
            "validate_input_context": self.validate_input_context,
            "validate_output_context": self.validate_output_context,
        }
