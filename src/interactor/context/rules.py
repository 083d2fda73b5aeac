"""Field-level validation rules delegated to pydantic.

Contexts declare rules with the constraint vocabulary pydantic already
understands (``pattern``, ``min_length``, ``ge``, ...) plus two conveniences:

- ``choices``: the value must be one of the given literals;
- ``confirmation``: a sibling ``<name>_confirmation`` value must match.

The rules of a context are compiled into one pydantic model. Validating a
context feeds it the current attribute values and folds the resulting
`pydantic.ValidationError` into a field → messages mapping.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import dataclasses
import logging
import typing
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    create_model,
    field_validator,
)
from pydantic_core import PydanticCustomError

from interactor.context.errors import GENERIC, ErrorTag, humanize
from interactor.core.exceptions import DeclarationError

log = logging.getLogger(__name__)

# Constraints that only apply to strings force a `str` base type.
_STRING_CONSTRAINTS = frozenset({"pattern"})
_CONFIRMATION_SUFFIX = "_confirmation"


@dataclasses.dataclass(frozen=True, slots=True)
class FieldRules:
    """Accumulated rules for one field."""

    field: str
    constraints: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    choices: tuple[Any, ...] | None = None
    confirmation: bool = False
    validators: tuple[Callable[[Any], Any], ...] = ()

    def combine(self, other: FieldRules) -> FieldRules:
        """Return the union of both rule sets; later constraints win."""
        return FieldRules(
            field=self.field,
            constraints={**self.constraints, **other.constraints},
            choices=other.choices if other.choices is not None else self.choices,
            confirmation=self.confirmation or other.confirmation,
            validators=(*self.validators, *other.validators),
        )

    def annotation(self) -> Any:
        """Build the pydantic annotation for this field (always nullable)."""
        base: Any = Any
        if self.choices is not None:
            base = Literal[self.choices]  # type: ignore[valid-type]
        elif _STRING_CONSTRAINTS & set(self.constraints):
            base = str
        metadata: list[Any] = []
        if self.constraints:
            metadata.append(Field(**self.constraints))
        metadata.extend(AfterValidator(validator) for validator in self.validators)
        if metadata:
            base = Annotated[base, *metadata]
        return Optional[base]  # noqa: UP045


def _confirmation_validator(field: str) -> Any:
    def check(cls: type[BaseModel], value: Any, info: ValidationInfo) -> Any:  # noqa: ARG001
        if value is None or field not in info.data:
            return value
        if value != info.data[field]:
            raise PydanticCustomError(
                "confirmation",
                "doesn't match {attribute}",
                {"attribute": humanize(field)},
            )
        return value

    check.__name__ = f"confirm_{field}"
    return field_validator(f"{field}{_CONFIRMATION_SUFFIX}")(check)


class RuleSet:
    """The rules declared on one context class."""

    __slots__ = ("_model", "_name", "_rules")

    def __init__(self, name: str, rules: Mapping[str, FieldRules] | None = None):
        self._name = name
        self._rules: dict[str, FieldRules] = dict(rules or {})
        self._model: type[BaseModel] | None = None
        if self._rules:
            self._model = self._build_model()

    def add(
        self,
        *fields: str,
        choices: Iterable[Any] | None = None,
        confirmation: bool = False,
        validator: Callable[[Any], Any] | None = None,
        **constraints: Any,
    ) -> None:
        """Register rules on each of `fields`.

        Raises:
            DeclarationError: If no field is given, no rule is given, or
                pydantic rejects the constraints.
        """
        if not fields:
            raise DeclarationError("validates() requires at least one field name")
        if choices is None and not confirmation and validator is None and not constraints:
            raise DeclarationError(f"validates({', '.join(fields)}) declares no rule")
        for field in fields:
            rule = FieldRules(
                field=str(field),
                constraints=dict(constraints),
                choices=tuple(choices) if choices is not None else None,
                confirmation=confirmation,
                validators=(validator,) if validator is not None else (),
            )
            existing = self._rules.get(rule.field)
            self._rules[rule.field] = existing.combine(rule) if existing else rule
        try:
            self._model = self._build_model()
        except (TypeError, ValueError) as e:
            raise DeclarationError(f"Invalid validation rule for {self._name}: {e}") from e

    def copy(self, name: str) -> RuleSet:
        """Return a rule set carrying the same rules under a new owner name."""
        return RuleSet(name, self._rules)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def _build_model(self) -> type[BaseModel]:
        definitions: dict[str, Any] = {}
        validators: dict[str, Any] = {}
        for field, rule in self._rules.items():
            definitions[field] = (rule.annotation(), None)
        # Confirmation fields are validated after the field they confirm.
        for field, rule in self._rules.items():
            if not rule.confirmation:
                continue
            confirmation_field = f"{field}{_CONFIRMATION_SUFFIX}"
            definitions[confirmation_field] = definitions.pop(
                confirmation_field, (Optional[Any], None)  # noqa: UP045
            )
            validators[f"confirm_{field}"] = _confirmation_validator(field)
        log.debug("Compiled %d validation rule(s) for %s", len(self._rules), self._name)
        return create_model(
            f"{self._name}Rules",
            __config__=ConfigDict(
                arbitrary_types_allowed=True, extra="ignore", protected_namespaces=()
            ),
            __validators__=validators,
            **definitions,
        )

    def validate(self, values: Mapping[str, Any]) -> dict[str, list[str]]:
        """Run the rules against `values` and return field → messages."""
        if self._model is None:
            return {}
        try:
            self._model.model_validate(dict(values))
        except ValidationError as e:
            return _messages(e)
        except TypeError:
            # A constraint that cannot apply to the value's type; find the field.
            return self._validate_each(values)
        return {}

    def _validate_each(self, values: Mapping[str, Any]) -> dict[str, list[str]]:
        model = typing.cast(type[BaseModel], self._model)
        messages: dict[str, list[str]] = {}
        for field in self._rules:
            subset = {
                name: values.get(name) for name in (field, f"{field}{_CONFIRMATION_SUFFIX}")
            }
            try:
                model.model_validate(subset)
            except ValidationError as e:
                for name, found in _messages(e).items():
                    messages.setdefault(name, []).extend(found)
            except TypeError:
                messages.setdefault(field, []).append(ErrorTag.INVALID)
        return messages


def _messages(error: ValidationError) -> dict[str, list[str]]:
    messages: dict[str, list[str]] = {}
    for detail in error.errors(include_url=False):
        loc = detail.get("loc") or ()
        field = str(loc[0]) if loc else GENERIC
        messages.setdefault(field, []).append(detail["msg"])
    return messages
