"""Base class shared by input, output and runtime contexts.

A context class owns a template `AttributeSet` (its declarations) and a
`RuleSet` (its pydantic rules). Each declared name gets a generated
accessor, so ``ctx.email`` and ``ctx.email = ...`` read and assign the
attribute; ``ctx["email"]`` does the same. Undeclared names raise.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import typing

from pydantic_core import to_json

from interactor.context import declarations
from interactor.context.attribute import NO_DEFAULT, Attribute
from interactor.context.attribute_set import AttributeSet
from interactor.context.errors import Errors, ErrorTag
from interactor.context.rules import RuleSet
from interactor.core.exceptions import DeclarationError

log = logging.getLogger(__name__)


class AttributeAccessor:
    """Data descriptor generated for every declared attribute.

    Instances carry the attribute description as their own `__doc__`.
    """

    def __init__(self, name: str, doc: str | None = None):
        self.name = name
        self.__doc__ = doc

    def __get__(self, instance: Context | None, owner: type | None = None) -> typing.Any:
        if instance is None:
            return self
        return instance._attribute(self.name).value

    def __set__(self, instance: Context, value: typing.Any) -> None:
        instance._attribute(self.name).assign_value(value)


class Context:
    """A typed bag of attributes for one interactor invocation."""

    _attribute_set: typing.ClassVar[AttributeSet] = AttributeSet()
    _rules: typing.ClassVar[RuleSet] = RuleSet("Context")
    _declaration_kinds: typing.ClassVar[frozenset[str]] = frozenset({"argument", "returns"})

    def __init_subclass__(cls, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)
        # Each subclass starts from a copy of its parent's declarations.
        cls._attribute_set = cls._attribute_set.clone()
        cls._rules = cls._rules.copy(cls.__name__)
        for name, declaration in declarations.collect(vars(cls)):
            delattr(cls, name)
            if declaration.kind not in cls._declaration_kinds:
                raise DeclarationError(
                    f"{cls.__name__} does not accept {declaration.kind}() declarations ({name!r})"
                )
            cls._declare(
                name,
                declaration.type,
                declaration.description,
                **declaration.options(),
            )

    # --- Declarations ---

    @classmethod
    def _declare(
        cls,
        name: str,
        type: typing.Any,  # noqa: A002
        description: str | None = None,
        *,
        required: bool = False,
        default: typing.Any = NO_DEFAULT,
    ) -> Attribute:
        name = str(name)
        cls._check_name(name)
        attribute = cls._attribute_set.add(
            name, type, description, required=required, default=default
        )
        setattr(cls, name, AttributeAccessor(name, description))
        log.debug("Declared %r on %s", attribute, cls.__name__)
        return attribute

    @classmethod
    def _merge_declarations(cls, attributes: Iterable[Attribute]) -> None:
        """Fold existing declarations into this class, overwriting by name."""
        for attribute in attributes:
            cls._check_name(attribute.name)
            cls._attribute_set.merge([attribute.copy()])
            setattr(cls, attribute.name, AttributeAccessor(attribute.name, attribute.description))

    @classmethod
    def _check_name(cls, name: str) -> None:
        if not name.isidentifier() or name.startswith("_"):
            raise DeclarationError(f"{name!r} is not a valid attribute name")
        existing = getattr(cls, name, None)
        if existing is not None and not isinstance(existing, AttributeAccessor):
            raise DeclarationError(f"{name!r} is reserved on {cls.__name__}")

    @classmethod
    def validates(cls, *fields: str, **rules: typing.Any) -> None:
        """Register pydantic-backed rules on `fields` (see `interactor.context.rules`)."""
        cls._rules.add(*fields, **rules)

    @classmethod
    def attribute_names(cls) -> tuple[str, ...]:
        return cls._attribute_set.names

    @classmethod
    def declared_attributes(cls) -> tuple[Attribute, ...]:
        return cls._attribute_set.attributes

    # --- Instances ---

    def __init__(self, values: Mapping[str, typing.Any] | None = None, /, **kwargs: typing.Any):
        """Create a context, assigning every declared attribute found in `values`/`kwargs`."""
        object.__setattr__(self, "_attributes", type(self)._attribute_set.clone())
        object.__setattr__(self, "_errors", Errors())
        provided = {str(key): value for key, value in {**(values or {}), **kwargs}.items()}
        for attribute in self._attributes:
            if attribute.name in provided:
                attribute.assign_value(provided[attribute.name])

    def _attribute(self, name: str) -> Attribute:
        attribute = self._attributes.find(name)
        if attribute is None:
            raise AttributeError(f"unknown attribute {name!r} for {type(self).__name__}")
        return attribute

    def _read_undeclared(self, name: str) -> typing.Any:
        raise AttributeError(f"unknown attribute {name!r} for {type(self).__name__}")

    def _write_undeclared(self, name: str, value: typing.Any) -> None:  # noqa: ARG002
        raise AttributeError(f"unknown attribute {name!r} for {type(self).__name__}")

    def __getattr__(self, name: str) -> typing.Any:
        # Only reached when regular lookup fails, i.e. for undeclared names.
        if name.startswith("_"):
            raise AttributeError(name)
        return self._read_undeclared(name)

    def __setattr__(self, name: str, value: typing.Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        elif name in self._attributes:
            self._attributes.find(name).assign_value(value)  # type: ignore[union-attr]
        else:
            self._write_undeclared(name, value)

    def __getitem__(self, name: str) -> typing.Any:
        try:
            if name in self._attributes:
                return self._attribute(name).value
            return self._read_undeclared(str(name))
        except AttributeError as e:
            raise KeyError(name) from e

    def __setitem__(self, name: str, value: typing.Any) -> None:
        try:
            if name in self._attributes:
                self._attribute(name).assign_value(value)
            else:
                self._write_undeclared(str(name), value)
        except AttributeError as e:
            raise KeyError(name) from e

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    # --- Validation ---

    @property
    def errors(self) -> Errors:
        """Errors collected by the last `validate()` call."""
        return self._errors

    def validate(self) -> bool:
        """Validate every attribute, then the declared rules; return True when valid.

        All attributes are evaluated; errors from earlier runs are discarded.
        """
        self._errors.clear()
        for attribute in self._attributes:
            for message in attribute.validate():
                self._errors.add(attribute.name, message)
        # Rules only see values that passed the type check.
        values = {
            attribute.name: None if ErrorTag.INVALID in attribute.error_messages else attribute.value
            for attribute in self._attributes
        }
        self._errors.merge(type(self)._rules.validate(values))
        if not self._errors.is_empty:
            log.debug("%s failed validation: %s", type(self).__name__, self._errors.to_dict())
        return self._errors.is_empty

    @property
    def is_valid(self) -> bool:
        return self._errors.is_empty

    # --- Views ---

    def to_dict(self) -> dict[str, typing.Any]:
        """Map attribute names to their current values."""
        return self._attributes.values()

    def to_json(self) -> str:
        return to_json(self.to_dict(), serialize_unknown=True).decode()

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value!r}" for name, value in self.to_dict().items())
        return f"{type(self).__name__}({values})"
