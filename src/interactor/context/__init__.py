"""Typed contexts: attribute declarations, validation and snapshots."""

from .attribute import NO_DEFAULT, Attribute, is_blank
from .attribute_set import AttributeSet
from .base import AttributeAccessor, Context
from .declarations import Declaration, argument, returns
from .errors import GENERIC, Errors, ErrorTag
from .input import Input
from .output import Output
from .result import ResultData
from .rules import RuleSet
from .runtime import Runtime

__all__ = [
    "GENERIC",
    "NO_DEFAULT",
    "Attribute",
    "AttributeAccessor",
    "AttributeSet",
    "Context",
    "Declaration",
    "ErrorTag",
    "Errors",
    "Input",
    "Output",
    "ResultData",
    "RuleSet",
    "Runtime",
    "argument",
    "is_blank",
    "returns",
]
