"""Unit tests for attributes and attribute sets."""

import pytest

from interactor.context.attribute import NO_DEFAULT, Attribute, is_blank
from interactor.context.attribute_set import AttributeSet
from interactor.context.errors import ErrorTag
from interactor.core.exceptions import DeclarationError
from interactor.core.type_expressions import ANY, Boolean, list_of

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("value", [None, False, "", "   ", [], {}, ()])
def test_blank_values(value):
    assert is_blank(value)


@pytest.mark.parametrize("value", [0, 0.0, True, "x", [None], {"a": 1}])
def test_present_values(value):
    assert not is_blank(value)


class TestAttributeValue:
    def test_unassigned_without_default_is_none(self):
        assert Attribute("login", str).value is None

    def test_unassigned_returns_default(self):
        attribute = Attribute("role", str, default="member")

        assert attribute.has_default
        assert attribute.value == "member"

    def test_assigned_value_wins_over_default(self):
        attribute = Attribute("role", str, default="member")
        attribute.assign_value("admin")

        assert attribute.value == "admin"

    def test_blank_assignment_falls_back_to_default(self):
        attribute = Attribute("role", str, default="member")
        attribute.assign_value("")

        assert attribute.value == "member"

    def test_false_falls_back_to_a_true_default(self):
        attribute = Attribute("active", Boolean, default=True)
        attribute.assign_value(False)

        assert attribute.value is True

    def test_zero_is_kept(self):
        attribute = Attribute("count", int, default=10)
        attribute.assign_value(0)

        assert attribute.value == 0

    def test_default_value_without_default(self):
        attribute = Attribute("login", str)

        assert not attribute.has_default
        assert attribute.default_value is None


class TestAttributeValidation:
    def test_valid_value_has_no_errors(self):
        attribute = Attribute("login", str, required=True)
        attribute.assign_value("me")

        assert attribute.validate() == []
        assert attribute.is_valid

    def test_required_and_missing_is_blank(self):
        attribute = Attribute("login", str, required=True)

        assert attribute.validate() == [ErrorTag.BLANK]
        assert not attribute.is_valid

    def test_required_is_satisfied_by_default(self):
        attribute = Attribute("role", str, required=True, default="member")

        assert attribute.validate() == []

    def test_wrong_type_is_invalid(self):
        attribute = Attribute("age", int)
        attribute.assign_value("12")

        assert attribute.validate() == ["invalid"]

    def test_required_blank_and_wrong_type_reports_both(self):
        attribute = Attribute("tags", list_of(int), required=True, default="")

        assert attribute.validate() == ["blank", "invalid"]

    def test_none_is_never_invalid(self):
        attribute = Attribute("age", int)
        attribute.assign_value(None)

        assert attribute.validate() == []

    def test_wildcard_skips_type_check(self):
        attribute = Attribute("payload", ANY)
        attribute.assign_value(object())

        assert attribute.validate() == []

    def test_builtin_union_annotation(self):
        attribute = Attribute("age", int | None)
        attribute.assign_value(5)
        assert attribute.validate() == []

        attribute.assign_value("five")
        assert attribute.validate() == [ErrorTag.INVALID]

    def test_unsupported_type_is_rejected(self):
        with pytest.raises(DeclarationError):
            Attribute("age", "int")

    def test_validate_replaces_previous_errors(self):
        attribute = Attribute("login", str, required=True)
        attribute.validate()
        attribute.assign_value("me")

        assert attribute.validate() == []


class TestAttributeCopy:
    def test_copy_is_unassigned(self):
        attribute = Attribute("login", str, "The login", required=True)
        attribute.assign_value("me")

        clone = attribute.copy()

        assert clone.value is None
        assert (clone.name, clone.type, clone.description, clone.required) == ("login", str, "The login", True)

    def test_copy_does_not_share_mutable_defaults(self):
        attribute = Attribute("tags", list_of(str), default=[])
        clone = attribute.copy()

        clone.default_value.append("x")

        assert attribute.default_value == []

    def test_repr(self):
        assert repr(Attribute("login", str, required=True)) == "Attribute('login', str, required=True)"
        assert NO_DEFAULT is not None


class TestAttributeSet:
    def test_add_and_find(self):
        attributes = AttributeSet()
        added = attributes.add("login", str, required=True)

        assert attributes.find("login") is added
        assert attributes.find("missing") is None
        assert "login" in attributes
        assert len(attributes) == 1

    def test_add_replaces_same_name(self):
        attributes = AttributeSet()
        attributes.add("login", str)
        attributes.add("login", int)

        assert attributes.names == ("login",)
        assert attributes.find("login").type is int

    def test_preserves_declaration_order(self):
        attributes = AttributeSet()
        for name in ("b", "a", "c"):
            attributes.add(name, str)

        assert attributes.names == ("b", "a", "c")
        assert [a.name for a in attributes] == ["b", "a", "c"]

    def test_merge_overwrites_by_name(self):
        attributes = AttributeSet(Attribute("login", str), Attribute("age", int))
        attributes.merge([Attribute("age", str, default="1")])

        assert attributes.names == ("login", "age")
        assert attributes.find("age").type is str

    def test_clone_is_independent(self):
        attributes = AttributeSet(Attribute("login", str))
        clone = attributes.clone()
        clone.find("login").assign_value("me")

        assert attributes.values() == {"login": None}
        assert clone.values() == {"login": "me"}
