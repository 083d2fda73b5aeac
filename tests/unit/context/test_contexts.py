"""Unit tests for input, output and runtime contexts."""

import json

import pytest

from interactor.context import Input, Output, ResultData, Runtime, argument, returns
from interactor.core.exceptions import DeclarationError
from interactor.core.type_expressions import Boolean

pytestmark = pytest.mark.unit


class SignupInput(Input):
    email = argument(str, "The email address of the user", required=True)
    age = argument(int, "The age of the user")
    newsletter = argument(Boolean, "Opt into the newsletter", default=False)


class TestInputDeclarations:
    def test_declarations_keep_order(self):
        assert SignupInput.argument_names() == ("email", "age", "newsletter")

    def test_declared_attributes_carry_metadata(self):
        email = SignupInput.declared_attributes()[0]

        assert email.name == "email"
        assert email.type is str
        assert email.required
        assert email.description == "The email address of the user"

    def test_accessor_is_documented(self):
        assert SignupInput.email.__doc__ == "The email address of the user"

    def test_late_declaration(self):
        class LateInput(Input):
            pass

        LateInput.argument("token", str, required=True)

        assert LateInput.argument_names() == ("token",)
        assert LateInput(token="abc").token == "abc"

    def test_subclass_inherits_without_touching_parent(self):
        class ExtendedInput(SignupInput):
            referrer = argument(str)

        assert ExtendedInput.argument_names() == ("email", "age", "newsletter", "referrer")
        assert SignupInput.argument_names() == ("email", "age", "newsletter")

    @pytest.mark.parametrize("name", ["errors", "validate", "to_dict", "arguments"])
    def test_reserved_names_are_rejected(self, name):
        with pytest.raises(DeclarationError):
            SignupInput.argument(name, str)

    def test_private_names_are_rejected(self):
        with pytest.raises(DeclarationError):
            SignupInput.argument("_secret", str)

    def test_returns_is_rejected_on_input(self):
        with pytest.raises(DeclarationError):

            class WrongInput(Input):
                user = returns(str)


class TestInputValues:
    def test_assigns_declared_values(self):
        context = SignupInput({"email": "me@example.com"}, age=30)

        assert context.email == "me@example.com"
        assert context.age == 30
        assert context.newsletter is False
        assert context.arguments == {"email": "me@example.com", "age": 30, "newsletter": False}

    def test_undeclared_keys_are_ignored(self):
        context = SignupInput(email="me@example.com", admin=True)

        assert "admin" not in context.to_dict()
        with pytest.raises(AttributeError):
            context.admin  # noqa: B018

    def test_undeclared_assignment_raises(self):
        context = SignupInput()

        with pytest.raises(AttributeError):
            context.admin = True

    def test_item_access(self):
        context = SignupInput(email="me@example.com")
        context["age"] = 40

        assert context["email"] == "me@example.com"
        assert context.age == 40
        assert "email" in context
        with pytest.raises(KeyError):
            context["admin"]

    def test_instances_do_not_share_values(self):
        first = SignupInput(email="a@example.com")
        second = SignupInput(email="b@example.com")

        assert first.email == "a@example.com"
        assert second.email == "b@example.com"

    def test_to_json(self):
        context = SignupInput(email="me@example.com")

        assert json.loads(context.to_json()) == {"email": "me@example.com", "age": None, "newsletter": False}

    def test_repr(self):
        assert repr(SignupInput(email="x")) == "SignupInput(email='x', age=None, newsletter=False)"


class TestInputValidation:
    def test_valid_input(self):
        context = SignupInput(email="me@example.com", age=30, newsletter="yes")

        assert context.validate()
        assert context.is_valid
        assert dict(context.errors) == {}

    def test_missing_and_wrong_typed_values(self):
        context = SignupInput(age="thirty")

        assert not context.validate()
        assert context.errors.to_dict() == {"email": ["blank"], "age": ["invalid"]}

    def test_validation_is_repeatable(self):
        context = SignupInput()
        context.validate()
        context.email = "me@example.com"

        assert context.validate()
        assert context.errors.is_empty

    def test_rules_run_after_attribute_checks(self):
        class RuledInput(Input):
            email = argument(str, required=True)
            password = argument(str, required=True)
            password_confirmation = argument(str)

        RuledInput.validates("email", pattern=r".+@.+")
        RuledInput.validates("password", confirmation=True)

        context = RuledInput(email="nope", password="secret", password_confirmation="other")

        assert not context.validate()
        assert set(context.errors) == {"email", "password_confirmation"}
        assert context.errors["password_confirmation"] == ["doesn't match Password"]

    def test_rules_are_inherited_by_subclasses(self):
        class ParentInput(Input):
            age = argument(int)

        ParentInput.validates("age", ge=18)

        class ChildInput(ParentInput):
            pass

        assert not ChildInput(age=12).validate()
        assert ChildInput(age=21).validate()


class TestOutput:
    def test_fields(self):
        class UserOutput(Output):
            user = returns(str, "The created user", required=True)
            token = returns(str)

        output = UserOutput(user="me", unknown=1)

        assert UserOutput.field_names() == ("user", "token")
        assert output.fields == {"user": "me", "token": None}

    @pytest.mark.parametrize("name", ["keys", "get", "to_json"])
    def test_result_data_names_are_reserved(self, name):
        class EmptyOutput(Output):
            pass

        with pytest.raises(DeclarationError):
            EmptyOutput.returns(name, str)

    def test_argument_is_rejected_on_output(self):
        with pytest.raises(DeclarationError):

            class WrongOutput(Output):
                login = argument(str)


class TestRuntime:
    def test_open_table_for_undeclared_names(self):
        context = Runtime()
        context.scratch = [1, 2]

        assert context.scratch == [1, 2]
        assert context["scratch"] == [1, 2]
        assert context.attributes == {"scratch": [1, 2]}

    def test_unknown_reads_return_none(self):
        assert Runtime().never_written is None

    def test_construction_ignores_undeclared_keys(self):
        assert Runtime({"login": "me"}).attributes == {}

    def test_declared_values_overlay_the_table(self):
        class WorkRuntime(Runtime):
            pass

        WorkRuntime._merge_declarations(SignupInput.declared_attributes())
        context = WorkRuntime(email="me@example.com", extra="ignored")
        context.note = "hi"

        assert context.attributes == {"note": "hi", "email": "me@example.com", "age": None, "newsletter": False}
        assert context.to_dict() == context.attributes


class TestResultData:
    def test_snapshot_class(self):
        data_class = ResultData.for_fields("CreateUser", ["user", "token"])
        data = data_class.from_mapping({"user": "me", "other": 1})

        assert data.user == "me"
        assert data["token"] is None
        assert data.get("missing", "fallback") == "fallback"
        assert list(data) == ["user", "token"]
        assert len(data) == 2
        assert "user" in data
        assert data.to_dict() == {"user": "me", "token": None}
        with pytest.raises(KeyError):
            data["other"]

    def test_snapshot_is_frozen(self):
        data = ResultData.for_fields("CreateUser", ["user"]).from_mapping({"user": "me"})

        with pytest.raises(AttributeError):
            data.user = "other"
