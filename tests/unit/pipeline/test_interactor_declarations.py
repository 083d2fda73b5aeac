"""Class-level declarations of interactors."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from interactor import (
    ANY,
    DeclarationError,
    Input,
    Interactor,
    ListOf,
    Output,
    Status,
    UnionOf,
    argument,
    returns,
)

pytestmark = pytest.mark.unit


class CreateUser(Interactor):
    login = argument(str, "The login for the user", required=True)
    password = argument(str, "The password for the user", required=True)
    password_confirmation = argument(str, "The password confirmation for the user", required=True)
    role = argument(str, default="member")

    user = returns(dict, "The created user", required=True)

    def interact(self):
        self.context.user = {"login": self.context.login, "role": self.context.role}


class TestDeclarations:
    def test_argument_and_field_names(self):
        assert CreateUser.argument_names() == ("login", "password", "password_confirmation", "role")
        assert CreateUser.field_names() == ("user",)

    def test_declarations_are_removed_from_the_class(self):
        assert "login" not in vars(CreateUser)

    def test_arguments_and_fields_carry_metadata(self):
        login = CreateUser.arguments()[0]
        user = CreateUser.fields()[0]

        assert (login.name, login.type, login.required) == ("login", str, True)
        assert user.description == "The created user"

    def test_defaults_apply(self):
        result = CreateUser.perform(login="me", password="pw", password_confirmation="pw")

        assert result.data.user == {"login": "me", "role": "member"}

    def test_context_classes_are_named_after_the_interactor(self):
        assert CreateUser.input_context_class().__name__ == "CreateUserInput"
        assert CreateUser.output_context_class().__name__ == "CreateUserOutput"
        assert CreateUser.runtime_context_class().__name__ == "CreateUserRuntime"
        assert CreateUser.result_data_class().__name__ == "CreateUserResult"

    def test_runtime_merges_input_and_output(self):
        runtime = CreateUser.runtime_context_class()

        assert runtime.attribute_names() == ("login", "password", "password_confirmation", "role", "user")

    def test_output_declaration_wins_in_runtime(self):
        class Normalize(Interactor):
            name = argument(str)
            name_length = returns(int)

        Normalize.returns("name", str, required=True)

        runtime_name = Normalize.runtime_context_class().declared_attributes()[0]
        assert runtime_name.required

    def test_templates_are_memoized(self):
        assert CreateUser.input_context_class() is CreateUser.input_context_class()
        assert CreateUser.runtime_context_class() is CreateUser.runtime_context_class()

    def test_concurrent_first_access_builds_one_template(self):
        class Fresh(Interactor):
            value = argument(int)
            total = returns(int)

        with ThreadPoolExecutor(max_workers=8) as pool:
            classes = set(pool.map(lambda _: Fresh.runtime_context_class(), range(32)))

        assert len(classes) == 1

    def test_late_declarations_reset_derived_templates(self):
        class Growing(Interactor):
            first = argument(int)

        before = Growing.runtime_context_class()
        Growing.argument("second", int, required=True)

        assert Growing.runtime_context_class() is not before
        assert "second" in Growing.runtime_context_class().attribute_names()
        assert Growing.perform(first=1).errors == {"second": ["blank"]}

    def test_late_returns_extend_result_data(self):
        class Growing(Interactor):
            pass

        Growing.result_data_class()
        Growing.returns("answer", int, default=42)

        assert Growing.perform().data.answer == 42


class TestInheritance:
    def test_subclass_extends_parent_declarations(self):
        class CreateAdmin(CreateUser):
            permissions = argument(ListOf(str), default=[])

        assert CreateAdmin.argument_names() == (
            "login",
            "password",
            "password_confirmation",
            "role",
            "permissions",
        )
        assert "permissions" not in CreateUser.argument_names()

    def test_subclass_inherits_behavior(self):
        class CreateAdmin(CreateUser):
            role = argument(str, default="admin")

        result = CreateAdmin.perform(login="root", password="pw", password_confirmation="pw")

        assert result.data.user == {"login": "root", "role": "admin"}


class TestValidationRules:
    def test_input_validates(self):
        class Signup(Interactor):
            login = argument(str, required=True)
            password = argument(str, required=True)
            password_confirmation = argument(str, required=True)

        Signup.input_validates("login", min_length=3)
        Signup.input_validates("password", confirmation=True)

        result = Signup.perform(login="ab", password="pw", password_confirmation="other")

        assert result.status is Status.FAILED_AT_INPUT
        assert set(result.errors) == {"login", "password_confirmation"}

    def test_output_validates(self):
        class Classify(Interactor):
            label = returns(str, required=True)

            def interact(self):
                self.context.label = "unknown"

        Classify.output_validates("label", choices=["spam", "ham"])

        result = Classify.perform()

        assert result.status is Status.FAILED_AT_OUTPUT
        assert list(result.errors) == ["label"]

    def test_constraint_on_wrong_type_is_reported_as_invalid(self):
        class Signup(Interactor):
            age = argument(int, required=True)

        Signup.input_validates("age", ge=18)

        result = Signup.perform(age="abc")

        assert result.status is Status.FAILED_AT_INPUT
        assert result.errors == {"age": ["invalid"]}


class TestStandaloneContexts:
    def test_accepts_arguments_matching(self):
        class SignupInput(Input):
            email = argument(str, required=True)

        class Signup(Interactor):
            email_sent = returns(bool, default=False)

            def interact(self):
                self.context.email_sent = self.context.email is not None

        Signup.accepts_arguments_matching(SignupInput)
        Signup.argument("referrer", str)

        assert Signup.argument_names() == ("email", "referrer")
        assert SignupInput.argument_names() == ("email",)
        assert Signup.perform(email="me@example.com").data.email_sent is True
        assert Signup.perform().errors == {"email": ["blank"]}

    def test_returns_data_matching(self):
        class TokenOutput(Output):
            token = returns(str, required=True)

        class Issue(Interactor):
            def interact(self):
                self.context.token = "abc"

        Issue.returns_data_matching(TokenOutput)

        assert Issue.field_names() == ("token",)
        assert Issue.perform().data.token == "abc"

    def test_rejects_non_context_classes(self):
        with pytest.raises(DeclarationError):
            CreateUser.accepts_arguments_matching(dict)
        with pytest.raises(DeclarationError):
            CreateUser.returns_data_matching(Input)


class TestDeclarationErrors:
    @pytest.mark.parametrize("name", ["errors", "validate", "to_dict"])
    def test_reserved_argument_names(self, name):
        with pytest.raises(DeclarationError):
            type("Bad", (Interactor,), {name: argument(str)})

    def test_reserved_result_names(self):
        with pytest.raises(DeclarationError):

            class Bad(Interactor):
                keys = returns(list)

    def test_runtime_names_may_not_shadow_context_api(self):
        with pytest.raises(DeclarationError, match="attributes"):

            class Bad(Interactor):
                attributes = argument(dict)

    def test_late_runtime_name_collision_is_rejected(self):
        class Late(Interactor):
            pass

        with pytest.raises(DeclarationError):
            Late.returns("attributes", dict)
        assert Late.field_names() == ()

    def test_standalone_context_with_runtime_collision_is_rejected(self):
        class SharedInput(Input):
            attributes = argument(dict)

        class Plugged(Interactor):
            pass

        with pytest.raises(DeclarationError):
            Plugged.accepts_arguments_matching(SharedInput)

    def test_unsupported_argument_type_is_rejected(self):
        with pytest.raises(DeclarationError):

            class Bad(Interactor):
                age = argument("int")


class TestTypeHelpers:
    def test_helpers_build_type_expressions(self):
        assert Interactor.any() is ANY
        assert Interactor.list(int) == ListOf(int)
        assert Interactor.array(int) == ListOf(int)
        assert Interactor.union(str, int) == UnionOf(str, int)

    def test_helpers_in_declarations(self):
        class Tagged(Interactor):
            tags = argument(Interactor.list(str), required=True)
            flag = argument(Interactor.Boolean, default=True)
            payload = argument(Interactor.untyped())

        assert Tagged.perform(tags=["a", "b"], payload=object()).is_success
        assert Tagged.perform(tags=["a", 1]).errors == {"tags": ["invalid"]}
        assert Tagged.perform(tags=["a"], flag="maybe").errors == {"flag": ["invalid"]}

    def test_builtin_annotations_in_declarations(self):
        class Scored(Interactor):
            score = argument(int | None)
            labels = argument(list[str], default=[])

        assert Scored.perform(score=5, labels=["a"]).is_success
        assert Scored.perform().is_success
        assert Scored.perform(score="high").errors == {"score": ["invalid"]}
        assert Scored.perform(labels=["a", 1]).errors == {"labels": ["invalid"]}
