"""Tests for validation rules and the site's form objects."""

import pytest

from folio.forms.contact import ContactForm
from folio.forms.credentials import Credentials
from folio.validation import email, is_email, max_length, min_length, required, validate


class TestRules:
    def test_required(self) -> None:
        rule = required("Name is required.")
        assert rule("") == "Name is required."
        assert rule("   ") == "Name is required."
        assert rule("Ada") is None

    def test_max_length(self) -> None:
        rule = max_length(3)
        assert rule("abc") is None
        assert rule("abcd") == "Must be at most 3 characters"

    def test_min_length(self) -> None:
        assert min_length(8, "short")("1234567") == "short"
        assert min_length(8)("12345678") is None

    @pytest.mark.parametrize(
        "value",
        ["ada@example.com", "a.b+tag@mail.example.org", "x_y@sub-domain.dk"],
    )
    def test_valid_emails(self, value) -> None:
        assert is_email(value)
        assert email()(value) is None

    @pytest.mark.parametrize("value", ["", "ada", "ada@", "@example.com", "ada@example", "a b@c.dk"])
    def test_invalid_emails(self, value) -> None:
        assert not is_email(value)


class TestValidate:
    def test_first_error_per_field(self) -> None:
        result = validate({"name": ""}, {"name": [required("req"), max_length(0, "long")]})
        assert result.errors == {"name": ["req"]}
        assert not result

    def test_valid_data_is_cleaned(self) -> None:
        result = validate({"name": "Ada", "extra": "x"}, {"name": [required()]})
        assert result
        assert result.data == {"name": "Ada"}

    def test_missing_field_treated_as_empty(self) -> None:
        result = validate({}, {"name": [required("req")]})
        assert result.errors == {"name": ["req"]}


class TestContactForm:
    def test_valid(self) -> None:
        form = ContactForm("Ada", "ada@example.com", "Hello", "Nice work")
        assert form.validate() == {}

    def test_all_empty(self) -> None:
        assert ContactForm().validate() == {
            "name": ["Name is required."],
            "email": ["Email is required."],
            "subject": ["Subject is required."],
            "message": ["Message is required."],
        }

    def test_bad_email(self) -> None:
        errors = ContactForm("Ada", "not-an-email", "Hi", "Hello").validate()
        assert errors == {"email": ["Please enter a valid email address."]}

    def test_length_limits(self) -> None:
        errors = ContactForm("n" * 101, "ada@example.com", "s" * 201, "m" * 3001).validate()
        assert errors == {
            "name": ["Name is too long (maximum 100 characters)."],
            "subject": ["Subject is too long (maximum 200 characters)."],
            "message": ["Message is too long (maximum 3000 characters)."],
        }

    def test_boundaries_are_inclusive(self) -> None:
        form = ContactForm("n" * 100, "ada@example.com", "s" * 200, "m" * 3000)
        assert form.validate() == {}

    def test_to_dict(self) -> None:
        form = ContactForm("Ada", "ada@example.com", "Hi", "Hello")
        assert form.to_dict() == {
            "name": "Ada",
            "email": "ada@example.com",
            "subject": "Hi",
            "message": "Hello",
        }


class TestCredentials:
    def test_valid(self) -> None:
        assert Credentials("admin@example.com", "long-enough", "tok").validate() == {}

    def test_missing_token_is_general_error(self) -> None:
        errors = Credentials("admin@example.com", "long-enough", "").validate()
        assert errors == {"general": ["Invalid form submission."]}

    def test_short_password(self) -> None:
        errors = Credentials("admin@example.com", "short", "tok").validate()
        assert errors == {"password": ["Password must be at least 8 characters."]}

    def test_password_never_echoed(self) -> None:
        data = Credentials("admin@example.com", "secret-password", "tok").to_dict()
        assert data["password"] == ""
        assert data["email"] == "admin@example.com"
