"""Tests for typed request inputs."""

import pytest

from services.exceptions import ValidationError
from services.inputs import (
    LoginInput,
    ProfileUpdateInput,
    RegisterInput,
    ResetPasswordInput,
    load_input,
)

REGISTER_PAYLOAD = {
    "fullName": "Ada Patient",
    "email": "a@x.com",
    "password": "Secret1",
    "gender": "female",
    "phoneNumber": "+15550100",
}


def test_register_accepts_camel_case_and_defaults_role():
    data = load_input(RegisterInput, REGISTER_PAYLOAD)

    assert data.full_name == "Ada Patient"
    assert data.phone_number == "+15550100"
    assert data.role == "patient"


def test_register_keeps_email_case():
    data = load_input(RegisterInput, {**REGISTER_PAYLOAD, "email": " Ada@X.com "})

    assert data.email == "Ada@X.com"


@pytest.mark.parametrize("missing", ["fullName", "email", "password", "gender", "phoneNumber"])
def test_register_reports_missing_fields(missing):
    payload = {key: value for key, value in REGISTER_PAYLOAD.items() if key != missing}

    with pytest.raises(ValidationError) as excinfo:
        load_input(RegisterInput, payload)

    assert excinfo.value.description == f"Missing required fields: {missing}."


def test_blank_values_count_as_missing():
    with pytest.raises(ValidationError) as excinfo:
        load_input(RegisterInput, {**REGISTER_PAYLOAD, "fullName": "   "})

    assert "fullName" in excinfo.value.description


@pytest.mark.parametrize(
    "override",
    [{"role": "admin"}, {"gender": "other"}, {"email": "not-an-email"}],
)
def test_register_rejects_invalid_values(override):
    with pytest.raises(ValidationError):
        load_input(RegisterInput, {**REGISTER_PAYLOAD, **override})


def test_login_requires_role():
    with pytest.raises(ValidationError) as excinfo:
        load_input(LoginInput, {"email": "a@x.com", "password": "Secret1"})

    assert "role" in excinfo.value.description


def test_reset_password_needs_email_or_token():
    assert load_input(ResetPasswordInput, {"email": "a@x.com", "newPassword": "N"}).email == "a@x.com"
    assert load_input(ResetPasswordInput, {"token": "t", "newPassword": "N"}).token == "t"

    with pytest.raises(ValidationError):
        load_input(ResetPasswordInput, {"newPassword": "N"})


def test_profile_update_only_reports_supplied_fields():
    data = load_input(ProfileUpdateInput, {"fullName": "New Name", "aboutProfile": "  ", "email": None})

    assert data.changes() == {"full_name": "New Name"}
