"""Typed request inputs, validated before any store access.

Payloads use the camelCase keys the frontend sends; snake_case names are
accepted too.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import ValidationError

Role = Literal["patient", "doctor"]
Gender = Literal["male", "female"]
Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Empty strings count as missing, like absent keys.
_MISSING_ERRORS = {"missing", "string_too_short"}


def _check_email(value: str) -> str:
    local, sep, domain = value.partition("@")
    if not sep or not local or "." not in domain or " " in value:
        raise ValueError("must be a valid email address")
    return value


class _Input(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class RegisterInput(_Input):
    full_name: Text
    email: Text
    password: Text
    gender: Gender
    phone_number: Text
    role: Role = "patient"

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return _check_email(value)


class LoginInput(_Input):
    email: Text
    password: Text
    role: Role


class EmailInput(_Input):
    email: Text


class VerifyEmailInput(_Input):
    code: Text


class ResetCodeInput(_Input):
    email: Text
    code: Text


class ResetPasswordInput(_Input):
    email: Optional[Text] = None
    token: Optional[Text] = None
    new_password: Text

    @model_validator(mode="after")
    def email_or_token(self):
        if not self.email and not self.token:
            raise ValueError("either email or token is required")
        return self


class UpdatePasswordInput(_Input):
    current_password: Text
    new_password: Text


class ProfileUpdateInput(_Input):
    full_name: Optional[str] = None
    email: Optional[str] = None
    about_profile: Optional[str] = None
    phone_number: Optional[str] = None
    gender: Optional[Gender] = None

    @field_validator("full_name", "email", "about_profile", "phone_number")
    @classmethod
    def blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: Optional[str]) -> Optional[str]:
        return value if value is None else _check_email(value)

    def changes(self) -> dict:
        """Return only the fields the caller supplied."""

        return self.model_dump(exclude_none=True)


def load_input(model: type[_Input], payload) -> _Input:
    """Build ``model`` from ``payload`` or raise :class:`ValidationError`."""

    try:
        return model.model_validate(dict(payload or {}))
    except PydanticValidationError as exc:
        errors = exc.errors()
        missing = sorted(
            str(error["loc"][0])
            for error in errors
            if error["type"] in _MISSING_ERRORS and error["loc"]
        )
        if missing:
            raise ValidationError(
                "Missing required fields: {}.".format(", ".join(missing))
            ) from None
        problems = []
        for error in errors:
            field = ".".join(str(part) for part in error["loc"]) or "payload"
            problems.append(f"{field}: {error['msg']}")
        raise ValidationError("; ".join(problems)) from None
