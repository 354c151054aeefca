"""Authentication blueprint: registration, login and password recovery."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import (
    get_jwt_identity,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)

from services.credentials import CredentialWorkflow
from services.inputs import (
    EmailInput,
    LoginInput,
    RegisterInput,
    ResetCodeInput,
    ResetPasswordInput,
    UpdatePasswordInput,
    VerifyEmailInput,
)
from utils.request_validation import parse_request_input

auth_bp = Blueprint("auth", __name__)


def _workflow() -> CredentialWorkflow:
    return current_app.extensions["credential_workflow"]


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new account and send its email verification code."""

    data = parse_request_input(request, RegisterInput)
    user = _workflow().register(data)
    return (
        jsonify({"message": "User created successfully.", "user": user}),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify-email", methods=["POST"])
def verify_email() -> tuple:
    data = parse_request_input(request, VerifyEmailInput)
    user = _workflow().verify_email(data.code)
    return jsonify({"message": "Email verified successfully.", "user": user}), HTTPStatus.OK


@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a user and set the session cookie."""

    data = parse_request_input(request, LoginInput)
    user, token = _workflow().login(data)

    response = jsonify({"message": f"Welcome back {user['fullName']}", "user": user})
    max_age = int(current_app.config["JWT_ACCESS_TOKEN_EXPIRES"].total_seconds())
    set_access_cookies(response, token, max_age=max_age)
    return response


@auth_bp.route("/logout", methods=["GET"])
def logout():
    response = jsonify({"message": "Logout successfully"})
    unset_jwt_cookies(response)
    return response


@auth_bp.route("/user/forget-password", methods=["POST"])
def forget_password() -> tuple:
    """Send a reset code to the account's email."""

    data = parse_request_input(request, EmailInput)
    _workflow().forgot_password(data.email)
    return jsonify({"message": "Password reset code sent to your email."}), HTTPStatus.OK


@auth_bp.route("/reset-code", methods=["POST"])
def verify_reset_code() -> tuple:
    """Confirm a reset code is still valid; the code stays usable."""

    data = parse_request_input(request, ResetCodeInput)
    _workflow().verify_reset_code(data.email, data.code)
    return jsonify({"message": "Reset code verified."}), HTTPStatus.OK


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password() -> tuple:
    """Reset a password by email, or by the signed token from the reset link."""

    data = parse_request_input(request, ResetPasswordInput)
    if data.token:
        _workflow().reset_password_with_token(data.token, data.new_password)
    else:
        _workflow().reset_password(data.email, data.new_password)
    return jsonify({"message": "Password reset successfully."}), HTTPStatus.OK


@auth_bp.route("/update-password", methods=["PUT"])
@jwt_required()
def update_password() -> tuple:
    data = parse_request_input(request, UpdatePasswordInput)
    _workflow().update_password(get_jwt_identity(), data)
    return jsonify({"message": "Password updated successfully."}), HTTPStatus.OK
