"""User blueprint: profile lookups, updates, deletion and photo serving."""

from __future__ import annotations

import os
from typing import Iterable

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from flask_jwt_extended import get_jwt_identity, jwt_required, unset_jwt_cookies
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, Forbidden

from services.inputs import ProfileUpdateInput
from services.profiles import ProfileService
from utils.request_validation import parse_pagination, parse_request_input

users_bp = Blueprint("users", __name__)
uploads_bp = Blueprint("uploads", __name__)

MAX_UPLOAD_SIZE_DEFAULT = 5 * 1024 * 1024  # 5 MB
ALLOWED_EXTENSIONS_DEFAULT = {"jpeg", "jpg", "png", "gif", "webp"}


def _profiles() -> ProfileService:
    return current_app.extensions["profile_service"]


def _require_self(user_id: str) -> str:
    identity = get_jwt_identity()
    if identity != user_id:
        raise Forbidden("You can only change your own account.")
    return identity


def _allowed_extensions() -> set[str]:
    configured = current_app.config.get("ALLOWED_UPLOAD_TYPES")
    if not configured:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if isinstance(configured, str):
        values: Iterable[str] = configured.split(",")
    else:
        values = configured

    normalized = {str(raw).strip().lower().lstrip(".") for raw in values}
    normalized.discard("")
    if not normalized:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if "jpeg" in normalized:
        normalized.add("jpg")
    if "jpg" in normalized:
        normalized.add("jpeg")
    return normalized


def _validate_photo(file: FileStorage) -> None:
    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("A profile photo file is required.")

    extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if extension not in _allowed_extensions():
        allowed = ", ".join(sorted(_allowed_extensions()))
        raise BadRequest(f"File type not allowed. Allowed types: {allowed}.")

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", MAX_UPLOAD_SIZE_DEFAULT))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise BadRequest(f"File exceeds the maximum upload size of {max_size} bytes.")


@users_bp.route("/user", methods=["GET"])
@jwt_required()
def list_users():
    """Return a page of users other than the caller, optionally filtered by name or email."""

    page, limit = parse_pagination(request.args)
    search = (request.args.get("search") or "").strip()
    results, count = _profiles().list_users(
        search=search, page=page, limit=limit, exclude_id=get_jwt_identity()
    )
    return jsonify({"results": results, "count": count, "page": page, "limit": limit})


@users_bp.route("/user/<user_id>", methods=["GET"])
@jwt_required()
def get_user(user_id: str):
    return jsonify({"user": _profiles().get_user(user_id)})


@users_bp.route("/update-user/<user_id>", methods=["PUT"])
@jwt_required()
def update_user(user_id: str):
    """Update profile fields and, for multipart requests, the profile photo."""

    _require_self(user_id)
    data = parse_request_input(request, ProfileUpdateInput, allow_form=True)

    photo = request.files.get("profilePhoto")
    if photo is not None:
        _validate_photo(photo)

    user = _profiles().update_profile(user_id, data, photo=photo)
    return jsonify({"message": "User updated successfully", "user": user})


@users_bp.route("/delete-user/<user_id>", methods=["DELETE"])
@jwt_required()
def delete_user(user_id: str):
    _require_self(user_id)
    _profiles().delete_user(user_id)
    response = jsonify({"message": "User deleted successfully"})
    unset_jwt_cookies(response)
    return response


@uploads_bp.route("/<path:filename>", methods=["GET"])
def uploaded_file(filename: str):
    return send_from_directory(os.path.abspath(current_app.config["UPLOAD_DIR"]), filename)
