"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from flask import Request, current_app
from werkzeug.exceptions import BadRequest

from services.inputs import load_input


def parse_json_request(req: Request, *, allow_empty: bool = False) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    return data


def parse_request_input(req: Request, model, *, allow_form: bool = False):
    """Validate the request body into the typed input ``model``.

    With ``allow_form`` a multipart or urlencoded form is accepted in place
    of a JSON body.
    """

    if allow_form and not req.is_json:
        return load_input(model, req.form.to_dict())
    return load_input(model, parse_json_request(req, allow_empty=allow_form))


def parse_pagination(args) -> tuple[int, int]:
    """Return ``(page, limit)`` from query arguments, clamped to sane bounds."""

    default_limit = int(current_app.config.get("DEFAULT_PAGE_SIZE", 10))
    max_limit = int(current_app.config.get("MAX_PAGE_SIZE", 100))
    try:
        page = int(args.get("page", 1))
        limit = int(args.get("limit", default_limit))
    except (TypeError, ValueError):
        raise BadRequest("page and limit must be integers.") from None
    if page < 1 or limit < 1:
        raise BadRequest("page and limit must be positive.")
    return page, min(limit, max_limit)
