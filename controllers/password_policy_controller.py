"""REST endpoints used by the identity host during a password change."""
from __future__ import annotations

from flask import Blueprint, current_app, request

from models.identity import UserIdentity
from services.password_policy_service import EXTENSION_KEY, PasswordPolicyService
from utils.exceptions import BizError, PasswordRejected
from utils.response import json_response


password_policy_bp = Blueprint("password_policy", __name__, url_prefix="/api/password-policy")


def get_policy_service() -> PasswordPolicyService:
    return current_app.extensions[EXTENSION_KEY]


@password_policy_bp.errorhandler(BizError)
def _handle_biz_error(err: BizError):
    return json_response(code=err.code, message=err.message, data=err.data), err.code


@password_policy_bp.get("/")
def describe_policy():
    return json_response(data=get_policy_service().describe())


@password_policy_bp.post("/validate")
def validate_password():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BizError(message="Request body must be a JSON object")

    password = data.get("password")
    if password is not None and not isinstance(password, str):
        raise BizError(message="password must be a string")
    user = data.get("user")
    if user is not None and not isinstance(user, dict):
        raise BizError(message="user must be an object")
    try:
        identity = UserIdentity.from_dict(user)
    except ValueError as exc:
        raise BizError(message=str(exc)) from exc

    verdict = get_policy_service().validate(
        identity,
        password,
        client_ip=request.remote_addr,
        language_hint=request.headers.get("Accept-Language"),
    )
    if not verdict.accepted:
        raise PasswordRejected(verdict)
    return json_response(data=verdict.to_dict())
