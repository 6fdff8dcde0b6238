from flask import Blueprint, request

from arriendos.schemas.auth_schemas import LoginSchema
from arriendos.services import auth_service
from arriendos.utils.responses import success_response

bp = Blueprint("auth", __name__)


@bp.post("/login")
def login():
    data = LoginSchema().load(request.get_json(silent=True) or {})
    result = auth_service().authenticate(data["username"], data["password"])
    return success_response(data=result, message="Login exitoso")
