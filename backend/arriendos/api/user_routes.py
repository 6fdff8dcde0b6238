from flask import Blueprint, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from arriendos.schemas.auth_schemas import MembershipSchema
from arriendos.services import user_service
from arriendos.utils.responses import success_response

bp = Blueprint("users", __name__)


@bp.get("")
@jwt_required()
def listar_usuarios():
    """?current=true devuelve el usuario del token, leído de la base de datos."""
    service = user_service()
    if request.args.get("current", "").lower() == "true":
        return success_response(data=service.get_user_by_id(get_jwt_identity()), message="Usuario actual")

    users = service.get_all_users()
    return success_response(data=users, count=len(users))


@bp.put("/membership")
@jwt_required()
def actualizar_membresia():
    data = MembershipSchema().load(request.get_json(silent=True) or {})
    user = user_service().update_membership(str(data["userId"] or ""), data["membershipPaid"])
    return success_response(data=user, message="Membresía actualizada correctamente")
