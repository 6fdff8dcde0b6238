from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from arriendos.schemas.auth_schemas import BackupRequestSchema
from arriendos.services import backup_service
from arriendos.utils.responses import success_response

bp = Blueprint("backup", __name__)


@bp.post("")
@jwt_required()
def respaldo_manual():
    """Body opcional: {"emails": ["a@b.cl"]} se suman a BACKUP_EMAIL_RECIPIENTS."""
    data = BackupRequestSchema().load(request.get_json(silent=True) or {})
    result = backup_service().generate_backup("manual", custom_emails=data["emails"])
    return success_response(data=result, message="Backup manual realizado y enviado exitosamente")
