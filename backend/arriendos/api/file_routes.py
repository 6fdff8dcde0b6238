from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from arriendos.schemas.file_schemas import FileUrlRequestSchema
from arriendos.services import file_service
from arriendos.utils.responses import success_response

bp = Blueprint("files", __name__)

file_url_schema = FileUrlRequestSchema()


@bp.post("/presigned-url")
@jwt_required()
def url_prefirmada():
    """Body: {"fileName": "...", "action": "save"|"retrieve", "fileType": "image/png"}"""
    data = file_url_schema.load(request.get_json(silent=True) or {})
    url = file_service().presigned_url(data["action"], data["fileName"], data.get("fileType"))
    return success_response(data={"url": url}, message="URL generada", url=url)
