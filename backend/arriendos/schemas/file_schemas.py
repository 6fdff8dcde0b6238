from marshmallow import EXCLUDE, ValidationError, fields, validates_schema

from arriendos.extensions.ma import ma

FILE_ACTIONS = ("save", "retrieve")


class FileUrlRequestSchema(ma.Schema):
    """
    Pide una URL pre-firmada: "save" para subir (PUT) y "retrieve" para
    descargar (GET) el objeto fileName del bucket.
    """

    class Meta:
        unknown = EXCLUDE

    fileName = fields.String(load_default=None, allow_none=True)
    fileType = fields.String(load_default=None, allow_none=True)
    action = fields.String(load_default=None, allow_none=True)

    @validates_schema
    def validar_accion(self, data, **kwargs):
        if not data.get("fileName") or not data.get("action"):
            raise ValidationError("Missing required fields: fileName and action")
        if data["action"] not in FILE_ACTIONS:
            raise ValidationError('Invalid action. Allowed values are "save" or "retrieve".')
        if data["action"] == "save" and not data.get("fileType"):
            raise ValidationError("Missing required field: fileType for save action")
