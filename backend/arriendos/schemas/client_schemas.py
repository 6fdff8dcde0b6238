from marshmallow import EXCLUDE, fields, validate

from arriendos.extensions.ma import ma


class _ClientFields(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    companyName = fields.String(allow_none=True)
    companyDocument = fields.String(allow_none=True)
    phoneNumber = fields.String(allow_none=True)
    address = fields.String(allow_none=True)
    creationDate = fields.String(allow_none=True)
    frequentClient = fields.String(allow_none=True)
    created = fields.String(allow_none=True)
    photoFileName = fields.String(allow_none=True)


class ClientCreateSchema(_ClientFields):
    name = fields.String(required=True, validate=validate.Length(min=1))
    rut = fields.String(required=True, validate=validate.Length(min=1))


class ClientUpdateSchema(_ClientFields):
    name = fields.String(required=True, validate=validate.Length(min=1))
    rut = fields.String()


class ClientQuerySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.String()
    name = fields.String()
    companyName = fields.String()
    rut = fields.String()
    frequentClient = fields.String()
