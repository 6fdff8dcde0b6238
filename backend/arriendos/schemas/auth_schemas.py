from marshmallow import EXCLUDE, fields, validate

from arriendos.extensions.ma import ma


class LoginSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, validate=validate.Length(min=1))


class MembershipSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    userId = fields.Raw(required=True)
    membershipPaid = fields.Boolean(required=True)


class BackupRequestSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    emails = fields.List(fields.String(), load_default=list)
