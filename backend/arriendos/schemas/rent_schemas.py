from marshmallow import EXCLUDE, ValidationError, fields, validate, validates_schema

from arriendos.extensions.ma import ma

RENT_REQUIRED_FIELDS = (
    "code",
    "productName",
    "quantity",
    "totalValuePerDay",
    "clientRut",
    "clientName",
)

_NUMERIC_FIELDS = ("quantity", "totalValuePerDay", "warrantyValue")


def _is_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


class RentCreateSchema(ma.Schema):
    """
    Crea un arriendo. Cliente y producto se resuelven (o crean) en el
    servicio a partir de clientRut y productId / code / productName.

    Los obligatorios se validan por "valor verdadero", salvo warrantyValue
    que acepta 0 (solo se rechaza ausente, null o "").
    """

    class Meta:
        unknown = EXCLUDE

    code = fields.Raw(load_default=None)
    productName = fields.Raw(load_default=None)
    productId = fields.Raw(load_default=None, allow_none=True)
    productCode = fields.String(load_default=None, allow_none=True)
    quantity = fields.Raw(load_default=None)
    totalValuePerDay = fields.Raw(load_default=None)
    clientRut = fields.Raw(load_default=None)
    clientName = fields.Raw(load_default=None)
    warrantyValue = fields.Raw(load_default=None, allow_none=True)
    warrantyType = fields.String(load_default=None, allow_none=True)
    deliveryDate = fields.String(load_default=None, allow_none=True)
    paymentMethod = fields.String(load_default=None, allow_none=True)
    isFinished = fields.Boolean(load_default=False)
    isPaid = fields.Boolean(load_default=False)
    totalDays = fields.Float(load_default=None, allow_none=True)
    totalPrice = fields.Float(load_default=None, allow_none=True)
    observations = fields.String(load_default=None, allow_none=True)

    @validates_schema
    def validar_obligatorios(self, data, **kwargs):
        missing = [f for f in RENT_REQUIRED_FIELDS if not data.get(f)]
        if data.get("warrantyValue") in (None, ""):
            missing.append("warrantyValue")
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        errors = {f: ["Debe ser numérico"] for f in _NUMERIC_FIELDS if not _is_number(data[f])}
        if errors:
            raise ValidationError(errors)


class RentUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    code = fields.String()
    productName = fields.String()
    clientRut = fields.String()
    clientName = fields.String()
    quantity = fields.Integer(allow_none=True)
    totalValuePerDay = fields.Float(allow_none=True)
    deliveryDate = fields.String(allow_none=True)
    paymentMethod = fields.String(allow_none=True)
    warrantyValue = fields.Float(allow_none=True)
    warrantyType = fields.String(allow_none=True)
    isPaid = fields.Boolean(allow_none=True)
    totalDays = fields.Float(allow_none=True)
    totalPrice = fields.Float(allow_none=True)
    observations = fields.String(allow_none=True)


class RentFinishSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    paymentMethod = fields.String(load_default=None, allow_none=True)
    deliveryDate = fields.String(load_default=None, allow_none=True)
    totalDays = fields.Float(load_default=None, allow_none=True)
    totalPrice = fields.Float(load_default=None, allow_none=True)
    observations = fields.String(load_default=None, allow_none=True)
    isPaid = fields.Boolean(load_default=None, allow_none=True)


class RentQuerySchema(ma.Schema):
    """Parámetros de GET /api/rents."""

    class Meta:
        unknown = EXCLUDE

    id = fields.String()
    type = fields.String(load_default="")
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    pageSize = fields.Integer(load_default=None, validate=validate.Range(min=1))
    code = fields.String()
    productName = fields.String()
    clientName = fields.String()
    clientRut = fields.String()
    isPaid = fields.Boolean()
    paymentMethod = fields.String()
    startDate = fields.DateTime()
    endDate = fields.DateTime()
