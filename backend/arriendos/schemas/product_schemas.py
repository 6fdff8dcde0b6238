from marshmallow import EXCLUDE, ValidationError, fields, validate, validates_schema

from arriendos.extensions.ma import ma


class ProductCreateSchema(ma.Schema):
    """
    priceNet y priceIva son opcionales: si no vienen se calculan
    desde priceTotal en el servicio.
    """

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1))
    code = fields.String(required=True, validate=validate.Length(min=1))
    brand = fields.String(load_default="")
    priceTotal = fields.Float(required=True, validate=validate.Range(min=0))
    priceNet = fields.Float(load_default=None, allow_none=True)
    priceIva = fields.Float(load_default=None, allow_none=True)
    priceWarranty = fields.Float(load_default=0)
    rented = fields.Boolean(load_default=False)


class ProductUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=1))
    code = fields.String(validate=validate.Length(min=1))
    brand = fields.String()
    priceTotal = fields.Float(validate=validate.Range(min=0))
    priceNet = fields.Float()
    priceIva = fields.Float()
    priceWarranty = fields.Float()
    rented = fields.Boolean()


class ProductQuerySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.String()
    name = fields.String()
    code = fields.String()
    brand = fields.String()
    rented = fields.Boolean()
    minPrice = fields.Float()
    maxPrice = fields.Float()

    @validates_schema
    def validar_rango(self, data, **kwargs):
        low = data.get("minPrice")
        high = data.get("maxPrice")
        if low is not None and high is not None and low > high:
            raise ValidationError("minPrice no puede ser mayor que maxPrice", field_name="minPrice")
