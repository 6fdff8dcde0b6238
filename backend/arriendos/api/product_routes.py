from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from arriendos.api._params import query_filters, resource_id
from arriendos.schemas.product_schemas import ProductCreateSchema, ProductQuerySchema, ProductUpdateSchema
from arriendos.services import product_service
from arriendos.utils.responses import success_response

bp = Blueprint("products", __name__)

product_create_schema = ProductCreateSchema()
product_update_schema = ProductUpdateSchema()
product_query_schema = ProductQuerySchema()


@bp.get("")
@jwt_required()
def listar_productos():
    """
    Lista productos o devuelve uno con ?id=.
    Filtros: name, code, brand, rented, minPrice, maxPrice.
    """
    service = product_service()
    product_id = request.args.get("id")
    if product_id:
        return success_response(data=service.get_product_by_id(product_id))

    products = service.get_all_products(query_filters(product_query_schema))
    return success_response(data=products, count=len(products))


@bp.post("")
@jwt_required()
def crear_producto():
    data = product_create_schema.load(request.get_json() or {})
    product = product_service().create_product(data)
    return success_response(data=product, message="Producto creado correctamente", status_code=201)


@bp.put("")
@bp.put("/<product_id>")
@jwt_required()
def actualizar_producto(product_id=None):
    product_id = resource_id(product_id)
    data = product_update_schema.load(request.get_json() or {})
    product = product_service().update_product(product_id, data)
    return success_response(data=product, message="Producto actualizado correctamente")


@bp.delete("")
@bp.delete("/<product_id>")
@jwt_required()
def eliminar_producto(product_id=None):
    product_id = resource_id(product_id)
    product_service().delete_product(product_id)
    return success_response(message="Producto eliminado correctamente")
