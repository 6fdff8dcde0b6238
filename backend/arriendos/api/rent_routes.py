from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from arriendos.api._params import resource_id
from arriendos.schemas.rent_schemas import (
    RentCreateSchema,
    RentFinishSchema,
    RentQuerySchema,
    RentUpdateSchema,
)
from arriendos.services import rent_service, rent_workflow
from arriendos.utils.responses import success_response

bp = Blueprint("rents", __name__)

rent_create_schema = RentCreateSchema()
rent_update_schema = RentUpdateSchema()
rent_finish_schema = RentFinishSchema()
rent_query_schema = RentQuerySchema()


@bp.get("")
@jwt_required()
def listar_arriendos():
    """
    Lista arriendos.
    - ?type=active    -> solo activos
    - ?type=finished  -> finalizados, paginados (page, pageSize)
    - sin type        -> todos
    Filtros de texto: code, productName, clientName, clientRut.
    """
    service = rent_service()
    params = rent_query_schema.load(request.args.to_dict())
    rent_id = params.pop("id", None)
    if rent_id:
        return success_response(data=service.get_rent_by_id(rent_id))

    list_type = params.pop("type", "")
    page = params.pop("page", 1)
    page_size = params.pop("pageSize", None)

    if list_type == "active":
        rents = service.get_active_rents(params)
        return success_response(data=rents, count=len(rents), type="active")

    if list_type == "finished":
        result = service.get_finished_rents(params, page=page, page_size=page_size)
        rents = result.pop("data")
        return success_response(data=rents, count=len(rents), type="finished", pagination=result)

    rents = service.get_all_rents(params)
    return success_response(data=rents, count=len(rents), type="all")


@bp.post("")
@jwt_required()
def crear_arriendo():
    """
    Body JSON:
    {
      "code": "R1", "productName": "Mesa", "quantity": 2,
      "totalValuePerDay": 1000, "clientRut": "1-9", "clientName": "Ana",
      "warrantyValue": 0, "productId": "opcional"
    }
    """
    data = rent_create_schema.load(request.get_json() or {})
    rent = rent_workflow().create(data)
    return success_response(data=rent, message="Arriendo creado correctamente", status_code=201)


@bp.put("")
@bp.put("/<rent_id>")
@jwt_required()
def actualizar_arriendo(rent_id=None):
    rent_id = resource_id(rent_id)
    data = rent_update_schema.load(request.get_json() or {})
    rent = rent_workflow().update(rent_id, data)
    return success_response(data=rent, message="Arriendo actualizado correctamente")


@bp.patch("/finish")
@bp.patch("/<rent_id>/finish")
@jwt_required()
def finalizar_arriendo(rent_id=None):
    rent_id = resource_id(rent_id)
    data = rent_finish_schema.load(request.get_json(silent=True) or {})
    rent = rent_workflow().finish(rent_id, data)
    return success_response(data=rent, message="Arriendo finalizado correctamente")


@bp.delete("")
@bp.delete("/<rent_id>")
@jwt_required()
def eliminar_arriendo(rent_id=None):
    rent_id = resource_id(rent_id)
    result = rent_service().delete_rent(rent_id)
    return success_response(
        message="Arriendo eliminado correctamente",
        deletedCount=result["deletedCount"],
    )
