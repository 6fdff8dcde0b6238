from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from arriendos.api._params import query_filters, resource_id
from arriendos.schemas.client_schemas import ClientCreateSchema, ClientQuerySchema, ClientUpdateSchema
from arriendos.services import client_service
from arriendos.utils.responses import success_response

bp = Blueprint("clients", __name__)

client_create_schema = ClientCreateSchema()
client_update_schema = ClientUpdateSchema()
client_query_schema = ClientQuerySchema()


@bp.get("")
@jwt_required()
def listar_clientes():
    """
    Lista clientes o devuelve uno con ?id=.
    Filtros: name, companyName, rut, frequentClient.
    """
    service = client_service()
    client_id = request.args.get("id")
    if client_id:
        return success_response(data=service.get_client_by_id(client_id))

    clients = service.get_all_clients(query_filters(client_query_schema))
    return success_response(data=clients, count=len(clients))


@bp.post("")
@jwt_required()
def crear_cliente():
    data = client_create_schema.load(request.get_json() or {})
    client = client_service().create_client(data)
    current_app.logger.info("Cliente creado id=%s", client["id"])
    return success_response(data=client, message="Cliente creado correctamente", status_code=201)


@bp.put("")
@bp.put("/<client_id>")
@jwt_required()
def actualizar_cliente(client_id=None):
    client_id = resource_id(client_id)
    data = client_update_schema.load(request.get_json() or {})
    client = client_service().update_client(client_id, data)
    return success_response(data=client, message="Cliente actualizado correctamente")


@bp.delete("")
@bp.delete("/<client_id>")
@jwt_required()
def eliminar_cliente(client_id=None):
    client_id = resource_id(client_id)
    client_service().delete_client(client_id)
    return success_response(message="Cliente eliminado correctamente")
