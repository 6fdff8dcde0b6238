from flask import request

from arriendos.utils.errors import BadRequestError


def resource_id(path_id=None) -> str:
    """Id desde la ruta (/recurso/<id>) o desde ?id=."""
    value = path_id or request.args.get("id")
    if not value:
        raise BadRequestError("El parámetro id es obligatorio")
    return str(value)


def query_filters(schema) -> dict:
    data = schema.load(request.args.to_dict())
    data.pop("id", None)
    return data
