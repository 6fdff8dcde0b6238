from flask import jsonify


def success_response(data=None, message="OK", status_code=200, **extra):
    payload = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    response = jsonify(payload)
    response.status_code = status_code
    return response
