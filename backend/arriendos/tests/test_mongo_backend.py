import pytest

from flask_jwt_extended import create_access_token

from arriendos.models.documents import ClientDocument, ProductDocument, UserDocument
from arriendos.repositories.mongo import MongoRepositories
from arriendos.extensions import bcrypt


@pytest.fixture()
def mongo_client(mongo_app):
	return mongo_app.test_client()


@pytest.fixture()
def mongo_headers(mongo_app):
	user = UserDocument(
		username="operador",
		password=bcrypt.generate_password_hash("Passw0rd!").decode("utf-8"),
		name="Operador",
	).save()
	token = create_access_token(identity=str(user.id))
	return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def crear(mongo_client, mongo_headers, rent_payload):
	def _crear(**overrides):
		resp = mongo_client.post("/api/rents", json=rent_payload(**overrides), headers=mongo_headers)
		assert resp.status_code == 201, resp.get_json()
		return resp.get_json()["data"]

	return _crear


def test_backend_seleccionado(mongo_app):
	assert isinstance(mongo_app.extensions["arriendos.repositories"], MongoRepositories)


def test_crear_arriendo_mongo(crear):
	data = crear()

	assert data["code"] == "R1"
	assert data["clientRut"] == "1-9"
	assert data["product"]["code"] == "MESA"
	assert data["product"]["priceNet"] == pytest.approx(810)
	assert data["product"]["priceIva"] == pytest.approx(190)
	assert data["product"]["rented"] is True
	assert data["client"]["frequentClient"] == "No"
	assert data["clientId"] == data["client"]["id"]

	assert ClientDocument.objects.count() == 1
	assert ProductDocument.objects(code="MESA").first().rented is True


def test_busqueda_mongo_usa_cualquier_palabra(mongo_client, mongo_headers, crear):
	crear(code="V1", productName="Mesa Vidrio")
	crear(code="M1", productName="Mesa Madera")
	crear(code="S1", productName="Silla")

	resp = mongo_client.get("/api/rents", query_string={"productName": "mesa vidrio"}, headers=mongo_headers)
	nombres = sorted(r["productName"] for r in resp.get_json()["data"])
	assert nombres == ["Mesa Madera", "Mesa Vidrio"]


def test_finalizar_y_paginar_mongo(mongo_client, mongo_headers, crear):
	ids = [crear(code=f"R{i}")["id"] for i in range(3)]
	for i, rent_id in enumerate(ids):
		resp = mongo_client.patch(
			f"/api/rents/finish?id={rent_id}",
			json={"paymentMethod": "Transferencia", "deliveryDate": f"2026-02-0{i + 1}"},
			headers=mongo_headers,
		)
		assert resp.status_code == 200

	again = mongo_client.patch(
		f"/api/rents/finish?id={ids[0]}", json={"paymentMethod": "Efectivo"}, headers=mongo_headers
	)
	assert again.status_code == 400

	body = mongo_client.get("/api/rents?type=finished&pageSize=2", headers=mongo_headers).get_json()
	assert [r["deliveryDate"] for r in body["data"]] == ["2026-02-03", "2026-02-02"]
	assert body["pagination"]["totalPages"] == 2
	assert body["pagination"]["totalCount"] == 3


def test_eliminar_y_actualizar_mongo(mongo_client, mongo_headers, crear):
	rent = crear()

	assert mongo_client.delete("/api/rents?id=no-es-objectid", headers=mongo_headers).status_code == 404

	upd = mongo_client.put(f"/api/rents?id={rent['id']}", json={"clientRut": "00-0"}, headers=mongo_headers)
	assert upd.status_code == 404
	assert ClientDocument.objects.count() == 1

	resp = mongo_client.delete(f"/api/rents?id={rent['id']}", headers=mongo_headers)
	assert resp.status_code == 200
	assert resp.get_json()["deletedCount"] == 1


def test_login_y_usuario_actual_mongo(mongo_client, mongo_headers):
	resp = mongo_client.post("/api/login", json={"username": "operador", "password": "Passw0rd!"})
	assert resp.status_code == 200
	token = resp.get_json()["data"]["token"]

	me = mongo_client.get("/api/users?current=true", headers={"Authorization": f"Bearer {token}"})
	assert me.status_code == 200
	assert me.get_json()["data"]["username"] == "operador"
