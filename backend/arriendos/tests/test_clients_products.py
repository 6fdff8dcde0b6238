import pytest

from arriendos.models.client import Client
from arriendos.models.product import Product


def test_crear_cliente_exige_name_y_rut(client, headers):
	resp = client.post("/api/clients", json={"name": "Sin Rut"}, headers=headers)
	assert resp.status_code == 400
	assert "rut" in resp.get_json()["errors"]


def test_crud_cliente(client, headers):
	resp = client.post(
		"/api/clients",
		json={"name": "Constructora Sur", "rut": "76-5", "companyName": "Sur SpA"},
		headers=headers,
	)
	assert resp.status_code == 201
	creado = resp.get_json()["data"]
	assert creado["frequentClient"] == "No"
	assert creado["creationDate"]

	uno = client.get(f"/api/clients?id={creado['id']}", headers=headers)
	assert uno.get_json()["data"]["companyName"] == "Sur SpA"

	sin_nombre = client.put(f"/api/clients/{creado['id']}", json={"phoneNumber": "123"}, headers=headers)
	assert sin_nombre.status_code == 400

	upd = client.put(
		f"/api/clients/{creado['id']}",
		json={"name": "Constructora Sur Ltda", "frequentClient": "Si"},
		headers=headers,
	)
	assert upd.status_code == 200
	assert upd.get_json()["data"]["frequentClient"] == "Si"

	borrar = client.delete(f"/api/clients?id={creado['id']}", headers=headers)
	assert borrar.status_code == 200

	otra_vez = client.delete(f"/api/clients?id={creado['id']}", headers=headers)
	assert otra_vez.status_code == 404


def test_cliente_inexistente_da_404(client, headers):
	resp = client.get("/api/clients?id=4242", headers=headers)
	assert resp.status_code == 404
	assert resp.get_json()["error"] == "Not Found"


def test_filtros_de_clientes(client, headers, make_client):
	make_client("1-1", name="Ana Rojas", frequent_client="Si")
	make_client("2-2", name="Bruno Díaz")

	por_nombre = client.get("/api/clients?name=rojas", headers=headers).get_json()
	assert por_nombre["count"] == 1

	frecuentes = client.get("/api/clients?frequentClient=Si", headers=headers).get_json()
	assert [c["rut"] for c in frecuentes["data"]] == ["1-1"]


def test_crear_producto_calcula_neto_e_iva(client, headers):
	resp = client.post(
		"/api/products",
		json={"name": "Andamio", "code": "AND-1", "priceTotal": 2000},
		headers=headers,
	)
	assert resp.status_code == 201
	data = resp.get_json()["data"]
	assert data["priceNet"] == pytest.approx(1620)
	assert data["priceIva"] == pytest.approx(380)
	assert data["rented"] is False


def test_codigo_de_producto_duplicado_da_409(client, headers, make_product):
	make_product("DUP-1")
	resp = client.post(
		"/api/products",
		json={"name": "Otro", "code": "DUP-1", "priceTotal": 10},
		headers=headers,
	)
	assert resp.status_code == 409
	assert resp.get_json()["success"] is False


def test_crear_producto_sin_precio_da_400(client, headers):
	resp = client.post("/api/products", json={"name": "X", "code": "X1"}, headers=headers)
	assert resp.status_code == 400


def test_actualizar_y_eliminar_producto(client, headers, make_product):
	p = make_product("BET-1", name="Betonera")

	upd = client.put(f"/api/products/{p.id}", json={"brand": "Makita", "rented": True}, headers=headers)
	assert upd.status_code == 200
	data = upd.get_json()["data"]
	assert data["brand"] == "Makita"
	assert data["rented"] is True
	assert data["updatedAt"]

	missing = client.put("/api/products/999", json={"brand": "X"}, headers=headers)
	assert missing.status_code == 404

	borrar = client.delete(f"/api/products?id={p.id}", headers=headers)
	assert borrar.status_code == 200
	assert client.get(f"/api/products?id={p.id}", headers=headers).status_code == 404


def test_filtros_de_productos(client, headers, make_product):
	make_product("A-1", name="Escalera", price_total=500, rented=True)
	make_product("A-2", name="Escalera Tijera", price_total=1500)
	make_product("B-1", name="Generador", price_total=9000)

	arrendados = client.get("/api/products?rented=true", headers=headers).get_json()["data"]
	assert [p["code"] for p in arrendados] == ["A-1"]

	por_nombre = client.get("/api/products?name=escalera", headers=headers).get_json()
	assert por_nombre["count"] == 2

	rango = client.get("/api/products?minPrice=1000&maxPrice=5000", headers=headers).get_json()["data"]
	assert [p["code"] for p in rango] == ["A-2"]

	invalido = client.get("/api/products?minPrice=10&maxPrice=1", headers=headers)
	assert invalido.status_code == 400


def test_no_elimina_cliente_ni_producto_con_arriendos(client, headers, rent_payload):
	resp = client.post("/api/rents", json=rent_payload(), headers=headers)
	assert resp.status_code == 201
	rent = resp.get_json()["data"]
	cliente = Client.query.filter_by(rut="1-9").one()
	producto = Product.query.one()

	borrar_cliente = client.delete(f"/api/clients?id={cliente.id}", headers=headers)
	assert borrar_cliente.status_code == 409
	assert borrar_cliente.get_json()["message"] == "No se puede eliminar: el cliente tiene arriendos asociados"

	borrar_producto = client.delete(f"/api/products?id={producto.id}", headers=headers)
	assert borrar_producto.status_code == 409
	assert borrar_producto.get_json()["message"] == "No se puede eliminar: el producto tiene arriendos asociados"

	assert client.get(f"/api/rents?id={rent['id']}", headers=headers).status_code == 200
	assert Client.query.count() == 1
