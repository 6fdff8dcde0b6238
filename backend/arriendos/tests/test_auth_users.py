from flask_jwt_extended import decode_token


def test_health_sin_token(client):
	resp = client.get("/api/health")
	assert resp.status_code == 200
	assert resp.get_json()["status"] == "ok"


def test_endpoints_exigen_token(client):
	for method, url in (
		("get", "/api/rents"),
		("post", "/api/rents"),
		("get", "/api/clients"),
		("get", "/api/products"),
		("post", "/api/backup"),
		("get", "/api/users?current=true"),
	):
		resp = getattr(client, method)(url)
		assert resp.status_code == 401, url
		body = resp.get_json()
		assert body["success"] is False
		assert body["error"] == "Unauthorized"


def test_token_invalido(client):
	resp = client.get("/api/rents", headers={"Authorization": "Bearer no-es-un-jwt"})
	assert resp.status_code == 401


def test_login_ok(app, client, make_user):
	make_user("ana", password="secreto", name="Ana Pérez", role="admin")

	resp = client.post("/api/login", json={"username": "ana", "password": "secreto"})
	assert resp.status_code == 200
	data = resp.get_json()["data"]
	assert "password" not in data["user"]
	assert data["user"]["role"] == "admin"

	claims = decode_token(data["token"])
	assert claims["username"] == "ana"
	assert claims["name"] == "Ana Pérez"
	assert claims["role"] == "admin"
	assert claims["membershipPaid"] is False
	assert claims["sub"] == data["user"]["id"]

	ok = client.get("/api/rents", headers={"Authorization": f"Bearer {data['token']}"})
	assert ok.status_code == 200


def test_login_credenciales_invalidas(client, make_user):
	make_user("beto", password="correcta")

	malo = client.post("/api/login", json={"username": "beto", "password": "otra"})
	assert malo.status_code == 401

	nadie = client.post("/api/login", json={"username": "nadie", "password": "x"})
	assert nadie.status_code == 401

	vacio = client.post("/api/login", json={"username": "beto"})
	assert vacio.status_code == 400


def test_login_con_contrasena_legada(app, client, make_user):
	make_user("viejo", password="plano", hashed=False)

	resp = client.post("/api/login", json={"username": "viejo", "password": "plano"})
	assert resp.status_code == 200

	app.config["LEGACY_PLAINTEXT_PASSWORDS"] = False
	resp = client.post("/api/login", json={"username": "viejo", "password": "plano"})
	assert resp.status_code == 401


def test_usuario_actual(client, make_user, auth_header):
	user = make_user("carla", name="Carla")

	resp = client.get("/api/users?current=true", headers=auth_header(user.id))
	assert resp.status_code == 200
	data = resp.get_json()["data"]
	assert data["username"] == "carla"
	assert "password" not in data

	fantasma = client.get("/api/users?current=true", headers=auth_header(9999))
	assert fantasma.status_code == 404


def test_listar_usuarios_sin_contrasenas(client, headers, make_user):
	make_user("dani")

	body = client.get("/api/users", headers=headers).get_json()
	assert body["count"] == 2
	assert all("password" not in u for u in body["data"])


def test_actualizar_membresia(client, headers, make_user):
	user = make_user("eli")

	resp = client.put(
		"/api/users/membership",
		json={"userId": user.id, "membershipPaid": True},
		headers=headers,
	)
	assert resp.status_code == 200
	assert resp.get_json()["data"]["membershipPaid"] is True

	sin_campos = client.put("/api/users/membership", json={"userId": user.id}, headers=headers)
	assert sin_campos.status_code == 400

	inexistente = client.put(
		"/api/users/membership",
		json={"userId": 9999, "membershipPaid": True},
		headers=headers,
	)
	assert inexistente.status_code == 404


def test_cli_create_user(app, client):
	runner = app.test_cli_runner()
	result = runner.invoke(args=["create-user", "nuevo", "clave123", "--name", "Nuevo"])
	assert result.exit_code == 0, result.output
	assert "Usuario creado: nuevo" in result.output

	resp = client.post("/api/login", json={"username": "nuevo", "password": "clave123"})
	assert resp.status_code == 200
