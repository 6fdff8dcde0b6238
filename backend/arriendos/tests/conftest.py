import pytest

import mongomock
from sqlalchemy.pool import StaticPool
from flask_jwt_extended import create_access_token

from arriendos import create_app
from arriendos.config import TestConfig as BaseTestConfig
from arriendos.extensions import db, bcrypt, mongo

# Importar modelos para que SQLAlchemy registre mappers/tablas
import arriendos.models  # noqa: F401
from arriendos.models.client import Client
from arriendos.models.product import Product
from arriendos.models.user import User


class PytestConfig(BaseTestConfig):
	SQLALCHEMY_DATABASE_URI = "sqlite://"
	SQLALCHEMY_ENGINE_OPTIONS = {
		"connect_args": {"check_same_thread": False},
		"poolclass": StaticPool,
	}
	JWT_SECRET_KEY = "test-secret-key-with-at-least-32-bytes"


class MongoPytestConfig(PytestConfig):
	DATABASE_TYPE = "mongodb"
	MONGO_DB_URI = "mongodb://localhost"
	MONGO_DB_DATABASE = "arriendos_test"


@pytest.fixture()
def app(tmp_path):
	app = create_app(PytestConfig)
	app.config["EMAIL_OUTBOX_PATH"] = str(tmp_path / "outbox.jsonl")
	with app.app_context():
		db.create_all()
		yield app
		db.session.remove()
		db.drop_all()


@pytest.fixture()
def mongo_app(tmp_path):
	app = create_app(MongoPytestConfig, mongo_client_class=mongomock.MongoClient)
	app.config["EMAIL_OUTBOX_PATH"] = str(tmp_path / "outbox.jsonl")
	with app.app_context():
		yield app
	mongo.close()


@pytest.fixture()
def client(app):
	return app.test_client()


@pytest.fixture()
def db_session(app):
	with app.app_context():
		yield db.session
		db.session.rollback()


@pytest.fixture()
def make_user(db_session):
	def _make_user(
		username: str,
		password: str = "Passw0rd!",
		name: str = "Test User",
		role: str = "user",
		hashed: bool = True,
	):
		u = User(
			username=username,
			password=bcrypt.generate_password_hash(password).decode("utf-8") if hashed else password,
			name=name,
			role=role,
		)
		db_session.add(u)
		db_session.commit()
		return u

	return _make_user


@pytest.fixture()
def make_token(app):
	def _make_token(user_id, claims: dict | None = None) -> str:
		with app.app_context():
			return create_access_token(identity=str(user_id), additional_claims=claims or {})

	return _make_token


@pytest.fixture()
def auth_header(make_token):
	def _auth_header(user_id=1, claims: dict | None = None) -> dict:
		token = make_token(user_id, claims=claims)
		return {"Authorization": f"Bearer {token}"}

	return _auth_header


@pytest.fixture()
def headers(make_user, auth_header):
	user = make_user("operador")
	return auth_header(user.id)


@pytest.fixture()
def make_client(db_session):
	def _make_client(rut: str, name: str = "Cliente Test", **extra):
		c = Client(name=name, rut=rut, frequent_client=extra.pop("frequent_client", "No"), **extra)
		db_session.add(c)
		db_session.commit()
		return c

	return _make_client


@pytest.fixture()
def make_product(db_session):
	def _make_product(code: str, name: str = "Producto", price_total: float = 1000, rented: bool = False):
		p = Product(
			name=name,
			code=code,
			brand="Marca",
			price_net=price_total * 0.81,
			price_iva=price_total * 0.19,
			price_total=price_total,
			price_warranty=0,
			rented=rented,
		)
		db_session.add(p)
		db_session.commit()
		return p

	return _make_product


@pytest.fixture()
def rent_payload():
	def _rent_payload(**overrides) -> dict:
		payload = {
			"code": "R1",
			"productName": "Mesa",
			"quantity": 2,
			"totalValuePerDay": 1000,
			"clientRut": "1-9",
			"clientName": "Ana",
			"warrantyValue": 0,
		}
		payload.update(overrides)
		return {k: v for k, v in payload.items() if v is not ...}

	return _rent_payload
