import pytest
from botocore.exceptions import ClientError

from arriendos.services import S3_EXTENSION_KEY

URL = "/api/files/presigned-url"


class FakeS3:
	def __init__(self, error=None):
		self.calls = []
		self.error = error

	def generate_presigned_url(self, operation, Params=None, ExpiresIn=None):
		self.calls.append((operation, Params, ExpiresIn))
		if self.error:
			raise self.error
		return f"https://s3.test/{Params['Bucket']}/{Params['Key']}?op={operation}"


@pytest.fixture()
def s3(app):
	app.config["AWS_BUCKET_NAME"] = "fotos-clientes"
	fake = FakeS3()
	app.extensions[S3_EXTENSION_KEY] = fake
	return fake


def test_url_para_subir(client, headers, s3):
	resp = client.post(
		URL,
		json={"fileName": "clientes/1.png", "fileType": "image/png", "action": "save"},
		headers=headers,
	)
	assert resp.status_code == 200
	body = resp.get_json()
	assert body["url"] == "https://s3.test/fotos-clientes/clientes/1.png?op=put_object"
	assert body["data"] == {"url": body["url"]}
	assert s3.calls == [
		("put_object", {"Bucket": "fotos-clientes", "Key": "clientes/1.png", "ContentType": "image/png"}, 60),
	]


def test_url_para_descargar(client, headers, s3):
	resp = client.post(URL, json={"fileName": "clientes/1.png", "action": "retrieve"}, headers=headers)
	assert resp.status_code == 200
	assert s3.calls == [("get_object", {"Bucket": "fotos-clientes", "Key": "clientes/1.png"}, 60)]


@pytest.mark.parametrize(
	"body, mensaje",
	[
		({"action": "save", "fileType": "image/png"}, "Missing required fields: fileName and action"),
		({"fileName": "a.png"}, "Missing required fields: fileName and action"),
		({"fileName": "a.png", "action": "save"}, "Missing required field: fileType for save action"),
		({"fileName": "a.png", "action": "delete"}, 'Invalid action. Allowed values are "save" or "retrieve".'),
	],
)
def test_validaciones_dan_400(client, headers, s3, body, mensaje):
	resp = client.post(URL, json=body, headers=headers)
	assert resp.status_code == 400
	assert resp.get_json()["message"] == mensaje
	assert s3.calls == []


def test_error_de_s3_da_500(app, client, headers, s3):
	s3.error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denegado"}}, "GetObject")

	resp = client.post(URL, json={"fileName": "a.png", "action": "retrieve"}, headers=headers)
	assert resp.status_code == 500
	assert resp.get_json()["message"].startswith("Error generating pre-signed URL:")


def test_sin_bucket_da_500(app, client, headers, s3):
	app.config["AWS_BUCKET_NAME"] = ""

	resp = client.post(URL, json={"fileName": "a.png", "action": "retrieve"}, headers=headers)
	assert resp.status_code == 500
	assert "AWS_BUCKET_NAME" in resp.get_json()["message"]


def test_requiere_token(client):
	resp = client.post(URL, json={"fileName": "a.png", "action": "retrieve"})
	assert resp.status_code == 401


def test_cliente_boto3_firma_sin_red(app, client, headers):
	# La firma es local: no hace falta conexión con AWS
	app.config.update(
		AWS_ACCESS_KEY_ID="AKIATEST",
		AWS_SECRET_ACCESS_KEY="secreto",
		AWS_REGION="us-east-1",
		AWS_BUCKET_NAME="fotos-clientes",
	)

	resp = client.post(URL, json={"fileName": "a.png", "action": "retrieve"}, headers=headers)
	assert resp.status_code == 200
	url = resp.get_json()["url"]
	assert "fotos-clientes" in url
	assert "a.png" in url
	assert "X-Amz-Signature=" in url
	assert "X-Amz-Expires=60" in url
