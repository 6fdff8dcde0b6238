"""URLs pre-firmadas de S3 para subir y descargar archivos (fotos de clientes)."""

from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

from arriendos.utils.errors import BadRequestError, StorageError


class FileService:
    def __init__(self, s3_client, bucket: str, expires_in: int = 60):
        self.s3 = s3_client
        self.bucket = bucket
        self.expires_in = expires_in

    def _presign(self, operation: str, params: dict) -> str:
        if not self.bucket:
            raise StorageError("Falta AWS_BUCKET_NAME en la configuración")
        try:
            return self.s3.generate_presigned_url(
                operation,
                Params={"Bucket": self.bucket, **params},
                ExpiresIn=self.expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            current_app.logger.error("No se pudo firmar %s: %s", operation, exc)
            raise StorageError(f"Error generating pre-signed URL: {exc}")

    def upload_url(self, file_name: str, file_type: str) -> str:
        return self._presign("put_object", {"Key": file_name, "ContentType": file_type})

    def download_url(self, file_name: str) -> str:
        return self._presign("get_object", {"Key": file_name})

    def presigned_url(self, action: str, file_name: str, file_type: str | None = None) -> str:
        if action == "save":
            return self.upload_url(file_name, file_type)
        if action == "retrieve":
            return self.download_url(file_name)
        raise BadRequestError('Invalid action. Allowed values are "save" or "retrieve".')
