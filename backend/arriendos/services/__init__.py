"""Acceso a los servicios ligados a la app actual."""

import boto3
from botocore.config import Config as BotoConfig
from flask import current_app

from arriendos.repositories import EXTENSION_KEY
from arriendos.services.auth_service import AuthService
from arriendos.services.backup_service import BackupService
from arriendos.services.client_service import ClientService
from arriendos.services.file_service import FileService
from arriendos.services.product_service import ProductService
from arriendos.services.rent_service import RentService
from arriendos.services.rent_workflow import RentWorkflow
from arriendos.services.user_service import UserService

S3_EXTENSION_KEY = "arriendos.s3"


def get_repositories():
    return current_app.extensions[EXTENSION_KEY]


def client_service() -> ClientService:
    return ClientService(get_repositories().clients)


def product_service() -> ProductService:
    return ProductService(get_repositories().products)


def rent_service() -> RentService:
    return RentService(get_repositories().rents, current_app.config.get("FINISHED_RENTS_PAGE_SIZE", 25))


def user_service() -> UserService:
    return UserService(get_repositories().users)


def auth_service() -> AuthService:
    return AuthService(get_repositories().users)


def rent_workflow() -> RentWorkflow:
    return RentWorkflow(get_repositories(), current_app.config.get("FINISHED_RENTS_PAGE_SIZE", 25))


def backup_service() -> BackupService:
    return BackupService(client_service(), product_service(), rent_service())


def get_s3_client():
    """Cliente S3 creado una vez por app (los tests lo reemplazan en extensions)."""
    s3 = current_app.extensions.get(S3_EXTENSION_KEY)
    if s3 is None:
        config = current_app.config
        s3 = boto3.client(
            "s3",
            aws_access_key_id=config.get("AWS_ACCESS_KEY_ID") or None,
            aws_secret_access_key=config.get("AWS_SECRET_ACCESS_KEY") or None,
            region_name=config.get("AWS_REGION") or None,
            config=BotoConfig(signature_version="s3v4"),
        )
        current_app.extensions[S3_EXTENSION_KEY] = s3
    return s3


def file_service() -> FileService:
    return FileService(
        get_s3_client(),
        current_app.config.get("AWS_BUCKET_NAME", ""),
        current_app.config.get("PRESIGNED_URL_EXPIRES", 60),
    )
