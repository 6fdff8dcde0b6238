import hmac

from flask import current_app
from flask_jwt_extended import create_access_token

from arriendos.extensions import bcrypt
from arriendos.repositories.base import UserRepository
from arriendos.services.user_service import public_user
from arriendos.utils.errors import UnauthorizedError


class AuthService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    def _password_ok(self, stored: str, candidate: str) -> bool:
        try:
            return bcrypt.check_password_hash(stored or "", candidate)
        except (ValueError, TypeError):
            # Filas antiguas con la contraseña en texto plano
            if not current_app.config.get("LEGACY_PLAINTEXT_PASSWORDS"):
                return False
            current_app.logger.warning("Login con contraseña sin hash (usuario legado)")
            return hmac.compare_digest(str(stored or ""), str(candidate or ""))

    def authenticate(self, username: str, password: str) -> dict:
        user = self.repository.find_by_username((username or "").strip())
        if not user or not self._password_ok(user.get("password"), password):
            raise UnauthorizedError("Credenciales inválidas")

        token = create_access_token(
            identity=str(user["id"]),
            additional_claims={
                "id": str(user["id"]),
                "username": user["username"],
                "name": user.get("name") or "",
                "role": user.get("role") or "user",
                "membershipPaid": bool(user.get("membershipPaid")),
            },
        )
        current_app.logger.info("Login correcto para %s", user["username"])
        return {"token": token, "user": public_user(user)}
