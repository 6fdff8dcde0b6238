from arriendos.extensions import bcrypt
from arriendos.repositories.base import UserRepository
from arriendos.utils.errors import BadRequestError, ConflictError, NotFoundError


def public_user(user: dict) -> dict:
    """Usuario sin la contraseña."""
    return {k: v for k, v in user.items() if k != "password"}


class UserService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    def get_all_users(self) -> list[dict]:
        return [public_user(u) for u in self.repository.get_all()]

    def get_user_by_id(self, user_id) -> dict:
        user = self.repository.get_by_id(user_id) if user_id else None
        if not user:
            raise NotFoundError(f"Usuario con id {user_id} no encontrado")
        return public_user(user)

    def create_user(self, username: str, password: str, name: str = "", role: str = "user") -> dict:
        username = (username or "").strip()
        if not username or not password:
            raise BadRequestError("username y password son obligatorios")
        if self.repository.find_by_username(username):
            raise ConflictError(f"El usuario {username} ya existe")

        user = self.repository.create(
            {
                "username": username,
                "password": bcrypt.generate_password_hash(password).decode("utf-8"),
                "name": name or username,
                "role": role or "user",
                "membershipPaid": False,
            }
        )
        return public_user(user)

    def update_membership(self, user_id, membership_paid: bool) -> dict:
        if not user_id:
            raise BadRequestError("userId y membershipPaid son obligatorios")
        self.get_user_by_id(user_id)

        updated = self.repository.update(user_id, {"membershipPaid": bool(membership_paid)})
        if not updated:
            raise NotFoundError(f"Usuario con id {user_id} no encontrado")
        return public_user(updated)
