from datetime import date, datetime

from arriendos.repositories.base import ClientRepository
from arriendos.utils.errors import BadRequestError, NotFoundError


class ClientService:
    def __init__(self, repository: ClientRepository):
        self.repository = repository

    def get_all_clients(self, filters=None) -> list[dict]:
        return self.repository.get_all(filters or {})

    def get_client_by_id(self, client_id) -> dict:
        if not client_id:
            raise BadRequestError("El id del cliente es obligatorio")
        client = self.repository.get_by_id(client_id)
        if not client:
            raise NotFoundError(f"Cliente con id {client_id} no encontrado")
        return client

    def find_clients_by_rut(self, rut: str) -> list[dict]:
        return self.repository.find_by_rut(rut)

    def create_client(self, data: dict) -> dict:
        if not data.get("name") or not data.get("rut"):
            raise BadRequestError("name y rut son obligatorios")

        payload = dict(data)
        payload.setdefault("frequentClient", "No")
        payload.setdefault("creationDate", date.today().isoformat())
        payload.setdefault("created", datetime.now().isoformat())
        return self.repository.create(payload)

    def update_client(self, client_id, data: dict) -> dict:
        if not client_id:
            raise BadRequestError("El id del cliente es obligatorio")
        updated = self.repository.update(client_id, data)
        if not updated:
            raise NotFoundError(f"Cliente con id {client_id} no encontrado")
        return updated

    def delete_client(self, client_id) -> None:
        if not client_id:
            raise BadRequestError("El id del cliente es obligatorio")
        if not self.repository.delete(client_id):
            raise NotFoundError(f"Cliente con id {client_id} no encontrado")
