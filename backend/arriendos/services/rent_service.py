from arriendos.repositories.base import RentRepository
from arriendos.utils.errors import BadRequestError, NotFoundError


class RentService:
    def __init__(self, repository: RentRepository, finished_page_size: int = 25):
        self.repository = repository
        self.finished_page_size = finished_page_size

    def get_all_rents(self, filters=None) -> list[dict]:
        return self.repository.get_all(filters or {})

    def get_active_rents(self, filters=None) -> list[dict]:
        return self.repository.get_active(filters or {})

    def get_finished_rents(self, filters=None, page: int = 1, page_size: int | None = None) -> dict:
        page = max(1, int(page or 1))
        page_size = int(page_size or self.finished_page_size)
        if page_size < 1:
            raise BadRequestError("pageSize debe ser mayor que 0")
        return self.repository.get_finished(filters or {}, page, page_size)

    def get_rent_by_id(self, rent_id) -> dict:
        if not rent_id:
            raise BadRequestError("El id del arriendo es obligatorio")
        rent = self.repository.get_by_id(rent_id)
        if not rent:
            raise NotFoundError(f"Arriendo con id {rent_id} no encontrado")
        return rent

    def create_rent(self, data: dict) -> dict:
        if not data.get("clientId") or not data.get("productId"):
            raise BadRequestError("clientId y productId son obligatorios")
        return self.repository.create(data)

    def update_rent(self, rent_id, data: dict) -> dict:
        updated = self.repository.update(rent_id, data)
        if not updated:
            raise NotFoundError(f"Arriendo con id {rent_id} no encontrado")
        return updated

    def finish_rent(self, rent_id, fields: dict) -> dict:
        finished = self.repository.finish(rent_id, fields)
        if not finished:
            raise NotFoundError(f"Arriendo con id {rent_id} no encontrado")
        return finished

    def delete_rent(self, rent_id) -> dict:
        # Se verifica antes de borrar para responder 404
        self.get_rent_by_id(rent_id)
        return self.repository.delete(rent_id)
