"""Contratos de repositorio.

Los servicios solo dependen de estas clases; hay dos implementaciones
intercambiables (``sql.py`` y ``mongo.py``) que devuelven los mismos
diccionarios (claves camelCase, ``id`` como string).
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from math import ceil
from typing import Any, Dict, List, Optional

SEARCH_FIELDS = ("code", "productName", "clientName", "clientRut")
WORD_MODES = ("all", "any")


def split_words(value: Any) -> List[str]:
    if not isinstance(value, str):
        return []
    return value.strip().split()


def paginate_meta(total_count: int, page: int, page_size: int) -> Dict[str, int]:
    return {
        "totalCount": total_count,
        "totalPages": ceil(total_count / page_size) if page_size else 0,
        "currentPage": page,
        "pageSize": page_size,
    }


class ClientRepository(ABC):
    @abstractmethod
    def get_all(self, filters: Optional[Dict[str, Any]] = None) -> List[dict]: ...

    @abstractmethod
    def get_by_id(self, client_id: str) -> Optional[dict]: ...

    @abstractmethod
    def find_by_rut(self, rut: str) -> List[dict]:
        """Coincidencia exacta por RUT (puede haber duplicados)."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> dict: ...

    @abstractmethod
    def update(self, client_id: str, data: Dict[str, Any]) -> Optional[dict]: ...

    @abstractmethod
    def delete(self, client_id: str) -> bool: ...


class ProductRepository(ABC):
    @abstractmethod
    def get_all(self, filters: Optional[Dict[str, Any]] = None) -> List[dict]: ...

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[dict]: ...

    @abstractmethod
    def find_by_code(self, code: str) -> List[dict]: ...

    @abstractmethod
    def find_by_name(self, name: str) -> List[dict]:
        """Coincidencia exacta por nombre, sin distinguir mayúsculas."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> dict: ...

    @abstractmethod
    def update(self, product_id: str, data: Dict[str, Any]) -> Optional[dict]: ...

    @abstractmethod
    def delete(self, product_id: str) -> bool: ...


class RentRepository(ABC):
    default_word_mode = "all"

    def __init__(self, word_mode: str = ""):
        self.word_mode = word_mode if word_mode in WORD_MODES else self.default_word_mode

    @abstractmethod
    def get_all(self, filters: Optional[Dict[str, Any]] = None) -> List[dict]: ...

    @abstractmethod
    def get_active(self, filters: Optional[Dict[str, Any]] = None) -> List[dict]: ...

    @abstractmethod
    def get_finished(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        page_size: int = 25,
    ) -> Dict[str, Any]:
        """Devuelve ``{"data": [...], "totalCount", "totalPages", "currentPage", "pageSize"}``."""

    @abstractmethod
    def get_by_id(self, rent_id: str) -> Optional[dict]: ...

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> dict: ...

    @abstractmethod
    def update(self, rent_id: str, data: Dict[str, Any]) -> Optional[dict]: ...

    @abstractmethod
    def delete(self, rent_id: str) -> Dict[str, int]: ...

    @abstractmethod
    def finish(self, rent_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        """Marca isFinished=True y aplica solo los campos presentes en ``fields``."""


class UserRepository(ABC):
    @abstractmethod
    def get_all(self) -> List[dict]: ...

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[dict]: ...

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[dict]: ...

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> dict: ...

    @abstractmethod
    def update(self, user_id: str, data: Dict[str, Any]) -> Optional[dict]: ...


class Repositories:
    """Contenedor con un juego de repositorios del mismo backend."""

    def __init__(self, backend, clients, products, rents, users):
        self.backend = backend
        self.clients = clients
        self.products = products
        self.rents = rents
        self.users = users

    @contextmanager
    def atomic(self):
        # Sin transacciones multi-documento: cada escritura es independiente.
        yield
