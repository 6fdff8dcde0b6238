from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError

from arriendos.extensions import db
from arriendos.models import Client, Product, Rent, User
from arriendos.repositories.base import (
    ClientRepository,
    ProductRepository,
    Repositories,
    RentRepository,
    UserRepository,
    paginate_meta,
    split_words,
)
from arriendos.utils.errors import ConflictError


def _parse_id(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _num(value) -> Optional[float]:
    return float(value) if value is not None else None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


ATOMIC_DEPTH_KEY = "arriendos.atomic_depth"


def _atomic_depth() -> int:
    # Profundidad de atomic() de la sesión actual (una por hilo/contexto)
    return db.session().info.get(ATOMIC_DEPTH_KEY, 0)


def _set_atomic_depth(depth: int) -> None:
    db.session().info[ATOMIC_DEPTH_KEY] = depth


def _conflict(exc: IntegrityError) -> ConflictError:
    return ConflictError(
        "El registro ya existe o viola una restricción",
        payload={"detail": str(exc.orig)},
    )


class _SqlRepository:

    def _save(self) -> None:
        # Dentro de atomic() solo se hace flush; el commit lo hace el bloque
        if _atomic_depth():
            db.session.flush()
            return
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise _conflict(exc)


# =========================
# Clientes
# =========================

def client_to_dict(client: Client) -> dict:
    return {
        "id": str(client.id),
        "name": client.name,
        "companyName": client.company_name or "",
        "companyDocument": client.company_document or "",
        "rut": client.rut or "",
        "phoneNumber": client.phone_number or "",
        "address": client.address or "",
        "creationDate": client.creation_date or "",
        "frequentClient": client.frequent_client or "",
        "created": client.created or "",
        "photoFileName": client.photo_file_name,
    }


_CLIENT_COLUMNS = {
    "name": "name",
    "companyName": "company_name",
    "companyDocument": "company_document",
    "rut": "rut",
    "phoneNumber": "phone_number",
    "address": "address",
    "creationDate": "creation_date",
    "frequentClient": "frequent_client",
    "created": "created",
    "photoFileName": "photo_file_name",
}


class SqlClientRepository(_SqlRepository, ClientRepository):

    def get_all(self, filters=None) -> List[dict]:
        filters = filters or {}
        query = Client.query

        if filters.get("name"):
            query = query.filter(Client.name.ilike(f"%{filters['name']}%"))
        if filters.get("companyName"):
            query = query.filter(Client.company_name.ilike(f"%{filters['companyName']}%"))
        if filters.get("rut"):
            query = query.filter(Client.rut.contains(filters["rut"]))
        if filters.get("frequentClient") is not None:
            query = query.filter(Client.frequent_client == filters["frequentClient"])

        items = query.order_by(Client.created_at.desc(), Client.id.desc()).all()
        return [client_to_dict(c) for c in items]

    def get_by_id(self, client_id) -> Optional[dict]:
        pk = _parse_id(client_id)
        if pk is None:
            return None
        client = db.session.get(Client, pk)
        return client_to_dict(client) if client else None

    def find_by_rut(self, rut: str) -> List[dict]:
        items = Client.query.filter(Client.rut == rut).order_by(Client.id.asc()).all()
        return [client_to_dict(c) for c in items]

    def create(self, data: Dict[str, Any]) -> dict:
        client = Client()
        for key, column in _CLIENT_COLUMNS.items():
            if key in data:
                # Los vacíos del frontend se guardan como NULL
                setattr(client, column, data[key] if data[key] != "" else None)

        db.session.add(client)
        self._save()
        return client_to_dict(client)

    def update(self, client_id, data: Dict[str, Any]) -> Optional[dict]:
        pk = _parse_id(client_id)
        client = db.session.get(Client, pk) if pk is not None else None
        if not client:
            return None

        for key, column in _CLIENT_COLUMNS.items():
            if key in data:
                setattr(client, column, data[key])

        self._save()
        return client_to_dict(client)

    def delete(self, client_id) -> bool:
        pk = _parse_id(client_id)
        client = db.session.get(Client, pk) if pk is not None else None
        if not client:
            return False
        if Rent.query.filter_by(client_id=client.id).first() is not None:
            raise ConflictError("No se puede eliminar: el cliente tiene arriendos asociados")
        db.session.delete(client)
        self._save()
        return True


# =========================
# Productos
# =========================

def product_to_dict(product: Product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "code": product.code,
        "brand": product.brand or "",
        "priceNet": _num(product.price_net) or 0.0,
        "priceIva": _num(product.price_iva) or 0.0,
        "priceTotal": _num(product.price_total) or 0.0,
        "priceWarranty": _num(product.price_warranty) or 0.0,
        "rented": bool(product.rented),
        "createdAt": _iso(product.created_at),
        "updatedAt": _iso(product.updated_at),
    }


_PRODUCT_COLUMNS = {
    "name": "name",
    "code": "code",
    "brand": "brand",
    "priceNet": "price_net",
    "priceIva": "price_iva",
    "priceTotal": "price_total",
    "priceWarranty": "price_warranty",
    "rented": "rented",
}


class SqlProductRepository(_SqlRepository, ProductRepository):

    def get_all(self, filters=None) -> List[dict]:
        filters = filters or {}
        query = Product.query

        if filters.get("name"):
            query = query.filter(Product.name.ilike(f"%{filters['name']}%"))
        if filters.get("code"):
            query = query.filter(Product.code.ilike(f"%{filters['code']}%"))
        if filters.get("brand"):
            query = query.filter(Product.brand.ilike(f"%{filters['brand']}%"))
        if filters.get("rented") is not None:
            query = query.filter(Product.rented.is_(bool(filters["rented"])))
        if filters.get("minPrice") is not None:
            query = query.filter(Product.price_total >= filters["minPrice"])
        if filters.get("maxPrice") is not None:
            query = query.filter(Product.price_total <= filters["maxPrice"])

        items = query.order_by(Product.created_at.desc(), Product.id.desc()).all()
        return [product_to_dict(p) for p in items]

    def get_by_id(self, product_id) -> Optional[dict]:
        pk = _parse_id(product_id)
        if pk is None:
            return None
        product = db.session.get(Product, pk)
        return product_to_dict(product) if product else None

    def find_by_code(self, code: str) -> List[dict]:
        items = Product.query.filter(Product.code == code).all()
        return [product_to_dict(p) for p in items]

    def find_by_name(self, name: str) -> List[dict]:
        items = (
            Product.query.filter(func.lower(Product.name) == (name or "").strip().lower())
            .order_by(Product.id.asc())
            .all()
        )
        return [product_to_dict(p) for p in items]

    def create(self, data: Dict[str, Any]) -> dict:
        product = Product()
        for key, column in _PRODUCT_COLUMNS.items():
            if key in data and data[key] is not None:
                setattr(product, column, data[key])

        db.session.add(product)
        self._save()
        # Relee los importes con la escala de la columna
        db.session.refresh(product)
        return product_to_dict(product)

    def update(self, product_id, data: Dict[str, Any]) -> Optional[dict]:
        pk = _parse_id(product_id)
        product = db.session.get(Product, pk) if pk is not None else None
        if not product:
            return None

        for key, column in _PRODUCT_COLUMNS.items():
            if key in data and data[key] is not None:
                setattr(product, column, data[key])
        product.updated_at = datetime.utcnow()

        self._save()
        db.session.refresh(product)
        return product_to_dict(product)

    def delete(self, product_id) -> bool:
        pk = _parse_id(product_id)
        product = db.session.get(Product, pk) if pk is not None else None
        if not product:
            return False
        if Rent.query.filter_by(product_id=product.id).first() is not None:
            raise ConflictError("No se puede eliminar: el producto tiene arriendos asociados")
        db.session.delete(product)
        self._save()
        return True


# =========================
# Arriendos
# =========================

def rent_to_dict(rent: Rent) -> dict:
    client = rent.client
    product = rent.product
    return {
        "id": str(rent.id),
        # Campos de presentación desde los joins
        "code": product.code if product else "",
        "productName": product.name if product else "",
        "clientRut": (client.rut or "") if client else "",
        "clientName": client.name if client else "",
        "totalValuePerDay": _num(product.price_total) if product else 0.0,
        "quantity": rent.quantity,
        "deliveryDate": rent.delivery_date or "",
        "paymentMethod": rent.payment_method or None,
        "warrantyValue": _num(rent.warranty_value) or 0.0,
        "warrantyType": rent.warranty_type,
        "isFinished": bool(rent.is_finished),
        "isPaid": bool(rent.is_paid),
        "totalDays": _num(rent.total_days),
        "totalPrice": _num(rent.total_price),
        "observations": rent.observations,
        "createdAt": _iso(rent.created_at),
        "clientId": str(rent.client_id),
        "productId": str(rent.product_id),
    }


_RENT_COLUMNS = {
    "quantity": "quantity",
    "deliveryDate": "delivery_date",
    "paymentMethod": "payment_method",
    "warrantyValue": "warranty_value",
    "warrantyType": "warranty_type",
    "isFinished": "is_finished",
    "isPaid": "is_paid",
    "totalDays": "total_days",
    "totalPrice": "total_price",
    "observations": "observations",
}

_RENT_SEARCH_COLUMNS = {
    "code": Product.code,
    "productName": Product.name,
    "clientName": Client.name,
    "clientRut": Client.rut,
}


class SqlRentRepository(_SqlRepository, RentRepository):
    # Nombres con varias palabras: deben aparecer TODAS ("mesa vidrio")
    default_word_mode = "all"

    def _search_clause(self, filters: Dict[str, Any]):
        """Un criterio por campo de búsqueda; entre campos distintos se usa OR."""
        clauses = []
        for key, column in _RENT_SEARCH_COLUMNS.items():
            words = split_words(filters.get(key))
            if not words:
                continue
            word_clauses = [column.ilike(f"%{w}%") for w in words]
            joiner = and_ if self.word_mode == "all" else or_
            clauses.append(joiner(*word_clauses))

        if not clauses:
            return None
        return clauses[0] if len(clauses) == 1 else or_(*clauses)

    def _query(self, filters: Optional[Dict[str, Any]], is_finished: Optional[bool] = None):
        filters = filters or {}
        query = (
            db.session.query(Rent)
            .join(Client, Rent.client_id == Client.id)
            .join(Product, Rent.product_id == Product.id)
        )

        if is_finished is not None:
            query = query.filter(Rent.is_finished.is_(is_finished))
        if filters.get("isPaid") is not None:
            query = query.filter(Rent.is_paid.is_(bool(filters["isPaid"])))
        if filters.get("paymentMethod"):
            query = query.filter(Rent.payment_method == filters["paymentMethod"])
        if filters.get("startDate"):
            query = query.filter(Rent.created_at >= filters["startDate"])
        if filters.get("endDate"):
            query = query.filter(Rent.created_at <= filters["endDate"])

        search = self._search_clause(filters)
        if search is not None:
            query = query.filter(search)
        return query

    def get_all(self, filters=None) -> List[dict]:
        items = self._query(filters).order_by(Rent.created_at.desc(), Rent.id.desc()).all()
        return [rent_to_dict(r) for r in items]

    def get_active(self, filters=None) -> List[dict]:
        items = self._query(filters, is_finished=False).order_by(Rent.created_at.desc(), Rent.id.desc()).all()
        return [rent_to_dict(r) for r in items]

    def get_finished(self, filters=None, page: int = 1, page_size: int = 25) -> Dict[str, Any]:
        query = self._query(filters, is_finished=True)
        total = query.count()
        items = (
            query.order_by(Rent.delivery_date.desc(), Rent.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        result = {"data": [rent_to_dict(r) for r in items]}
        result.update(paginate_meta(total, page, page_size))
        return result

    def get_by_id(self, rent_id) -> Optional[dict]:
        pk = _parse_id(rent_id)
        if pk is None:
            return None
        rent = db.session.get(Rent, pk)
        return rent_to_dict(rent) if rent else None

    def create(self, data: Dict[str, Any]) -> dict:
        rent = Rent(
            client_id=int(data["clientId"]),
            product_id=int(data["productId"]),
            warranty_type=data.get("warrantyType") or "Sin garantía",
        )
        for key, column in _RENT_COLUMNS.items():
            if key in data and data[key] is not None and key != "warrantyType":
                setattr(rent, column, data[key])

        db.session.add(rent)
        self._save()
        db.session.refresh(rent)
        return rent_to_dict(rent)

    def update(self, rent_id, data: Dict[str, Any]) -> Optional[dict]:
        pk = _parse_id(rent_id)
        rent = db.session.get(Rent, pk) if pk is not None else None
        if not rent:
            return None

        for key, column in _RENT_COLUMNS.items():
            if key in data:
                setattr(rent, column, data[key])
        if data.get("clientId"):
            rent.client_id = int(data["clientId"])
        if data.get("productId"):
            rent.product_id = int(data["productId"])

        self._save()
        db.session.refresh(rent)
        return rent_to_dict(rent)

    def delete(self, rent_id) -> Dict[str, int]:
        pk = _parse_id(rent_id)
        rent = db.session.get(Rent, pk) if pk is not None else None
        if not rent:
            return {"deletedCount": 0}
        db.session.delete(rent)
        self._save()
        return {"deletedCount": 1}

    def finish(self, rent_id, fields: Dict[str, Any]) -> Optional[dict]:
        pk = _parse_id(rent_id)
        rent = db.session.get(Rent, pk) if pk is not None else None
        if not rent:
            return None

        rent.is_finished = True
        for key, column in _RENT_COLUMNS.items():
            if key in fields and fields[key] is not None:
                setattr(rent, column, fields[key])

        self._save()
        return rent_to_dict(rent)


# =========================
# Usuarios
# =========================

def user_to_dict(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "password": user.password,
        "name": user.name or "",
        "role": user.role,
        "membershipPaid": bool(user.membership_paid),
    }


class SqlUserRepository(_SqlRepository, UserRepository):

    def get_all(self) -> List[dict]:
        return [user_to_dict(u) for u in User.query.order_by(User.id.asc()).all()]

    def get_by_id(self, user_id) -> Optional[dict]:
        pk = _parse_id(user_id)
        if pk is None:
            return None
        user = db.session.get(User, pk)
        return user_to_dict(user) if user else None

    def find_by_username(self, username: str) -> Optional[dict]:
        user = User.query.filter_by(username=username).first()
        return user_to_dict(user) if user else None

    def create(self, data: Dict[str, Any]) -> dict:
        user = User(
            username=data["username"],
            password=data["password"],
            name=data.get("name"),
            role=data.get("role") or "user",
            membership_paid=bool(data.get("membershipPaid", False)),
        )
        db.session.add(user)
        self._save()
        return user_to_dict(user)

    def update(self, user_id, data: Dict[str, Any]) -> Optional[dict]:
        pk = _parse_id(user_id)
        user = db.session.get(User, pk) if pk is not None else None
        if not user:
            return None

        if "name" in data:
            user.name = data["name"]
        if "role" in data:
            user.role = data["role"]
        if "password" in data:
            user.password = data["password"]
        if "membershipPaid" in data:
            user.membership_paid = bool(data["membershipPaid"])

        self._save()
        return user_to_dict(user)


class SqlRepositories(Repositories):

    def __init__(self, word_mode: str = ""):
        super().__init__(
            backend="sql",
            clients=SqlClientRepository(),
            products=SqlProductRepository(),
            rents=SqlRentRepository(word_mode=word_mode),
            users=SqlUserRepository(),
        )

    @contextmanager
    def atomic(self):
        """Agrupa varias escrituras en una sola transacción.

        La profundidad vive en la sesión, así cada hilo (o contexto de
        aplicación) anida sus propios bloques sin afectar a los demás.
        """
        depth = _atomic_depth() + 1
        _set_atomic_depth(depth)
        try:
            yield
        except Exception:
            _set_atomic_depth(depth - 1)
            if depth == 1:
                db.session.rollback()
            raise
        _set_atomic_depth(depth - 1)
        if depth == 1:
            try:
                db.session.commit()
            except IntegrityError as exc:
                db.session.rollback()
                raise _conflict(exc)
