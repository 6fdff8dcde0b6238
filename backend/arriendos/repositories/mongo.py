from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from mongoengine.queryset.visitor import Q

from arriendos.models.documents import (
    ClientDocument,
    ProductDocument,
    RentDocument,
    UserDocument,
)
from arriendos.repositories.base import (
    SEARCH_FIELDS,
    ClientRepository,
    ProductRepository,
    Repositories,
    RentRepository,
    UserRepository,
    paginate_meta,
    split_words,
)


def _get(document_cls, doc_id):
    if not doc_id or not ObjectId.is_valid(str(doc_id)):
        return None
    return document_cls.objects(id=str(doc_id)).first()


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _apply(document, data: Dict[str, Any], allowed, skip_none: bool = False) -> None:
    for key in allowed:
        if key in data:
            if skip_none and data[key] is None:
                continue
            setattr(document, key, data[key])


# =========================
# Clientes
# =========================

_CLIENT_FIELDS = (
    "name",
    "companyName",
    "companyDocument",
    "rut",
    "phoneNumber",
    "address",
    "creationDate",
    "frequentClient",
    "created",
    "photoFileName",
)


def client_to_dict(doc: ClientDocument) -> dict:
    return {
        "id": str(doc.id),
        "name": doc.name,
        "companyName": doc.companyName or "",
        "companyDocument": doc.companyDocument or "",
        "rut": doc.rut or "",
        "phoneNumber": doc.phoneNumber or "",
        "address": doc.address or "",
        "creationDate": doc.creationDate or "",
        "frequentClient": doc.frequentClient or "",
        "created": doc.created or "",
        "photoFileName": doc.photoFileName,
    }


class MongoClientRepository(ClientRepository):

    def get_all(self, filters=None) -> List[dict]:
        filters = filters or {}
        query = {}
        if filters.get("name"):
            query["name__icontains"] = filters["name"]
        if filters.get("companyName"):
            query["companyName__icontains"] = filters["companyName"]
        if filters.get("rut"):
            query["rut__contains"] = filters["rut"]
        if filters.get("frequentClient") is not None:
            query["frequentClient"] = filters["frequentClient"]

        docs = ClientDocument.objects(**query).order_by("-createdAt")
        return [client_to_dict(d) for d in docs]

    def get_by_id(self, client_id) -> Optional[dict]:
        doc = _get(ClientDocument, client_id)
        return client_to_dict(doc) if doc else None

    def find_by_rut(self, rut: str) -> List[dict]:
        return [client_to_dict(d) for d in ClientDocument.objects(rut=rut)]

    def create(self, data: Dict[str, Any]) -> dict:
        doc = ClientDocument()
        _apply(doc, data, _CLIENT_FIELDS)
        doc.save()
        return client_to_dict(doc)

    def update(self, client_id, data: Dict[str, Any]) -> Optional[dict]:
        doc = _get(ClientDocument, client_id)
        if not doc:
            return None
        _apply(doc, data, _CLIENT_FIELDS)
        doc.save()
        return client_to_dict(doc)

    def delete(self, client_id) -> bool:
        doc = _get(ClientDocument, client_id)
        if not doc:
            return False
        doc.delete()
        return True


# =========================
# Productos
# =========================

_PRODUCT_FIELDS = (
    "name",
    "code",
    "brand",
    "priceNet",
    "priceIva",
    "priceTotal",
    "priceWarranty",
    "rented",
)


def product_to_dict(doc: ProductDocument) -> dict:
    return {
        "id": str(doc.id),
        "name": doc.name,
        "code": doc.code,
        "brand": doc.brand or "",
        "priceNet": float(doc.priceNet or 0),
        "priceIva": float(doc.priceIva or 0),
        "priceTotal": float(doc.priceTotal or 0),
        "priceWarranty": float(doc.priceWarranty or 0),
        "rented": bool(doc.rented),
        "createdAt": _iso(doc.createdAt),
        "updatedAt": _iso(doc.updatedAt),
    }


class MongoProductRepository(ProductRepository):

    def get_all(self, filters=None) -> List[dict]:
        filters = filters or {}
        query = {}
        if filters.get("name"):
            query["name__icontains"] = filters["name"]
        if filters.get("code"):
            query["code__icontains"] = filters["code"]
        if filters.get("brand"):
            query["brand__icontains"] = filters["brand"]
        if filters.get("rented") is not None:
            query["rented"] = bool(filters["rented"])
        if filters.get("minPrice") is not None:
            query["priceTotal__gte"] = filters["minPrice"]
        if filters.get("maxPrice") is not None:
            query["priceTotal__lte"] = filters["maxPrice"]

        docs = ProductDocument.objects(**query).order_by("-createdAt")
        return [product_to_dict(d) for d in docs]

    def get_by_id(self, product_id) -> Optional[dict]:
        doc = _get(ProductDocument, product_id)
        return product_to_dict(doc) if doc else None

    def find_by_code(self, code: str) -> List[dict]:
        return [product_to_dict(d) for d in ProductDocument.objects(code=code)]

    def find_by_name(self, name: str) -> List[dict]:
        docs = ProductDocument.objects(name__iexact=(name or "").strip())
        return [product_to_dict(d) for d in docs]

    def create(self, data: Dict[str, Any]) -> dict:
        doc = ProductDocument()
        _apply(doc, data, _PRODUCT_FIELDS, skip_none=True)
        doc.save()
        return product_to_dict(doc)

    def update(self, product_id, data: Dict[str, Any]) -> Optional[dict]:
        doc = _get(ProductDocument, product_id)
        if not doc:
            return None
        _apply(doc, data, _PRODUCT_FIELDS, skip_none=True)
        doc.updatedAt = datetime.utcnow()
        doc.save()
        return product_to_dict(doc)

    def delete(self, product_id) -> bool:
        doc = _get(ProductDocument, product_id)
        if not doc:
            return False
        doc.delete()
        return True


# =========================
# Arriendos
# =========================

_RENT_FIELDS = (
    "code",
    "productName",
    "clientRut",
    "clientName",
    "quantity",
    "totalValuePerDay",
    "deliveryDate",
    "paymentMethod",
    "warrantyValue",
    "warrantyType",
    "isFinished",
    "isPaid",
    "totalDays",
    "totalPrice",
    "observations",
    "clientId",
    "productId",
)

_FINISH_FIELDS = ("deliveryDate", "totalDays", "totalPrice", "observations", "isPaid", "paymentMethod")


def rent_to_dict(doc: RentDocument) -> dict:
    return {
        "id": str(doc.id),
        "code": doc.code or "",
        "productName": doc.productName or "",
        "clientRut": doc.clientRut or "",
        "clientName": doc.clientName or "",
        "totalValuePerDay": float(doc.totalValuePerDay or 0),
        "quantity": doc.quantity or 0,
        "deliveryDate": doc.deliveryDate or "",
        "paymentMethod": doc.paymentMethod or None,
        "warrantyValue": float(doc.warrantyValue or 0),
        "warrantyType": doc.warrantyType,
        "isFinished": bool(doc.isFinished),
        "isPaid": bool(doc.isPaid),
        "totalDays": doc.totalDays,
        "totalPrice": doc.totalPrice,
        "observations": doc.observations,
        "createdAt": _iso(doc.createdAt),
        "clientId": doc.clientId or "",
        "productId": doc.productId or "",
    }


class MongoRentRepository(RentRepository):
    # Basta con que aparezca alguna de las palabras
    default_word_mode = "any"

    def _search_q(self, filters: Dict[str, Any]):
        field_qs = []
        for key in SEARCH_FIELDS:
            words = split_words(filters.get(key))
            if not words:
                continue
            combined = None
            for word in words:
                q = Q(**{f"{key}__icontains": word})
                if combined is None:
                    combined = q
                elif self.word_mode == "all":
                    combined = combined & q
                else:
                    combined = combined | q
            field_qs.append(combined)

        if not field_qs:
            return None
        result = field_qs[0]
        for q in field_qs[1:]:
            result = result | q
        return result

    def _queryset(self, filters: Optional[Dict[str, Any]], is_finished: Optional[bool] = None):
        filters = filters or {}
        query = {}
        if is_finished is not None:
            query["isFinished"] = is_finished
        if filters.get("isPaid") is not None:
            query["isPaid"] = bool(filters["isPaid"])
        if filters.get("paymentMethod"):
            query["paymentMethod"] = filters["paymentMethod"]
        if filters.get("startDate"):
            query["createdAt__gte"] = filters["startDate"]
        if filters.get("endDate"):
            query["createdAt__lte"] = filters["endDate"]

        search = self._search_q(filters)
        if search is not None:
            return RentDocument.objects(search, **query)
        return RentDocument.objects(**query)

    def get_all(self, filters=None) -> List[dict]:
        return [rent_to_dict(d) for d in self._queryset(filters).order_by("-createdAt")]

    def get_active(self, filters=None) -> List[dict]:
        docs = self._queryset(filters, is_finished=False).order_by("-createdAt")
        return [rent_to_dict(d) for d in docs]

    def get_finished(self, filters=None, page: int = 1, page_size: int = 25) -> Dict[str, Any]:
        queryset = self._queryset(filters, is_finished=True)
        total = queryset.count()
        docs = (
            queryset.order_by("-deliveryDate", "-createdAt")
            .skip((page - 1) * page_size)
            .limit(page_size)
        )
        result = {"data": [rent_to_dict(d) for d in docs]}
        result.update(paginate_meta(total, page, page_size))
        return result

    def get_by_id(self, rent_id) -> Optional[dict]:
        doc = _get(RentDocument, rent_id)
        return rent_to_dict(doc) if doc else None

    def create(self, data: Dict[str, Any]) -> dict:
        doc = RentDocument()
        _apply(doc, data, _RENT_FIELDS)
        doc.isFinished = bool(data.get("isFinished") or False)
        doc.isPaid = bool(data.get("isPaid") or False)
        doc.save()
        return rent_to_dict(doc)

    def update(self, rent_id, data: Dict[str, Any]) -> Optional[dict]:
        doc = _get(RentDocument, rent_id)
        if not doc:
            return None
        _apply(doc, data, _RENT_FIELDS)
        doc.save()
        return rent_to_dict(doc)

    def delete(self, rent_id) -> Dict[str, int]:
        if not rent_id or not ObjectId.is_valid(str(rent_id)):
            return {"deletedCount": 0}
        deleted = RentDocument.objects(id=str(rent_id)).delete()
        return {"deletedCount": int(deleted or 0)}

    def finish(self, rent_id, fields: Dict[str, Any]) -> Optional[dict]:
        doc = _get(RentDocument, rent_id)
        if not doc:
            return None
        doc.isFinished = True
        _apply(doc, fields, _FINISH_FIELDS, skip_none=True)
        doc.save()
        return rent_to_dict(doc)


# =========================
# Usuarios
# =========================

def user_to_dict(doc: UserDocument) -> dict:
    return {
        "id": str(doc.id),
        "username": doc.username,
        "password": doc.password,
        "name": doc.name or "",
        "role": doc.role,
        "membershipPaid": bool(doc.membershipPaid),
    }


class MongoUserRepository(UserRepository):

    def get_all(self) -> List[dict]:
        return [user_to_dict(d) for d in UserDocument.objects.order_by("username")]

    def get_by_id(self, user_id) -> Optional[dict]:
        doc = _get(UserDocument, user_id)
        return user_to_dict(doc) if doc else None

    def find_by_username(self, username: str) -> Optional[dict]:
        doc = UserDocument.objects(username=username).first()
        return user_to_dict(doc) if doc else None

    def create(self, data: Dict[str, Any]) -> dict:
        doc = UserDocument(
            username=data["username"],
            password=data["password"],
            name=data.get("name") or "",
            role=data.get("role") or "user",
            membershipPaid=bool(data.get("membershipPaid", False)),
        )
        doc.save()
        return user_to_dict(doc)

    def update(self, user_id, data: Dict[str, Any]) -> Optional[dict]:
        doc = _get(UserDocument, user_id)
        if not doc:
            return None
        _apply(doc, data, ("name", "role", "password", "membershipPaid"))
        doc.save()
        return user_to_dict(doc)


class MongoRepositories(Repositories):

    def __init__(self, word_mode: str = ""):
        super().__init__(
            backend="mongodb",
            clients=MongoClientRepository(),
            products=MongoProductRepository(),
            rents=MongoRentRepository(word_mode=word_mode),
            users=MongoUserRepository(),
        )
