from arriendos.repositories.base import ProductRepository
from arriendos.utils.errors import BadRequestError, ConflictError, NotFoundError

# Precio total con IVA incluido (19%)
NET_RATE = 0.81
IVA_RATE = 0.19


def split_price(total: float) -> tuple[float, float]:
    """Separa un total en (neto, iva). Es una aproximación: no se redondea."""
    return total * NET_RATE, total * IVA_RATE


class ProductService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def get_all_products(self, filters=None) -> list[dict]:
        return self.repository.get_all(filters or {})

    def get_product_by_id(self, product_id) -> dict:
        if not product_id:
            raise BadRequestError("El id del producto es obligatorio")
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Producto con id {product_id} no encontrado")
        return product

    def find_products_by_code(self, code: str) -> list[dict]:
        return self.repository.find_by_code(code) if code else []

    def find_products_by_name(self, name: str) -> list[dict]:
        return self.repository.find_by_name(name) if name else []

    def create_product(self, data: dict) -> dict:
        if not data.get("name") or not data.get("code"):
            raise BadRequestError("name y code son obligatorios")
        if self.repository.find_by_code(data["code"]):
            raise ConflictError(f"Ya existe un producto con código {data['code']}")

        payload = dict(data)
        total = float(payload.get("priceTotal") or 0)
        net, iva = split_price(total)
        if payload.get("priceNet") is None:
            payload["priceNet"] = net
        if payload.get("priceIva") is None:
            payload["priceIva"] = iva
        payload["priceTotal"] = total
        payload.setdefault("priceWarranty", 0)
        payload.setdefault("rented", False)
        return self.repository.create(payload)

    def update_product(self, product_id, data: dict) -> dict:
        if not product_id:
            raise BadRequestError("El id del producto es obligatorio")

        code = data.get("code")
        if code:
            clashes = [p for p in self.repository.find_by_code(code) if p["id"] != str(product_id)]
            if clashes:
                raise ConflictError(f"Ya existe un producto con código {code}")

        updated = self.repository.update(product_id, data)
        if not updated:
            raise NotFoundError(f"Producto con id {product_id} no encontrado")
        return updated

    def mark_rented(self, product_id, rented: bool = True) -> dict:
        return self.update_product(product_id, {"rented": rented})

    def delete_product(self, product_id) -> None:
        if not product_id:
            raise BadRequestError("El id del producto es obligatorio")
        if not self.repository.delete(product_id):
            raise NotFoundError(f"Producto con id {product_id} no encontrado")
