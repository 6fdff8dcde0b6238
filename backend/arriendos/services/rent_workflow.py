"""Flujo de arriendos: crear, actualizar y finalizar.

Al crear, el cliente se resuelve por RUT y el producto por id, código o
nombre; si no existen se crean con valores por defecto. En el backend SQL
todo el flujo corre en una sola transacción.
"""

import re
import time
from datetime import date, datetime

from flask import current_app

from arriendos.repositories.base import Repositories
from arriendos.services.client_service import ClientService
from arriendos.services.product_service import ProductService, split_price
from arriendos.services.rent_service import RentService
from arriendos.utils.errors import BadRequestError, NotFoundError

DEFAULT_BRAND = "Sin marca"
PRODUCT_CODE_LENGTH = 10

# Campos que se pueden editar en un arriendo existente
RENT_UPDATE_FIELDS = (
    "quantity",
    "totalValuePerDay",
    "deliveryDate",
    "paymentMethod",
    "warrantyValue",
    "warrantyType",
    "isPaid",
    "totalDays",
    "totalPrice",
    "observations",
)

RENT_FINISH_FIELDS = ("totalDays", "totalPrice", "observations", "isPaid")


def derive_product_code(product_name: str) -> str:
    """'Silla Plegable' -> 'SILLAPLEGA'."""
    return re.sub(r"\s+", "", product_name or "")[:PRODUCT_CODE_LENGTH].upper()


def _timestamp_suffix() -> str:
    return str(int(time.time() * 1000))[-4:]


class RentWorkflow:
    def __init__(self, repositories: Repositories, finished_page_size: int = 25):
        self.repositories = repositories
        self.clients = ClientService(repositories.clients)
        self.products = ProductService(repositories.products)
        self.rents = RentService(repositories.rents, finished_page_size)

    # -------------------------
    # Resolución por clave natural
    # -------------------------

    def resolve_client(self, rut: str, name: str) -> dict:
        matches = self.clients.find_clients_by_rut(rut)
        current_app.logger.info("Búsqueda de cliente por RUT %s: %d coincidencias", rut, len(matches))
        if matches:
            return matches[0]

        client = self.clients.create_client(
            {
                "name": name,
                "companyName": "",
                "companyDocument": "",
                "rut": rut,
                "phoneNumber": "",
                "address": "",
                "creationDate": date.today().isoformat(),
                "frequentClient": "No",
                "created": datetime.now().isoformat(),
            }
        )
        current_app.logger.info("Cliente creado id=%s rut=%s", client["id"], rut)
        return client

    def _unique_code(self, code: str) -> str:
        if self.products.find_products_by_code(code):
            code = f"{code}_{_timestamp_suffix()}"
            current_app.logger.info("El código ya existe, se usa %s", code)
        return code

    def resolve_product(self, data: dict) -> tuple[dict, bool]:
        """Devuelve (producto, creado)."""
        product_id = data.get("productId")
        if product_id:
            product = self.products.get_product_by_id(product_id)
            current_app.logger.info("Producto encontrado por id %s (%s)", product_id, product["code"])
            return product, False

        for lookup, value in (
            (self.products.find_products_by_code, data.get("code")),
            (self.products.find_products_by_name, data.get("productName")),
        ):
            matches = lookup(value)
            if matches:
                current_app.logger.info("Producto encontrado: %s (%s)", matches[0]["name"], matches[0]["code"])
                return matches[0], False

        code = data.get("productCode") or derive_product_code(data.get("productName"))
        code = self._unique_code(code)

        total = float(data["totalValuePerDay"])
        net, iva = split_price(total)
        product = self.products.create_product(
            {
                "name": data.get("productName") or code,
                "code": code,
                "brand": DEFAULT_BRAND,
                "priceNet": net,
                "priceIva": iva,
                "priceTotal": total,
                "priceWarranty": float(data.get("warrantyValue") or 0),
                "rented": True,
            }
        )
        current_app.logger.info("Producto creado id=%s code=%s", product["id"], product["code"])
        return product, True

    # -------------------------
    # Transiciones
    # -------------------------

    def create(self, data: dict) -> dict:
        with self.repositories.atomic():
            client = self.resolve_client(data["clientRut"], data["clientName"])
            product, _ = self.resolve_product(data)

            rent = self.rents.create_rent(
                {
                    "code": data["code"],
                    "productName": data["productName"],
                    "clientRut": data["clientRut"],
                    "clientName": data["clientName"],
                    "quantity": int(data["quantity"]),
                    "totalValuePerDay": float(data["totalValuePerDay"]),
                    "deliveryDate": data.get("deliveryDate") or "",
                    "paymentMethod": data.get("paymentMethod") or None,
                    "warrantyValue": float(data["warrantyValue"]),
                    "warrantyType": data.get("warrantyType") or None,
                    "isFinished": bool(data.get("isFinished") or False),
                    "isPaid": bool(data.get("isPaid") or False),
                    "totalDays": data.get("totalDays"),
                    "totalPrice": data.get("totalPrice") or None,
                    "observations": data.get("observations") or None,
                    "clientId": client["id"],
                    "productId": product["id"],
                }
            )
            current_app.logger.info(
                "Arriendo creado id=%s cliente=%s producto=%s", rent["id"], client["id"], product["id"]
            )

            product = self.products.mark_rented(product["id"])
            current_app.logger.info("Producto %s marcado como arrendado", product["code"])

        result = dict(rent)
        result["client"] = client
        result["product"] = product
        return result

    def update(self, rent_id, data: dict) -> dict:
        existing = self.rents.get_rent_by_id(rent_id)
        changes = {}

        client_rut = data.get("clientRut")
        if client_rut and client_rut != existing["clientRut"]:
            matches = self.clients.find_clients_by_rut(client_rut)
            if not matches:
                raise NotFoundError(f"Cliente con RUT {client_rut} no encontrado")
            client = matches[0]
            changes.update(clientId=client["id"], clientRut=client["rut"], clientName=client["name"])
        elif data.get("clientName"):
            changes["clientName"] = data["clientName"]

        product_name = data.get("productName")
        if product_name and product_name != existing["productName"]:
            matches = self.products.find_products_by_name(product_name)
            if not matches:
                raise NotFoundError(f"Producto {product_name} no encontrado")
            product = matches[0]
            changes.update(productId=product["id"], productName=product["name"], code=product["code"])
        elif data.get("code"):
            changes["code"] = data["code"]

        for field in RENT_UPDATE_FIELDS:
            if field in data and data[field] is not None:
                changes[field] = data[field]

        updated = self.rents.update_rent(rent_id, changes)
        current_app.logger.info("Arriendo %s actualizado (%s)", rent_id, ", ".join(sorted(changes)) or "sin cambios")
        return updated

    def finish(self, rent_id, data: dict) -> dict:
        existing = self.rents.get_rent_by_id(rent_id)
        if existing["isFinished"]:
            raise BadRequestError("El arriendo ya está finalizado")

        payment_method = data.get("paymentMethod")
        if not payment_method:
            raise BadRequestError("El método de pago es obligatorio para finalizar el arriendo")

        fields = {
            "paymentMethod": payment_method,
            "deliveryDate": data.get("deliveryDate") or datetime.now().isoformat(),
        }
        for field in RENT_FINISH_FIELDS:
            if data.get(field) is not None:
                fields[field] = data[field]

        finished = self.rents.finish_rent(rent_id, fields)
        current_app.logger.info("Arriendo %s finalizado (pago: %s)", rent_id, payment_method)
        return finished
