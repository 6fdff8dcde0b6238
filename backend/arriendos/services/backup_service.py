"""Respaldo completo (clientes, productos, arriendos) enviado por correo."""

import json
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from flask import current_app

from arriendos.services.client_service import ClientService
from arriendos.services.product_service import ProductService
from arriendos.services.rent_service import RentService
from arriendos.utils.errors import StorageError
from arriendos.utils.mailer import send_email

BACKUP_TYPES = ("daily", "manual")

_CLIENT_KEYS = (
    "id", "name", "companyName", "companyDocument", "rut", "phoneNumber",
    "address", "frequentClient", "created", "creationDate",
)
_PRODUCT_KEYS = (
    "id", "name", "code", "brand", "priceNet", "priceIva", "priceTotal",
    "priceWarranty", "rented", "createdAt", "updatedAt",
)
_RENT_KEYS = (
    "id", "code", "clientName", "productName", "quantity", "totalValuePerDay",
    "deliveryDate", "warrantyValue", "warrantyType", "isFinished", "isPaid",
    "totalDays", "totalPrice", "createdAt",
)


def _pick(item: dict, keys) -> dict:
    return {k: item.get(k) for k in keys}


def resolve_recipients(default_recipients, custom_emails=None) -> list[str]:
    """Personalizados primero, luego los por defecto, sin duplicados."""
    custom = [e.strip() for e in (custom_emails or []) if e and e.strip()]
    defaults = [e.strip() for e in (default_recipients or []) if e and e.strip()]
    return list(dict.fromkeys(custom + defaults))


class BackupService:
    def __init__(self, clients: ClientService, products: ProductService, rents: RentService):
        self.clients = clients
        self.products = products
        self.rents = rents

    def build_backup(self) -> dict:
        current_app.logger.info("Extrayendo datos para el respaldo")
        clients = self.clients.get_all_clients()
        products = self.products.get_all_products()
        rents = self.rents.get_all_rents()

        summary = {
            "totalClients": len(clients),
            "totalProducts": len(products),
            "totalRents": len(rents),
            "activeRents": sum(1 for r in rents if not r.get("isFinished")),
        }
        current_app.logger.info(
            "Datos extraídos: %(totalClients)d clientes, %(totalProducts)d productos, "
            "%(totalRents)d arriendos (%(activeRents)d activos)",
            summary,
        )
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "clients": [_pick(c, _CLIENT_KEYS) for c in clients],
            "products": [_pick(p, _PRODUCT_KEYS) for p in products],
            "rents": [_pick(r, _RENT_KEYS) for r in rents],
            "summary": summary,
        }

    @staticmethod
    def build_filename(prefix: str, backup_type: str, now: datetime) -> str:
        label = "ManualBackup" if backup_type == "manual" else "Backup"
        return f"{prefix}_{label}_{now.date().isoformat()}_{now.hour}-{now.minute}.json"

    def generate_backup(self, backup_type: str = "manual", custom_emails=None) -> dict:
        if backup_type not in BACKUP_TYPES:
            raise ValueError(f"Tipo de respaldo inválido: {backup_type}")

        config = current_app.config
        current_app.logger.info("Iniciando respaldo %s", backup_type)

        recipients = resolve_recipients(config.get("BACKUP_EMAIL_RECIPIENTS"), custom_emails)
        if not recipients:
            raise StorageError(
                "No hay destinatarios de email configurados. "
                "Verifica BACKUP_EMAIL_RECIPIENTS en las variables de entorno.",
                payload={"backupType": backup_type},
            )

        backup = self.build_backup()
        prefix = config.get("BACKUP_FILE_PREFIX") or "AYPSPA"
        local_now = datetime.now(ZoneInfo(config.get("BACKUP_TIMEZONE") or "America/Santiago"))
        filename = self.build_filename(prefix, backup_type, local_now)

        label = "Backup Manual" if backup_type == "manual" else "Backup Diario"
        subject = f"{prefix} - {label} - {local_now.date().isoformat()}"
        summary = backup["summary"]
        body = (
            f"{label} del sistema {prefix}\n\n"
            f"Hora local: {local_now.strftime('%Y-%m-%d %H:%M')} ({local_now.tzname()})\n\n"
            "Resumen:\n"
            f"- {summary['totalClients']} clientes\n"
            f"- {summary['totalProducts']} productos\n"
            f"- {summary['totalRents']} arriendos ({summary['activeRents']} activos)\n\n"
            "El archivo adjunto contiene todos los datos en formato JSON."
        )
        attachment = {
            "filename": filename,
            "content": json.dumps(backup, indent=2, ensure_ascii=False).encode("utf-8"),
            "type": "application/json",
        }

        # Envío secuencial; si uno falla, los siguientes no se intentan
        for recipient in recipients:
            send_email(recipient, subject, body, attachments=[attachment])

        current_app.logger.info("Respaldo %s enviado a: %s", backup_type, ", ".join(recipients))
        return {
            "timestamp": backup["timestamp"],
            "summary": summary,
            "filename": filename,
            "recipients": recipients,
            "backupType": backup_type,
        }
