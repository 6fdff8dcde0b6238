import base64
import json
import smtplib
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from urllib.parse import urlparse, unquote

from flask import current_app

from arriendos.utils.errors import StorageError


def send_email(to: str, subject: str, body: str, attachments: list[dict] | None = None) -> None:
	"""Envía un correo con adjuntos opcionales.

	Cada adjunto es ``{"filename", "content" (bytes), "type"}``. Con
	EMAIL_BACKEND=outbox el mensaje se guarda en un archivo JSON-lines en vez
	de enviarse, para desarrollo y pruebas.
	"""

	to_s = (to or "").strip()
	subject_s = (subject or "").strip()
	attachments = attachments or []

	backend = current_app.config.get("EMAIL_BACKEND", "outbox")
	current_app.logger.info("[mailer] backend=%s to=%s subject=%s", backend, to_s, subject_s)

	if backend == "smtp":
		_send_smtp(to_s, subject_s, body or "", attachments)
	else:
		_write_outbox(to_s, subject_s, body or "", attachments)


def _write_outbox(to: str, subject: str, body: str, attachments: list[dict]) -> None:
	out_file = Path(current_app.config["EMAIL_OUTBOX_PATH"])
	out_file.parent.mkdir(parents=True, exist_ok=True)

	payload = {
		"to": to,
		"from": current_app.config.get("FROM_EMAIL"),
		"subject": subject,
		"body": body,
		"attachments": [
			{
				"filename": att["filename"],
				"type": att.get("type") or "application/octet-stream",
				"content_base64": base64.b64encode(att["content"]).decode("ascii"),
			}
			for att in attachments
		],
		"created_at": datetime.utcnow().replace(microsecond=0).isoformat() + "Z",
	}

	with out_file.open("a", encoding="utf-8") as f:
		f.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _send_smtp(to: str, subject: str, body: str, attachments: list[dict]) -> None:
	url = current_app.config.get("EMAIL_SMTP_URL") or ""
	if not url:
		raise StorageError("Configuración de correo incompleta: EMAIL_SMTP_URL no definido")

	parsed = urlparse(url)
	use_ssl = parsed.scheme == "smtps"
	host = parsed.hostname or "localhost"
	port = parsed.port or (465 if use_ssl else 587)

	msg = EmailMessage()
	msg["From"] = current_app.config.get("FROM_EMAIL")
	msg["To"] = to
	msg["Subject"] = subject
	msg.set_content(body)

	for att in attachments:
		maintype, _, subtype = (att.get("type") or "application/octet-stream").partition("/")
		msg.add_attachment(
			att["content"],
			maintype=maintype,
			subtype=subtype or "octet-stream",
			filename=att["filename"],
		)

	smtp_cls = smtplib.SMTP_SSL if use_ssl else smtplib.SMTP
	with smtp_cls(host, port, timeout=30) as server:
		if not use_ssl:
			server.starttls()
		if parsed.username:
			server.login(unquote(parsed.username), unquote(parsed.password or ""))
		server.send_message(msg)

	current_app.logger.info("[mailer] correo enviado a %s", to)
