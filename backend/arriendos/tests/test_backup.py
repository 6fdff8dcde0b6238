import base64
import json
import re
from pathlib import Path
import sys

import pytest

from arriendos.scheduler import build_trigger, run_daily_backup
from arriendos.services.backup_service import resolve_recipients
from arriendos.utils import mailer


def _outbox(app) -> list[dict]:
	path = Path(app.config["EMAIL_OUTBOX_PATH"])
	if not path.exists():
		return []
	return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def test_resolver_destinatarios_sin_duplicados():
	assert resolve_recipients(["a@x.cl", " b@x.cl "], ["c@x.cl", "a@x.cl", "", "  "]) == [
		"c@x.cl",
		"a@x.cl",
		"b@x.cl",
	]
	assert resolve_recipients([], None) == []


def test_backup_manual_envia_a_cada_destinatario(app, client, headers, rent_payload):
	app.config["BACKUP_EMAIL_RECIPIENTS"] = ["admin@aypspa.com"]
	assert client.post("/api/rents", json=rent_payload(), headers=headers).status_code == 201

	resp = client.post(
		"/api/backup",
		json={"emails": ["jefe@aypspa.com", "admin@aypspa.com"]},
		headers=headers,
	)
	assert resp.status_code == 200
	data = resp.get_json()["data"]
	assert data["backupType"] == "manual"
	assert data["recipients"] == ["jefe@aypspa.com", "admin@aypspa.com"]
	assert data["summary"] == {"totalClients": 1, "totalProducts": 1, "totalRents": 1, "activeRents": 1}
	assert re.fullmatch(r"AYPSPA_ManualBackup_\d{4}-\d{2}-\d{2}_\d{1,2}-\d{1,2}\.json", data["filename"])

	mails = _outbox(app)
	assert [m["to"] for m in mails] == data["recipients"]
	assert mails[0]["subject"].startswith("AYPSPA - Backup Manual - ")
	assert "1 arriendos (1 activos)" in mails[0]["body"]

	adjunto = mails[0]["attachments"][0]
	assert adjunto["filename"] == data["filename"]
	assert adjunto["type"] == "application/json"
	contenido = json.loads(base64.b64decode(adjunto["content_base64"]))
	assert contenido["summary"] == data["summary"]
	assert contenido["clients"][0]["rut"] == "1-9"
	assert contenido["products"][0]["code"] == "MESA"
	assert contenido["rents"][0]["isFinished"] is False


def test_backup_sin_destinatarios_da_500(app, client, headers):
	app.config["BACKUP_EMAIL_RECIPIENTS"] = []

	resp = client.post("/api/backup", json={}, headers=headers)
	assert resp.status_code == 500
	body = resp.get_json()
	assert body["success"] is False
	assert "BACKUP_EMAIL_RECIPIENTS" in body["message"]
	assert _outbox(app) == []


def test_backup_se_corta_si_falla_un_destinatario(app, client, headers, monkeypatch):
	app.config["BACKUP_EMAIL_RECIPIENTS"] = ["a@aypspa.com", "b@aypspa.com", "c@aypspa.com"]
	intentos = []

	def _send_email(to, subject, body, attachments=None):
		intentos.append(to)
		if to == "b@aypspa.com":
			raise RuntimeError("SMTP caído")
		return mailer.send_email(to, subject, body, attachments=attachments)

	# El accesor backup_service() tapa el submódulo en arriendos.services
	monkeypatch.setattr(sys.modules["arriendos.services.backup_service"], "send_email", _send_email)

	resp = client.post("/api/backup", json={}, headers=headers)
	assert resp.status_code == 500
	assert resp.get_json()["success"] is False
	assert intentos == ["a@aypspa.com", "b@aypspa.com"]
	assert [m["to"] for m in _outbox(app)] == ["a@aypspa.com"]


def test_backup_diario_programado(app):
	app.config["BACKUP_EMAIL_RECIPIENTS"] = ["admin@aypspa.com"]

	run_daily_backup(app)

	mails = _outbox(app)
	assert len(mails) == 1
	assert mails[0]["subject"].startswith("AYPSPA - Backup Diario - ")
	assert re.match(r"AYPSPA_Backup_\d{4}-", mails[0]["attachments"][0]["filename"])


def test_backup_diario_sin_destinatarios_no_revienta(app):
	app.config["BACKUP_EMAIL_RECIPIENTS"] = []
	run_daily_backup(app)
	assert _outbox(app) == []


def test_cli_backup_run(app):
	runner = app.test_cli_runner()
	result = runner.invoke(args=["backup", "run", "--email", "ops@aypspa.com"])
	assert result.exit_code == 0, result.output
	assert "ops@aypspa.com" in result.output
	assert [m["to"] for m in _outbox(app)] == ["ops@aypspa.com"]


@pytest.mark.parametrize("expr", ["0 2 * * *", "0 0 2 * * *"])
def test_cron_de_5_y_6_campos(expr):
	trigger = build_trigger(expr, "America/Santiago")
	assert str(trigger.timezone) == "America/Santiago"


def test_cron_invalido():
	with pytest.raises(ValueError):
		build_trigger("* * *", "UTC")
