"""Respaldo diario con APScheduler.

Se activa con SCHEDULER_ENABLED=true y DAILY_BACKUP_SCHEDULE (cron de 5
campos, o de 6 con los segundos al inicio).
"""

import atexit

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from arriendos.utils.errors import ApiError

DAILY_BACKUP_JOB_ID = "daily-backup"


def build_trigger(expression: str, timezone: str) -> CronTrigger:
    parts = expression.split()
    if len(parts) == 5:
        return CronTrigger.from_crontab(expression, timezone=timezone)
    if len(parts) == 6:
        second, minute, hour, day, month, day_of_week = parts
        return CronTrigger(
            second=second,
            minute=minute,
            hour=hour,
            day=day,
            month=month,
            day_of_week=day_of_week,
            timezone=timezone,
        )
    raise ValueError(f"Expresión cron inválida: {expression!r}")


def run_daily_backup(app) -> None:
    from arriendos.services import backup_service

    with app.app_context():
        try:
            result = backup_service().generate_backup("daily")
        except ApiError as err:
            app.logger.error("Error durante el backup diario: %s", err.message)
            return
        except Exception:
            app.logger.exception("Error inesperado durante el backup diario")
            return
        app.logger.info("Backup diario enviado: %s", result["filename"])


def start_scheduler(app):
    expression = (app.config.get("DAILY_BACKUP_SCHEDULE") or "").strip()
    if not expression:
        app.logger.warning("SCHEDULER_ENABLED sin DAILY_BACKUP_SCHEDULE: no se programa el backup diario")
        return None

    timezone = app.config.get("BACKUP_TIMEZONE") or "America/Santiago"
    scheduler = BackgroundScheduler(timezone=timezone)
    scheduler.add_job(
        run_daily_backup,
        trigger=build_trigger(expression, timezone),
        args=[app],
        id=DAILY_BACKUP_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    scheduler.start()
    atexit.register(lambda: scheduler.shutdown(wait=False))

    app.extensions["scheduler"] = scheduler
    app.logger.info("Backup diario programado: '%s' (%s)", expression, timezone)
    return scheduler
