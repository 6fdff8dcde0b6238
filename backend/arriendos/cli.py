import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from arriendos.services import backup_service, user_service

backup_cli = AppGroup("backup", help="Respaldos por correo.")


@click.command("create-user")
@click.argument("username")
@click.argument("password")
@click.option("--name", default="", help="Nombre visible.")
@click.option("--role", default="user", show_default=True)
@with_appcontext
def create_user_command(username, password, name, role):
    """Crea un usuario con la contraseña hasheada (bcrypt)."""
    user = user_service().create_user(username, password, name=name, role=role)
    click.echo(f"Usuario creado: {user['username']} (id={user['id']}, rol={user['role']})")


@backup_cli.command("run")
@click.option("--email", "emails", multiple=True, help="Destinatario extra (repetible).")
@click.option("--daily", is_flag=True, help="Marca el respaldo como diario.")
def run_backup_command(emails, daily):
    """Genera el respaldo y lo envía por correo."""
    result = backup_service().generate_backup("daily" if daily else "manual", custom_emails=list(emails))
    current_app.logger.info("Respaldo generado desde CLI")
    click.echo(f"{result['filename']} enviado a {', '.join(result['recipients'])}")


def register_cli(app):
    app.cli.add_command(create_user_command)
    app.cli.add_command(backup_cli)
