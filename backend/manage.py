"""
Archivo de conveniencia para usar el CLI de Flask:
    python manage.py run
    python manage.py create-user admin secreto --name "Administrador" --role admin
    python manage.py backup run --email alguien@aypspa.com
    flask db upgrade (con FLASK_APP=wsgi.py)
"""

import os

from flask.cli import main

if __name__ == "__main__":
    os.environ.setdefault("FLASK_APP", "wsgi.py")
    main()
