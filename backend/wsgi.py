import os

from arriendos import create_app
from arriendos.config import DevConfig, ProdConfig


def _is_production() -> bool:
    return os.getenv("APP_ENV", "").strip().lower() in ("prod", "production")


config = ProdConfig if _is_production() else DevConfig
app = create_app(config)

if __name__ == "__main__":
    app.run()
