from arriendos.repositories.base import Repositories

EXTENSION_KEY = "arriendos.repositories"


def build_repositories(app) -> Repositories:
    """Crea el juego de repositorios según DATABASE_TYPE y lo deja en app.extensions."""
    backend = app.config.get("DATABASE_TYPE", "sql")
    word_mode = app.config.get("RENT_SEARCH_WORD_MODE", "")

    if backend == "mongodb":
        from arriendos.repositories.mongo import MongoRepositories

        repositories = MongoRepositories(word_mode=word_mode)
    elif backend == "sql":
        from arriendos.repositories.sql import SqlRepositories

        repositories = SqlRepositories(word_mode=word_mode)
    else:
        raise ValueError(f"DATABASE_TYPE inválido: {backend!r} (usa 'sql' o 'mongodb')")

    app.extensions[EXTENSION_KEY] = repositories
    app.logger.info("Usando backend de datos '%s'", repositories.backend)
    return repositories


__all__ = ["Repositories", "build_repositories", "EXTENSION_KEY"]
