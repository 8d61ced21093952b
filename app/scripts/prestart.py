# app/scripts/prestart.py
import logging
import sys
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.session import Database

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

max_tries = 60
wait_seconds = 2


def main() -> int:
    database = Database(settings.DATABASE_URI).connect()
    logger.info(
        f"Esperando a la base de datos en: {database.engine.url.render_as_string(hide_password=True)}"
    )

    try:
        for i in range(1, max_tries + 1):
            try:
                with database.engine.connect() as connection:
                    connection.execute(text("SELECT 1"))
                logger.info("Conexión a la base de datos establecida exitosamente")
                if settings.AUTO_CREATE_TABLES:
                    database.create_all()
                    logger.info("Tablas creadas o verificadas")
                return 0
            except SQLAlchemyError as e:
                logger.warning(f"Intento {i}/{max_tries}: Base de datos no está lista. Reintentando...")
                logger.debug(f"Error de conexión: {e}")
                time.sleep(wait_seconds)
    finally:
        database.dispose()

    logger.error("No se pudo conectar a la base de datos después de varios intentos. Saliendo.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
