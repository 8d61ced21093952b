# app/scripts/create_admin.py
import logging

from app.core.config import settings
from app.crud.crud_user import create_user, get_user_by_email
from app.db.session import Database
from app.models.user import UserRoleEnum

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def ensure_admin(db, email: str, password: str, name: str):
    """Crea el administrador inicial si no existe. Devuelve (usuario, creado)."""
    user = get_user_by_email(db, email=email)
    if user:
        return user, False
    user = create_user(db, name=name, email=email, password=password, role=UserRoleEnum.admin)
    return user, True


def main():
    logger.info("Iniciando creación de usuario administrador...")
    database = Database(settings.DATABASE_URI).connect()
    db = database.session()
    try:
        _, created = ensure_admin(
            db,
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
            name=settings.FIRST_ADMIN_NAME,
        )
        if created:
            logger.info(f"Usuario administrador '{settings.FIRST_ADMIN_EMAIL}' creado exitosamente.")
        else:
            logger.info(f"El usuario administrador '{settings.FIRST_ADMIN_EMAIL}' ya existe.")
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
