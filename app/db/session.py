# app/db/session.py
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("app.db")


class Database:
    """
    Contexto de acceso a datos: agrupa el motor (engine) de SQLAlchemy y la
    fábrica de sesiones. Se construye explícitamente, se abre al arrancar la
    aplicación y se libera al apagarla.
    """

    def __init__(self, uri: str, echo: bool = False):
        self.uri = uri
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")

    def connect(self) -> "Database":
        if self.engine is not None:
            return self

        kwargs = {"echo": self.echo}
        if self.is_sqlite:
            # SQLite necesita check_same_thread=False para el threadpool de FastAPI
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.uri in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True

        self.engine = create_engine(self.uri, **kwargs)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("Database engine created for %s", self.engine.url.render_as_string(hide_password=True))
        return self

    def create_all(self) -> None:
        from app.db.models_registry import Base

        self.connect()
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from app.db.models_registry import Base

        self.connect()
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        if self.SessionLocal is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self.SessionLocal()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self.SessionLocal = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    """
    Función de dependencia para obtener una sesión de base de datos.
    Asegura que la sesión se cierre siempre después de la petición.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
