from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from . import config
from .exceptions import AlmacenamientoError

_MEMORIA = {":memory:", "sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}


def make_engine(url: str | None = None):
    """Crear el engine de SQLAlchemy para ``url`` (o ``DATABASE_URL``).

    - SQLite en memoria: StaticPool para que todas las sesiones compartan la
      misma base (pruebas).
    - SQLite en archivo: ``check_same_thread=False`` porque FastAPI atiende
      peticiones síncronas en un threadpool.
    - Otros motores (PostgreSQL, SQL Server...): pool con pre-ping. El
      timeout de espera de conexión es el de SQLAlchemy (30 s).
    """
    url = url or config.DATABASE_URL
    if url in _MEMORIA:
        engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    elif url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
    else:
        return create_engine(
            url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_recycle=1800,
        )

    # SQLite no aplica las claves foráneas si no se activan por conexión
    @event.listens_for(engine, "connect")
    def _activar_claves_foraneas(dbapi_conn, _record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def make_session_factory(engine):
    # expire_on_commit=False: los objetos siguen legibles tras el commit
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@contextmanager
def transaccion(db):
    """Unidad de trabajo: commit si todo va bien, rollback ante cualquier error.

    Los errores de SQLAlchemy se re-lanzan como ``AlmacenamientoError``; los
    errores de dominio se propagan tal cual.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise AlmacenamientoError(str(exc)) from exc
    except Exception:
        db.rollback()
        raise


# Configuración de SQLAlchemy
engine = make_engine()
SessionLocal = make_session_factory(engine)
Base = declarative_base()
