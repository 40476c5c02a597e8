# agro_registry/database/__init__.py
# Initializes SQLAlchemy components: Engine, SessionLocal, Base metadata.
# Uses local imports for logger/errors to prevent circular dependencies.

import threading
from typing import Optional, Generator
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError, OperationalError, InterfaceError

from .base import Base

# --- SQLAlchemy Engine and Session Factory Globals ---
_sqla_engine: Optional[Engine] = None
_SessionLocalFactory: Optional[sessionmaker[Session]] = None
_engine_lock = threading.Lock()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# --- Função de Inicialização do Engine e Session Factory ---
def init_sqlalchemy(database_uri: str, pool_size: int = 10, max_overflow: int = 20) -> Engine:
    """
    Initializes the SQLAlchemy engine, session factory, and database schema.
    Should be called once during application startup.
    """
    from agro_registry.utils.logger import logger
    from agro_registry.api.errors import DatabaseError, ConfigurationError, InfrastructureError

    global _sqla_engine, _SessionLocalFactory
    with _engine_lock:
        if _sqla_engine and _SessionLocalFactory:
            logger.warning("SQLAlchemy engine and session factory already initialized.")
            return _sqla_engine

        if not database_uri:
            raise ConfigurationError("Database URI is missing in configuration.")

        logger.info("Initializing SQLAlchemy engine and session factory...")
        engine = None
        try:
            # 1. Create the Engine
            engine = create_engine(
                database_uri,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
                pool_pre_ping=True,
                echo=False
            )
            if engine.dialect.name == 'sqlite':
                event.listen(engine, "connect", _enable_sqlite_foreign_keys)

            # 2. Test Connection
            try:
                with engine.connect():
                    logger.info("Database connection successful.")
            except SQLAlchemyError as conn_err:
                logger.critical(f"Database connection failed: {conn_err}", exc_info=True)
                raise InfrastructureError(f"Failed to connect to the database: {conn_err}") from conn_err

            # 3. Create Session Factory (SessionLocal)
            _SessionLocalFactory = sessionmaker(
                autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
            )
            logger.info("SQLAlchemy session factory (SessionLocal) created.")

            # 4. Initialize Schema (uses the engine)
            from .schema_manager import SchemaManager
            try:
                logger.info("Initializing database schema...")
                SchemaManager(engine).initialize_schema()
            except Exception as schema_err:
                logger.critical(f"Database schema initialization failed: {schema_err}", exc_info=True)
                _SessionLocalFactory = None
                engine.dispose()
                raise DatabaseError(f"Schema initialization failed: {schema_err}") from schema_err

            _sqla_engine = engine
            logger.info("SQLAlchemy initialization complete.")
            return _sqla_engine

        except (DatabaseError, ConfigurationError, InfrastructureError):
             raise
        except SQLAlchemyError as e:
             logger.critical(f"SQLAlchemy engine/session factory initialization failed: {e}", exc_info=True)
             raise DatabaseError(f"SQLAlchemy initialization failed: {e}") from e
        except Exception as e:
             logger.critical(f"Unexpected error during SQLAlchemy initialization: {e}", exc_info=True)
             if engine is not None:
                 engine.dispose()
             raise DatabaseError(f"Unexpected error during database initialization: {e}") from e

# --- Função para Obter uma Sessão (Gerenciador de Contexto) ---
@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager to get a database session.
    Manages session lifecycle (commit, rollback, close). Connection failures
    surface as InfrastructureError, any other SQLAlchemy failure as DatabaseError.
    """
    from agro_registry.utils.logger import logger
    from agro_registry.api.errors import DatabaseError, InfrastructureError

    if not _SessionLocalFactory:
        raise InfrastructureError("Database session factory has not been initialized.")

    db: Optional[Session] = None
    try:
        db = _SessionLocalFactory()
        yield db
        db.commit()
        logger.debug("Database session committed successfully.")
    except (OperationalError, InterfaceError) as conn_ex:
        logger.error(f"Primary store unreachable: {conn_ex}", exc_info=True)
        if db:
            db.rollback()
        raise InfrastructureError(f"Primary store unreachable: {conn_ex}") from conn_ex
    except SQLAlchemyError as sql_ex:
        logger.error(f"Database error occurred in session: {sql_ex}", exc_info=True)
        if db:
            db.rollback()
            logger.warning("Database session rolled back due to SQLAlchemyError.")
        raise DatabaseError(f"Database operation failed: {sql_ex}") from sql_ex
    except Exception:
        if db:
            db.rollback()
            logger.debug("Database session rolled back due to exception.")
        raise
    finally:
        if db:
            db.close()

# --- Função de Desligamento do Engine ---
def dispose_sqlalchemy_engine():
    """Closes all connections in the engine's pool. Call during application shutdown."""
    from agro_registry.utils.logger import logger

    global _sqla_engine, _SessionLocalFactory
    with _engine_lock:
        if _sqla_engine:
            logger.info("Disposing SQLAlchemy engine connection pool...")
            try:
                _sqla_engine.dispose()
                logger.info("SQLAlchemy engine connection pool disposed.")
            except Exception as e:
                logger.error(f"Error disposing SQLAlchemy engine pool: {e}", exc_info=True)
            finally:
                _sqla_engine = None
                _SessionLocalFactory = None
        else:
            logger.debug("SQLAlchemy engine shutdown called, but engine already disposed or not initialized.")

__all__ = [
    "init_sqlalchemy",
    "get_db_session",
    "dispose_sqlalchemy_engine",
    "Base",
]
