from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy import create_engine
import logging
import os

logger = logging.getLogger("app.config.db")

# Get environment variables
DB_USER = os.getenv("DB_USER", "thesis")
DB_PASSWORD = os.getenv("DB_PASSWORD", "thesis")
DB_NAME = os.getenv("DB_NAME", "thesis-db")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")

# Pool settings
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "0"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "2"))

# Connection URL
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)


def create_db_engine(url: str):
    # SQLite is only used for local runs and tests
    if url.startswith("sqlite"):
        engine_args = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine_args["poolclass"] = StaticPool
        return create_engine(url, **engine_args)

    return create_engine(
        url,
        pool_size = DB_POOL_SIZE,
        max_overflow = DB_MAX_OVERFLOW,
        pool_timeout = DB_POOL_TIMEOUT,
        pool_pre_ping = True,
        connect_args = {"connect_timeout": DB_CONNECT_TIMEOUT},
    )


logger.info("Creating database engine...")
engine = create_db_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit = False, autoflush = False, bind = engine)
Base = declarative_base()

logger.info("Database engine and session configured successfully")

# Dependency for use FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error: %s", e)
        raise
    finally:
        db.close()
        logger.debug("Database session closed")


def init_db():
    # Import models so they register on Base.metadata
    import models.user_model  # noqa: F401
    import models.course_model  # noqa: F401
    import models.assignment_model  # noqa: F401

    logger.info("Creating database tables if missing")
    Base.metadata.create_all(bind = engine)
