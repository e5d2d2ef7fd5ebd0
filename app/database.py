from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from app.core.config import DATABASE_URL

Base = declarative_base()


def build_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return create_engine(
        url,
        # Connection Pool Settings
        poolclass=QueuePool,
        pool_size=15,
        max_overflow=25,
        pool_timeout=60,
        pool_recycle=3600,               # Recycle connections every hour
        pool_pre_ping=True,              # Validate connections before use
        connect_args={
            "connect_timeout": 10,
            "application_name": "productivity_tracker",
        },
        echo=False,                      # Set to True for SQL debugging
    )


engine = build_engine()

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False  # Keep objects accessible after commit
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
