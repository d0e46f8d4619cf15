from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from sportfitx.core import config


def _connect_args(url: str) -> dict:
    # Handlers run in FastAPI's threadpool, so SQLite connections cross threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(config.DATABASE_URL, connect_args=_connect_args(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_document_schema_checked = False


def ensure_document_schema() -> None:
    global _document_schema_checked

    if _document_schema_checked:
        return

    with _schema_lock:
        if _document_schema_checked:
            return

        from sportfitx.models import document  # noqa: F401

        Base.metadata.create_all(bind=engine)

        inspector = inspect(engine)
        existing_columns = {column['name'] for column in inspector.get_columns('documents')}

        with engine.begin() as connection:
            if 'version' not in existing_columns:
                connection.execute(text('ALTER TABLE documents ADD COLUMN version INTEGER NOT NULL DEFAULT 0'))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_documents_collection_seq ON documents(collection, seq)')
            )

        _document_schema_checked = True
