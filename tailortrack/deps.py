from pathlib import Path
from typing import Dict, Any

from fastapi import Depends
from pydantic_settings import BaseSettings
from sqlmodel import SQLModel, Session, create_engine

from .store import Store
from .sync import LocalFallback, SyncGateway


class Settings(BaseSettings):
    # env or .env
    DATABASE_URL: str = "sqlite:///./tailortrack.db"
    SHEETS_URL: str = ""  # spreadsheet web app; empty disables sync
    SYNC_TIMEOUT: float = 15.0
    FALLBACK_DIR: str = "./data/fallback"
    AUTO_SYNC: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

# SQLite connections are shared across FastAPI's worker threads
connect_args: Dict[str, Any] = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=connect_args)

gateway = SyncGateway(settings.SHEETS_URL, timeout=settings.SYNC_TIMEOUT)
fallback = LocalFallback(settings.FALLBACK_DIR)


def init_db():
    SQLModel.metadata.create_all(engine)
    Path(settings.FALLBACK_DIR).mkdir(parents=True, exist_ok=True)


def get_session():
    with Session(engine) as session:
        yield session


def get_store(session: Session = Depends(get_session)) -> Store:
    return Store(session)


def get_settings() -> Settings:
    return settings


def get_gateway() -> SyncGateway:
    return gateway


def get_fallback() -> LocalFallback:
    return fallback
