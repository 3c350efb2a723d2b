from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from tsbapp.config import DATABASE_URL
from .base import Base

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

__all__ = ["Base", "engine", "SessionLocal"]
