from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .settings import get_settings

settings = get_settings()

# sqlite (tests, local) needs the same-thread check off for the threadpool
connect_args = {"check_same_thread": False} if settings.SQLALCHEMY_URL.startswith("sqlite") else {}

# Create the SQLAlchemy engine
engine = create_engine(settings.SQLALCHEMY_URL, pool_pre_ping=True, connect_args=connect_args)

# Define the base class that all models should inherit from
class Base(DeclarativeBase):
    pass

# Session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
