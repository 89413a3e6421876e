from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from jobly.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,
    max_overflow=20
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Register the table models with Base.metadata.

    Tables are created by Alembic ("alembic upgrade head"), not here.
    """
    from jobly.models import company, job, user  # noqa: F401
