from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from typing import Generator, Optional
import redis
from .config import settings

def create_db_engine(database_url: str):
    """Build an engine with pool settings suited to the backend."""
    if database_url.startswith("sqlite"):
        # SQLite connections are shared across the threadpool FastAPI runs sync code in
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 minutes
    )

# Store handle, created once per process and shared by every request
engine = create_db_engine(settings.get_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Largest value a 64-bit INTEGER primary key can hold
MAX_ID = 2**63 - 1

_redis_client: Optional[redis.Redis] = None

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Redis dependency
def get_redis() -> redis.Redis:
    """Get Redis client, connecting lazily on first use."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis_client

# Database initialization
def init_db():
    """Initialize database tables."""
    # Models must be imported so they register on Base.metadata
    from ..models import user, appointment, prescription  # noqa: F401
    Base.metadata.create_all(bind=engine)

def get_record(db: Session, model, record_id):
    """Point lookup that treats ids outside the INTEGER range as missing."""
    if not isinstance(record_id, int) or not 1 <= record_id <= MAX_ID:
        return None
    return db.get(model, record_id)
