from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from lexai.config import DATABASE_URL

if DATABASE_URL.startswith("sqlite"):
    # In-memory databases must share one connection across threads
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool if ":memory:" in DATABASE_URL else None,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,  # Enables pessimistic disconnect handling
        pool_recycle=300,    # Recycle connections every 5 minutes
        echo=False
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
