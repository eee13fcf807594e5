from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from questionbank.config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all question bank tables."""
    from questionbank.models import mcq_question, practice_question, coding_problem, interview_question  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
