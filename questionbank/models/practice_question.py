import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Index
from questionbank.database import Base


class PracticeQuestion(Base):
    """Learning-mode multiple choice question, kept apart from graded tests."""

    __tablename__ = "practice_questions"
    __table_args__ = (Index("ix_practice_questions_domain_difficulty", "domain", "difficulty"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    domain = Column(String(100), nullable=False, index=True)
    difficulty = Column(String(10), nullable=False, default="medium")

    question = Column(Text, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)
    option_c = Column(Text, nullable=False)
    option_d = Column(Text, nullable=False)

    correct_answer = Column(String(1), nullable=False)
    explanation = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
