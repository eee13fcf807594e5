import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Index
from questionbank.database import Base


class MCQQuestion(Base):
    __tablename__ = "mcq_questions"
    __table_args__ = (Index("ix_mcq_questions_domain_difficulty", "domain", "difficulty"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    domain = Column(String(100), nullable=False, index=True)
    difficulty = Column(String(10), nullable=False, default="medium")  # easy, medium, hard

    # Prompt
    question = Column(Text, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)
    option_c = Column(Text, nullable=False)
    option_d = Column(Text, nullable=False)

    # Answer key, never selected for sampling
    correct_answer = Column(String(1), nullable=False)
    explanation = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
