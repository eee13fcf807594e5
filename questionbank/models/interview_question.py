import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, JSON, Index
from questionbank.database import Base


class InterviewQuestion(Base):
    __tablename__ = "interview_questions"
    __table_args__ = (Index("ix_interview_questions_domain_difficulty", "domain", "difficulty"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    domain = Column(String(100), nullable=False, index=True)
    difficulty = Column(String(10), nullable=False, default="medium")

    question = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, default="technical")  # technical, behavioral, problem-solving

    # Points a strong answer should cover; read only by the answer review
    expected_points = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
