import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, JSON, Index
from questionbank.database import Base


class CodingProblem(Base):
    __tablename__ = "coding_problems"
    __table_args__ = (Index("ix_coding_problems_domain_difficulty", "domain", "difficulty"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    domain = Column(String(100), nullable=False, index=True)
    difficulty = Column(String(10), nullable=False, default="medium")

    # Problem statement
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    input_format = Column(Text, nullable=True)
    output_format = Column(Text, nullable=True)
    constraints = Column(JSON, nullable=True)  # list of strings
    sample_input = Column(Text, nullable=True)
    sample_output = Column(Text, nullable=True)

    # Hidden tests: [{"input": str, "output": str, "explanation": str}]
    test_cases = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
