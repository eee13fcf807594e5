from questionbank.models.mcq_question import MCQQuestion
from questionbank.models.practice_question import PracticeQuestion
from questionbank.models.coding_problem import CodingProblem
from questionbank.models.interview_question import InterviewQuestion

__all__ = ["MCQQuestion", "PracticeQuestion", "CodingProblem", "InterviewQuestion"]
