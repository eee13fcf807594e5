import os
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./questionbank.db")

# Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Generation pacing and retry policy
GENERATION_BATCH_DELAY = float(os.getenv("GENERATION_BATCH_DELAY", "1.5"))  # seconds between batches
GENERATION_MAX_ATTEMPTS = int(os.getenv("GENERATION_MAX_ATTEMPTS", "5"))
GENERATION_INITIAL_DELAY = float(os.getenv("GENERATION_INITIAL_DELAY", "2.0"))
GENERATION_MAX_DELAY = float(os.getenv("GENERATION_MAX_DELAY", "10.0"))
MAX_EMPTY_BATCHES = int(os.getenv("MAX_EMPTY_BATCHES", "3"))

# Seeding
SEED_TARGET_COUNT = int(os.getenv("SEED_TARGET_COUNT", "50"))
PRESEEDED_DOMAINS = [
    "Web Development",
    "Data Science",
    "Machine Learning",
    "Mobile Development",
    "UI/UX Design",
    "DevOps",
    "Cloud Computing",
    "Cybersecurity",
    "Blockchain",
    "Game Development",
]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Frontend URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
