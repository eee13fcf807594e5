import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from questionbank.config import FRONTEND_URL, LOG_LEVEL, PRESEEDED_DOMAINS
from questionbank.database import init_db
from questionbank.dependencies import get_generator
from questionbank.routers import questions_router, admin_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if get_generator() is None:
        logger.warning("GEMINI_API_KEY not set; serving existing questions only")
    yield


app = FastAPI(title="Question Bank API", lifespan=lifespan)

app.include_router(questions_router)
app.include_router(admin_router)


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


allowed_origins = [
    _strip_trailing_slash(FRONTEND_URL),
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Question Bank API is running", "domains": PRESEEDED_DOMAINS}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
