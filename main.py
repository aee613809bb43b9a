import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from config.db_config import create_tables
from config.settings import CORS_ORIGINS
from controllers.course_controller import router as course_router
from controllers.learn_controller import router as learn_router, lessons_router
from controllers.user_progress_controller import router as user_progress_router

# Load environment variables
load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield


# Initialize FastAPI app
app = FastAPI(title="Lingo", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(course_router, prefix="/api", tags=["Courses"])
app.include_router(user_progress_router, prefix="/api", tags=["Progress"])
app.include_router(learn_router, prefix="/api/learn", tags=["Learn"])
app.include_router(lessons_router, prefix="/api/lessons", tags=["Lessons"])
