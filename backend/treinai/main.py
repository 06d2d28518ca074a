from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from treinai.core.config import settings
from treinai.db.session import create_tables
from treinai.routes import auth, students, exercises, workouts, sessions, gamification, history, coach
from treinai.services.workout import session_store


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.app_name} API")
    logger.info(f"CORS allow_origins: {settings.cors_origins}")
    await create_tables()
    yield
    # Shutdown
    session_store.purge_expired()
    logger.info("Shutting down API")


app = FastAPI(
    title=f"{settings.app_name} API",
    description="Personal trainers, their students, workouts and streaks",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(students.router, prefix="/students", tags=["students"])
app.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
app.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
app.include_router(gamification.router, prefix="/streak", tags=["gamification"])
app.include_router(history.router, prefix="/history", tags=["history"])
app.include_router(coach.router, prefix="/coach", tags=["coach"])


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name} API", "version": "1.0.0"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
