import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import admin, auth, quizzes, user_stats, users
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.crud import crud_user
from app.db.models import Base
from app.db.session import SessionLocal, engine

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the DB tables (no migrations yet)
    Base.metadata.create_all(bind=engine)
    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            admin = crud_user.ensure_default_admin(
                db, settings.ADMIN_NAME, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD
            )
            logger.info("Default admin account: %s", admin.email)
        finally:
            db.close()
    yield


app = FastAPI(title="Quiz Platform", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users)
app.include_router(auth)
app.include_router(quizzes)
app.include_router(user_stats)
app.include_router(admin)


@app.get("/health")
def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/")
def root():
    return {"message": "Welcome to the Quiz Platform API"}
