"""
Community Meetups API - главный файл приложения.

Все процедуры живут под одним адресом /rpc:
    query    -> GET  /rpc/<procedure>
    mutation -> POST /rpc/<procedure>
"""
import logging
from contextlib import asynccontextmanager
from typing import List
from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from meetups import config
from meetups.schemas import (
    DB_ID_MAX,
    AuthResponse,
    ErrorResponse,
    HealthResponse,
    MeetupCreate,
    MeetupResponse,
    MeetupWithRsvpCount,
    RsvpCreate,
    RsvpResponse,
    UserLogin,
    UserRegister,
    to_utc_iso,
)
from meetups.core.database import engine, Base, get_db
from meetups.core.exceptions import MeetupsError
from meetups.core.logging_config import setup_logging
from meetups.core.models import utcnow
from meetups.services.auth_service import AuthService
from meetups.services.meetup_service import MeetupService
from meetups.services.rsvp_service import RsvpService


# ===== НАСТРОЙКА ЛОГИРОВАНИЯ =====
setup_logging()
logger = logging.getLogger(__name__)


# ============= LIFESPAN EVENT =============

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Выполняется при запуске и остановке приложения.

    Код ДО yield - выполняется при старте (startup).
    Код ПОСЛЕ yield - выполняется при остановке (shutdown).
    """
    # ===== STARTUP =====
    logger.info("Community Meetups API запускается...")

    # Создание таблиц в БД
    Base.metadata.create_all(bind=engine)
    logger.info(f"База данных: {engine.url.render_as_string(hide_password=True)}")

    logger.info(f"Документация: http://{config.API_HOST}:{config.API_PORT}/docs")
    logger.info("API готов к работе!")

    yield  # Приложение работает

    # ===== SHUTDOWN =====
    logger.info("Остановка приложения...")
    engine.dispose()
    logger.info("Приложение остановлено")


# ============= СОЗДАНИЕ ПРИЛОЖЕНИЯ =============

app = FastAPI(
    title="Community Meetups API",
    description="Register, create meetups and RSVP",
    version=config.API_VERSION,
    lifespan=lifespan
)


# ============= CORS =============

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============= ОШИБКИ =============

@app.exception_handler(MeetupsError)
async def meetups_error_handler(request: Request, exc: MeetupsError):
    """Доменная ошибка -> JSON с понятным сообщением и кодом"""
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.message, code=exc.code).model_dump(),
    )


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


# ============= HEALTH CHECK =============

@app.get("/", tags=["Health"])
async def root():
    """Проверка что API работает"""
    logger.debug("GET / вызван")
    return {
        "message": "Community Meetups API",
        "status": "healthy",
        "version": config.API_VERSION,
        "docs": "/docs"
    }


@app.get("/rpc/healthcheck", response_model=HealthResponse, tags=["Health"])
async def healthcheck():
    """Статус и текущее время сервера"""
    logger.debug("Health check вызван")
    return HealthResponse(status="ok", timestamp=to_utc_iso(utcnow()))


# ============= AUTH =============

@app.post("/rpc/registerUser", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
          responses=ERROR_RESPONSES, tags=["Authentication"])
def register_user(user_data: UserRegister, db: Session = Depends(get_db)):
    """Регистрация нового пользователя"""
    return AuthService(db).register(user_data)


@app.post("/rpc/loginUser", response_model=AuthResponse, responses=ERROR_RESPONSES, tags=["Authentication"])
def login_user(credentials: UserLogin, db: Session = Depends(get_db)):
    """Вход пользователя"""
    return AuthService(db).login(credentials)


# ============= MEETUPS =============

@app.post("/rpc/createMeetup", response_model=MeetupResponse, status_code=status.HTTP_201_CREATED,
          responses=ERROR_RESPONSES, tags=["Meetups"])
def create_meetup(meetup_data: MeetupCreate, db: Session = Depends(get_db)):
    """Создать митап"""
    return MeetupService(db).create(meetup_data)


@app.get("/rpc/getUpcomingMeetups", response_model=List[MeetupWithRsvpCount], tags=["Meetups"])
def get_upcoming_meetups(db: Session = Depends(get_db)):
    """Предстоящие митапы с количеством RSVP"""
    return MeetupService(db).list_upcoming()


# ============= RSVP =============

@app.post("/rpc/createRsvp", response_model=RsvpResponse, status_code=status.HTTP_201_CREATED,
          responses=ERROR_RESPONSES, tags=["RSVP"])
def create_rsvp(rsvp_data: RsvpCreate, db: Session = Depends(get_db)):
    """Записаться на митап"""
    return RsvpService(db).create(rsvp_data)


@app.get("/rpc/getUserRsvps", response_model=List[MeetupResponse], tags=["RSVP"])
def get_user_rsvps(user_id: int = Query(..., alias="input", ge=1, le=DB_ID_MAX, description="ID пользователя"),
                   db: Session = Depends(get_db)):
    """Митапы, на которые записан пользователь"""
    return RsvpService(db).list_user_meetups(user_id)
