"""
Pydantic модели для RPC процедур.
"""
import re
from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_serializer, field_validator
from datetime import datetime, timezone

from meetups.core.models import utcnow

# Часы 0-23 (ведущий ноль необязателен), минуты 00-59
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

# id хранятся в INTEGER колонках
DB_ID_MAX = 2**31 - 1


def to_utc_iso(value: datetime) -> str:
    """Naive UTC из БД -> ISO строка с явным Z"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


# ============= ПОЛЬЗОВАТЕЛИ =============

class UserRegister(BaseModel):
    """
    Схема для регистрации пользователя.

    POST /rpc/registerUser
    {
        "email": "a@x.com",
        "password": "secret1",
        "name": "Ann"
    }
    """
    email: EmailStr = Field(..., description="Email пользователя")
    password: str = Field(..., min_length=6, description="Пароль (минимум 6 символов)")
    name: str = Field(..., min_length=1, description="Отображаемое имя")


class UserLogin(BaseModel):
    """
    Схема для входа пользователя.

    Длину пароля тут не проверяем: неверный пароль - это ошибка входа,
    а не ошибка валидации.
    """
    email: EmailStr = Field(..., description="Email пользователя")
    password: str = Field(..., description="Пароль")


class UserResponse(BaseModel):
    """
    Публичные поля пользователя.

    ⚠️ ВАЖНО: НЕ возвращаем пароль! (даже хешированный)
    """
    model_config = ConfigDict(from_attributes=True)  # Позволяет создавать из SQLAlchemy объекта User

    id: int
    email: str
    name: str
    created_at: datetime

    @field_serializer("created_at", when_used="json")
    def serialize_created_at(self, value: datetime) -> str:
        return to_utc_iso(value)


class AuthResponse(BaseModel):
    """Ответ registerUser / loginUser"""
    user: UserResponse
    token: str = Field(..., description="JWT токен")


# ============= МИТАПЫ =============

class MeetupCreate(BaseModel):
    """
    Схема создания митапа.

    POST /rpc/createMeetup
    {
        "title": "Python evening",
        "description": "Talks and pizza",
        "date": "2026-11-01",
        "time": "18:30",
        "location": "Main library, room 3",
        "organizer_id": 1
    }
    """
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    date: datetime = Field(..., description="Дата митапа (ISO 8601), строго в будущем")
    time: str = Field(..., description="Время в формате HH:MM")
    location: str = Field(..., min_length=1)
    organizer_id: int = Field(..., ge=1, le=DB_ID_MAX)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        # "2026-11-01" и "2026-11-01T18:30:00Z" оба допустимы
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError:
                raise ValueError("Invalid date format")
        return value

    @field_validator("date")
    @classmethod
    def date_in_future(cls, value: datetime) -> datetime:
        # Храним naive UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        if value <= utcnow():
            raise ValueError("Date must be in the future")
        return value

    @field_validator("time")
    @classmethod
    def time_format(cls, value: str) -> str:
        if not TIME_PATTERN.fullmatch(value):
            raise ValueError("Time must be in HH:MM format")
        return value


class MeetupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    date: datetime
    time: str
    location: str
    organizer_id: int
    created_at: datetime

    @field_serializer("date", "created_at", when_used="json")
    def serialize_datetimes(self, value: datetime) -> str:
        return to_utc_iso(value)


class MeetupWithRsvpCount(MeetupResponse):
    """Митап + сколько человек записалось (только для списка предстоящих)"""
    rsvp_count: int = 0


# ============= RSVP =============

class RsvpCreate(BaseModel):
    user_id: int = Field(..., ge=1, le=DB_ID_MAX)
    meetup_id: int = Field(..., ge=1, le=DB_ID_MAX)


class RsvpResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    meetup_id: int
    created_at: datetime

    @field_serializer("created_at", when_used="json")
    def serialize_created_at(self, value: datetime) -> str:
        return to_utc_iso(value)


# ============= СЛУЖЕБНОЕ =============

class HealthResponse(BaseModel):
    status: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Тело ответа при доменной ошибке"""
    detail: str
    code: str

