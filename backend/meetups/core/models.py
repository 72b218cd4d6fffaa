# Таблицы БД: пользователи, митапы и RSVP

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from meetups.core.database import Base


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo - в таком виде храним все даты"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """SQLAlchemy модель - структура таблицы в БД"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)                        # В БД: INTEGER PRIMARY KEY
    email = Column(String(255), unique=True, nullable=False)      # В БД: VARCHAR UNIQUE
    password_hash = Column(Text, nullable=False)                  # Только хеш, наружу не отдаём
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)  # В БД: TIMESTAMP

    organized_meetups = relationship("Meetup", back_populates="organizer")
    rsvps = relationship("RSVP", back_populates="user")


class Meetup(Base):
    __tablename__ = "meetups"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # HH:MM
    location = Column(Text, nullable=False)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    organizer = relationship("User", back_populates="organized_meetups")
    rsvps = relationship("RSVP", back_populates="meetup")


class RSVP(Base):
    __tablename__ = "rsvps"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    meetup_id = Column(Integer, ForeignKey("meetups.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="rsvps")
    meetup = relationship("Meetup", back_populates="rsvps")

    # Один пользователь - одна запись на митап
    __table_args__ = (
        UniqueConstraint("user_id", "meetup_id", name="uq_rsvps_user_meetup"),
    )
