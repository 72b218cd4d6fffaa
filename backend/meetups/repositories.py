"""
Доступ к БД: по одному репозиторию на сущность.

Сервисы работают только через эти классы, SQLAlchemy запросы живут здесь.
При нарушении ограничений IntegrityError пробрасывается наверх,
сессия к этому моменту уже откатана.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meetups.core.models import User, Meetup, RSVP


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj):
        """INSERT + COMMIT одной строки, при ошибке откатываем сессию"""
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(obj)
        return obj


class UserRepository(BaseRepository):

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, email: str, password_hash: str, name: str) -> User:
        return self._save(User(email=email, password_hash=password_hash, name=name))


class MeetupRepository(BaseRepository):

    def create(self, **fields) -> Meetup:
        return self._save(Meetup(**fields))

    def list_upcoming_with_rsvp_count(self, now: datetime) -> List[Tuple[Meetup, int]]:
        """
        Митапы с датой >= now и количеством RSVP.

        LEFT OUTER JOIN, чтобы митапы без записей попали в выборку с 0.
        """
        rsvp_count = func.count(RSVP.id).label("rsvp_count")
        rows = (
            self.db.query(Meetup, rsvp_count)
            .outerjoin(RSVP, RSVP.meetup_id == Meetup.id)
            .filter(Meetup.date >= now)
            .group_by(Meetup.id)
            .order_by(Meetup.date.asc())
            .all()
        )
        return [(meetup, int(count or 0)) for meetup, count in rows]


class RsvpRepository(BaseRepository):

    def create(self, user_id: int, meetup_id: int) -> RSVP:
        return self._save(RSVP(user_id=user_id, meetup_id=meetup_id))

    def list_meetups_for_user(self, user_id: int) -> List[Meetup]:
        return (
            self.db.query(Meetup)
            .join(RSVP, RSVP.meetup_id == Meetup.id)
            .filter(RSVP.user_id == user_id)
            .all()
        )

