import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meetups.core.exceptions import ReferentialIntegrityError
from meetups.core.models import Meetup, utcnow
from meetups.repositories import MeetupRepository
from meetups.schemas import MeetupCreate, MeetupWithRsvpCount

logger = logging.getLogger(__name__)


class MeetupService:
    """Создание митапов и список предстоящих"""

    def __init__(self, db: Session):
        self.meetups = MeetupRepository(db)

    def create(self, data: MeetupCreate) -> Meetup:
        """
        Сохраняет митап. Дата и время уже проверены схемой,
        существование организатора проверяет внешний ключ.
        """
        logger.info("🔄 Создание митапа '%s', организатор id=%s", data.title, data.organizer_id)

        try:
            meetup = self.meetups.create(**data.model_dump())
        except IntegrityError as e:
            logger.warning("⚠️ Организатор не найден: id=%s (%s)", data.organizer_id, e.orig)
            raise ReferentialIntegrityError(
                f"Failed to create meetup - organizer {data.organizer_id} does not exist"
            )

        logger.info(f"Митап создан: id={meetup.id}")
        return meetup

    def list_upcoming(self) -> List[MeetupWithRsvpCount]:
        """Митапы, дата которых ещё не наступила, по возрастанию даты"""
        rows = self.meetups.list_upcoming_with_rsvp_count(utcnow())
        logger.debug("Найдено предстоящих митапов: %d", len(rows))

        return [
            MeetupWithRsvpCount.model_validate(meetup).model_copy(update={"rsvp_count": count})
            for meetup, count in rows
        ]
