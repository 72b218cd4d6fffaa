import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meetups.core.exceptions import (
    DuplicateResourceError,
    ReferentialIntegrityError,
    is_unique_violation,
)
from meetups.core.models import Meetup, RSVP
from meetups.repositories import RsvpRepository
from meetups.schemas import RsvpCreate

logger = logging.getLogger(__name__)


class RsvpService:
    """Запись пользователей на митапы"""

    def __init__(self, db: Session):
        self.rsvps = RsvpRepository(db)

    def create(self, data: RsvpCreate) -> RSVP:
        """
        Docstring для create

        Повторную запись не проверяем заранее: это делает UNIQUE (user_id, meetup_id),
        поэтому из двух параллельных запросов пройдёт ровно один.

        :param data: id пользователя и id митапа
        :type data: RsvpCreate
        :return: Созданная запись
        :rtype: RSVP
        """
        logger.info("🔄 RSVP: user_id=%s meetup_id=%s", data.user_id, data.meetup_id)

        try:
            rsvp = self.rsvps.create(user_id=data.user_id, meetup_id=data.meetup_id)
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.warning("⚠️ Повторный RSVP: user_id=%s meetup_id=%s", data.user_id, data.meetup_id)
                raise DuplicateResourceError(
                    "Failed to create RSVP - you may have already RSVP'd to this meetup"
                )
            logger.warning("⚠️ RSVP ссылается на несуществующие данные: %s", e.orig)
            raise ReferentialIntegrityError(
                "Failed to create RSVP - user or meetup does not exist"
            )

        logger.info(f"RSVP создан: id={rsvp.id}")
        return rsvp

    def list_user_meetups(self, user_id: int) -> List[Meetup]:
        """Митапы, на которые записан пользователь"""
        meetups = self.rsvps.list_meetups_for_user(user_id)
        logger.debug("user_id=%s записан на %d митапов", user_id, len(meetups))
        return meetups
