"""
HTTP клиент для Community Meetups API.

Текущий пользователь хранится не в глобальной переменной, а в SessionContext,
который клиент заполняет при входе и очищает при выходе.

Использование:
    client = MeetupsClient("http://localhost:2022")
    client.login("a@x.com", "secret1")
    client.create_meetup("Python evening", "Talks", "2026-11-01", "18:30", "Library")
    client.get_upcoming_meetups()
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Union
import datetime as dt

import httpx

from meetups.schemas import (
    AuthResponse,
    HealthResponse,
    MeetupResponse,
    MeetupWithRsvpCount,
    RsvpResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)


class MeetupsClientError(Exception):
    """Ошибка, которую вернул сервер"""

    def __init__(self, status_code: int, detail, code: Optional[str] = None):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.code = code


class NotAuthenticatedError(Exception):
    pass


@dataclass
class SessionContext:
    """Кто сейчас вошёл в систему"""
    user: Optional[UserResponse] = None
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def load(self, auth: AuthResponse):
        self.user = auth.user
        self.token = auth.token

    def clear(self):
        self.user = None
        self.token = None

    def require_user_id(self) -> int:
        if self.user is None:
            raise NotAuthenticatedError("Login or register first")
        return self.user.id


class MeetupsClient:
    def __init__(self, base_url: str = "http://localhost:2022", http: Optional[httpx.Client] = None,
                 session: Optional[SessionContext] = None):
        """
        base_url = адрес сервера.
        http = готовый httpx.Client (например TestClient в тестах).
        """
        self.http = http or httpx.Client(base_url=base_url, timeout=10.0)
        self.session = session or SessionContext()

    def _headers(self) -> dict:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    def _call(self, method: str, procedure: str, **kwargs):
        response = self.http.request(method, f"/rpc/{procedure}", headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"detail": response.text}
            logger.error("%s завершился ошибкой %s: %s", procedure, response.status_code, body)
            raise MeetupsClientError(response.status_code, body.get("detail"), body.get("code"))
        return response.json()

    def _query(self, procedure: str, params: Optional[dict] = None):
        return self._call("GET", procedure, params=params)

    def _mutate(self, procedure: str, payload: dict):
        return self._call("POST", procedure, json=payload)

    # ============= ПРОЦЕДУРЫ =============

    def healthcheck(self) -> HealthResponse:
        return HealthResponse(**self._query("healthcheck"))

    def register(self, email: str, password: str, name: str) -> AuthResponse:
        auth = AuthResponse(**self._mutate("registerUser", {"email": email, "password": password, "name": name}))
        self.session.load(auth)
        return auth

    def login(self, email: str, password: str) -> AuthResponse:
        auth = AuthResponse(**self._mutate("loginUser", {"email": email, "password": password}))
        self.session.load(auth)
        return auth

    def logout(self):
        self.session.clear()

    def create_meetup(self, title: str, description: str, date: Union[str, dt.date], time: str,
                      location: str, organizer_id: Optional[int] = None) -> MeetupResponse:
        if organizer_id is None:
            organizer_id = self.session.require_user_id()
        payload = {
            "title": title,
            "description": description,
            "date": date if isinstance(date, str) else date.isoformat(),
            "time": time,
            "location": location,
            "organizer_id": organizer_id,
        }
        return MeetupResponse(**self._mutate("createMeetup", payload))

    def get_upcoming_meetups(self) -> List[MeetupWithRsvpCount]:
        return [MeetupWithRsvpCount(**item) for item in self._query("getUpcomingMeetups")]

    def create_rsvp(self, meetup_id: int, user_id: Optional[int] = None) -> RsvpResponse:
        if user_id is None:
            user_id = self.session.require_user_id()
        return RsvpResponse(**self._mutate("createRsvp", {"user_id": user_id, "meetup_id": meetup_id}))

    def get_user_rsvps(self, user_id: Optional[int] = None) -> List[MeetupResponse]:
        if user_id is None:
            user_id = self.session.require_user_id()
        return [MeetupResponse(**item) for item in self._query("getUserRsvps", {"input": user_id})]

    def close(self):
        self.http.close()
