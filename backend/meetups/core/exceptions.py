"""
Доменные ошибки сервиса.

Сервисы бросают их, а main.py превращает в JSON ответ с нужным HTTP кодом:
    {"detail": "Invalid email or password", "code": "INVALID_CREDENTIALS"}
"""
from sqlalchemy.exc import IntegrityError


class MeetupsError(Exception):
    """Базовая ошибка - всё, что видит клиент"""
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCredentialsError(MeetupsError):
    """Неверный email или пароль (намеренно не уточняем, что именно)"""
    status_code = 401
    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class DuplicateResourceError(MeetupsError):
    status_code = 409
    code = "CONFLICT"


class ReferentialIntegrityError(MeetupsError):
    """Ссылка на несуществующего пользователя или митап"""
    status_code = 400
    code = "INTEGRITY_ERROR"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Отличает нарушение UNIQUE от нарушения FOREIGN KEY.

    PostgreSQL отдаёт SQLSTATE (23505 - unique, 23503 - foreign key),
    SQLite - только текст: "UNIQUE constraint failed: ...".
    """
    pgcode = getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)
    if pgcode:
        return pgcode == "23505"
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message
