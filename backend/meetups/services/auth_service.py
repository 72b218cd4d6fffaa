import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meetups.core.exceptions import DuplicateResourceError, InvalidCredentialsError
from meetups.core.security import hash_password, verify_password, create_user_token
from meetups.repositories import UserRepository
from meetups.schemas import AuthResponse, UserLogin, UserRegister, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    """
    Регистрация и вход пользователей.

    Оба метода возвращают AuthResponse: публичные поля пользователя + токен.
    """

    def __init__(self, db: Session):
        self.users = UserRepository(db)

    def register(self, data: UserRegister) -> AuthResponse:
        """
        Docstring для register

        :param data: email, пароль и имя нового пользователя
        :type data: UserRegister
        :return: Пользователь без хеша пароля и токен
        :rtype: AuthResponse
        """
        logger.info("🔄 Попытка регистрации: %s", data.email)

        # Проверка email
        if self.users.get_by_email(data.email):
            logger.warning("⚠️ Email уже зарегистрирован: %s", data.email)
            raise DuplicateResourceError("User with this email already exists")

        try:
            user = self.users.create(
                email=data.email,
                password_hash=hash_password(data.password),
                name=data.name,
            )
        except IntegrityError:
            # Параллельная регистрация успела раньше нас
            logger.warning("⚠️ Email занят параллельной регистрацией: %s", data.email)
            raise DuplicateResourceError("User with this email already exists")

        logger.info(f"Пользователь зарегистрирован: id={user.id}")

        return AuthResponse(user=UserResponse.model_validate(user), token=create_user_token(user))

    def login(self, credentials: UserLogin) -> AuthResponse:
        logger.info("🔄 Попытка входа: %s", credentials.email)

        user = self.users.get_by_email(credentials.email)

        # Одна и та же ошибка для неизвестного email и неверного пароля
        if not user or not verify_password(credentials.password, user.password_hash):
            logger.warning("⚠️ Неудачная попытка входа: %s", credentials.email)
            raise InvalidCredentialsError()

        logger.info(f"Пользователь вошёл: id={user.id}")

        return AuthResponse(user=UserResponse.model_validate(user), token=create_user_token(user))
