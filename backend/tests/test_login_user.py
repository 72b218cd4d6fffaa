import pytest

from meetups.core.exceptions import InvalidCredentialsError
from meetups.schemas import UserLogin
from meetups.services.auth_service import AuthService


@pytest.fixture
def registered(client):
    return client.post(
        "/rpc/registerUser",
        json={"email": "a@x.com", "password": "secret1", "name": "Ann"},
    ).json()


def test_login_success(client, registered):
    response = client.post("/rpc/loginUser", json={"email": "a@x.com", "password": "secret1"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == registered["user"]
    assert "password_hash" not in body["user"]
    assert body["token"]


def test_wrong_password_and_unknown_email_fail_the_same_way(client, registered):
    wrong_password = client.post("/rpc/loginUser", json={"email": "a@x.com", "password": "nope"})
    unknown_email = client.post("/rpc/loginUser", json={"email": "b@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        "detail": "Invalid email or password",
        "code": "INVALID_CREDENTIALS",
    }


def test_login_has_no_password_length_rule(client, registered):
    # Короткий пароль - ошибка входа, а не 422
    response = client.post("/rpc/loginUser", json={"email": "a@x.com", "password": "x"})

    assert response.status_code == 401


def test_login_service_raises_invalid_credentials(db, make_user):
    make_user(email="c@x.com", password="secret1")
    service = AuthService(db)

    with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
        service.login(UserLogin(email="c@x.com", password="wrong"))
    with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
        service.login(UserLogin(email="missing@x.com", password="secret1"))
