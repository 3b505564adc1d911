import time
from datetime import timedelta

import pytest
from jose import jwt
from sqlalchemy.orm import Session


class TestPasswordHashing:
    """Тесты хэширования паролей"""

    def test_hash_is_not_plaintext(self):
        from auth import hash_password
        hashed = hash_password("pw1234567")
        assert hashed != "pw1234567"
        assert "pw1234567" not in hashed
        assert hashed.startswith("$2")

    def test_hash_is_salted(self):
        from auth import hash_password
        assert hash_password("pw1234567") != hash_password("pw1234567")

    def test_verify_password(self):
        from auth import hash_password, verify_password
        hashed = hash_password("pw1234567")
        assert verify_password("pw1234567", hashed) is True
        assert verify_password("pw1234568", hashed) is False

    def test_verify_password_with_broken_hash(self):
        from auth import verify_password
        assert verify_password("pw1234567", "not-a-bcrypt-hash") is False


class TestTokens:
    """Тесты выпуска и проверки токенов"""

    def test_token_roundtrip(self):
        from auth import create_access_token, authenticate
        token = create_access_token("user-1")
        assert authenticate(token) == "user-1"

    def test_token_contains_expiry(self):
        from auth import create_access_token
        from config import get_settings
        token = create_access_token("user-1")
        claims = jwt.get_unverified_claims(token)
        assert claims["sub"] == "user-1"
        assert claims["exp"] - claims["iat"] == get_settings().token_expire_seconds

    def test_zero_expiry_token_is_expired(self):
        from auth import create_access_token, authenticate
        from errors import ExpiredToken
        token = create_access_token("user-1", expires_delta=timedelta(seconds=0))
        with pytest.raises(ExpiredToken):
            authenticate(token)

    def test_past_expiry_token_is_expired(self):
        from auth import create_access_token, authenticate
        from errors import ExpiredToken
        token = create_access_token("user-1", expires_delta=timedelta(hours=-1))
        with pytest.raises(ExpiredToken):
            authenticate(token)

    def test_missing_token(self):
        from auth import authenticate
        from errors import MissingToken
        with pytest.raises(MissingToken):
            authenticate(None)
        with pytest.raises(MissingToken):
            authenticate("")

    def test_malformed_token(self):
        from auth import authenticate
        from errors import InvalidToken
        with pytest.raises(InvalidToken):
            authenticate("not.a.token")

    def test_wrong_signature(self):
        from auth import authenticate
        from errors import InvalidToken
        forged = jwt.encode(
            {"sub": "user-1", "exp": int(time.time()) + 3600},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            authenticate(forged)

    def test_token_without_expiry_is_invalid(self):
        from auth import authenticate
        from config import get_settings
        from errors import InvalidToken
        token = jwt.encode({"sub": "user-1"}, get_settings().secret_key, algorithm="HS256")
        with pytest.raises(InvalidToken):
            authenticate(token)

    def test_token_without_subject_is_invalid(self):
        from auth import authenticate
        from config import get_settings
        from errors import InvalidToken
        token = jwt.encode({"exp": int(time.time()) + 3600}, get_settings().secret_key, algorithm="HS256")
        with pytest.raises(InvalidToken):
            authenticate(token)

    def test_all_token_errors_are_unauthorized(self):
        from errors import Unauthorized, MissingToken, InvalidToken, ExpiredToken
        for error in (MissingToken(), InvalidToken(), ExpiredToken()):
            assert isinstance(error, Unauthorized)
            assert error.status_code == 401


class TestRegisterAndLogin:
    """Тесты регистрации и входа"""

    def test_register_stores_hash_not_password(self, db_session: Session, sample_user_data):
        from auth import register
        from crud.user import get_user_by_email

        user = register(db_session, **sample_user_data)
        stored = get_user_by_email(db_session, sample_user_data["email"])
        assert stored.id == user.id
        assert stored.password_hash != sample_user_data["password"]
        assert sample_user_data["password"] not in stored.password_hash

    def test_login_after_register(self, db_session: Session, sample_user_data):
        from auth import register, login, authenticate

        user = register(db_session, **sample_user_data)
        token = login(db_session, sample_user_data["email"], sample_user_data["password"])
        assert authenticate(token) == user.id

    def test_login_email_is_case_insensitive(self, db_session: Session, sample_user_data):
        from auth import register, login, authenticate

        user = register(db_session, **sample_user_data)
        token = login(db_session, "ALICE@X.COM", sample_user_data["password"])
        assert authenticate(token) == user.id

    def test_duplicate_email(self, db_session: Session, sample_user_data):
        from auth import register
        from errors import DuplicateEmail

        register(db_session, **sample_user_data)
        with pytest.raises(DuplicateEmail):
            register(db_session, username="alice2", email="Alice@x.com", password="another123")

    def test_wrong_password_and_unknown_email_look_the_same(self, db_session: Session, sample_user_data):
        from auth import register, login
        from errors import InvalidCredentials

        register(db_session, **sample_user_data)
        with pytest.raises(InvalidCredentials) as wrong_password:
            login(db_session, sample_user_data["email"], "wrong-password")
        with pytest.raises(InvalidCredentials) as unknown_email:
            login(db_session, "nobody@x.com", sample_user_data["password"])
        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code

    @pytest.mark.parametrize("username, email, password", [
        ("", "a@x.com", "pw1234567"),
        ("alice", "", "pw1234567"),
        ("alice", "a@x.com", ""),
        ("alice", "not-an-email", "pw1234567"),
        ("alice", "a@x.com", "short"),
        ("al", "a@x.com", "pw1234567"),
        ("al ice!", "a@x.com", "pw1234567"),
        ("alice", "a@x.com", "x" * 73),
    ])
    def test_register_invalid_input(self, db_session: Session, username, email, password):
        from auth import register
        from errors import InvalidInput

        with pytest.raises(InvalidInput):
            register(db_session, username=username, email=email, password=password)

    def test_password_min_length_boundary(self, db_session: Session):
        from auth import register
        from errors import InvalidInput

        with pytest.raises(InvalidInput):
            register(db_session, username="eve", email="eve@x.com", password="1234567")
        user = register(db_session, username="eve", email="eve@x.com", password="12345678")
        assert user.email == "eve@x.com"
