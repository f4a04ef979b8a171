"""Unit tests for AuthService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from gathrio.config import Settings
from gathrio.core.auth_service import AuthService
from gathrio.core.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidOrExpiredToken,
    UserNotFound,
    ValidationError,
)
from gathrio.core.security import hash_password, hash_reset_secret, verify_password
from gathrio.core.tokens import TokenService
from gathrio.models.user import User


@pytest.fixture
def auth_service(test_db_session: Session, token_service: TokenService, settings: Settings) -> AuthService:
    """AuthService bound to the test database."""
    return AuthService(db=test_db_session, tokens=token_service, settings=settings)


def _reload(session: Session, email: str) -> User:
    session.expire_all()
    return session.query(User).filter(User.email == email).one()


class TestRegister:
    """Tests for AuthService.register()."""

    def test__register__creates_user_with_default_role(self, auth_service: AuthService, test_db_session: Session):
        result = auth_service.register("a@example.com", "password1", "A", "B")

        assert result.user.email == "a@example.com"
        assert result.user.role == "attendee"
        assert result.user.phone is None
        assert result.user.reset_token_hash is None
        assert result.user.reset_token_expiry is None
        assert test_db_session.query(User).count() == 1

    def test__register__hashes_password(self, auth_service: AuthService):
        result = auth_service.register("a@example.com", "password1", "A", "B")

        assert result.user.password_hash != "password1"
        assert verify_password("password1", result.user.password_hash) is True

    def test__register__issues_verifiable_tokens(self, auth_service: AuthService, token_service: TokenService):
        result = auth_service.register("a@example.com", "password1", "A", "B", role="organizer")

        identity = token_service.verify_access_token(result.access_token)
        assert identity.user_id == str(result.user.id)
        assert identity.email == "a@example.com"
        assert identity.role == "organizer"
        assert token_service.verify_refresh_token(result.refresh_token) == identity

    def test__register__duplicate_email_fails(self, auth_service: AuthService, test_db_session: Session):
        auth_service.register("dup@example.com", "password1", "A", "B")

        with pytest.raises(DuplicateEmail) as exc_info:
            auth_service.register("dup@example.com", "password2", "C", "D")

        assert exc_info.value.message == "User with this email already exists"
        assert test_db_session.query(User).count() == 1

    def test__register__unique_index_rejects_race_loser(self, auth_service: AuthService, test_db_session: Session):
        # Another request commits the same email between the existence check and our flush
        other_session = sessionmaker(bind=test_db_session.get_bind())()

        @event.listens_for(test_db_session, "before_flush", once=True)
        def _commit_competing_user(session, flush_context, instances):
            now = datetime.now(timezone.utc)
            other_session.add(
                User(
                    id=uuid4(),
                    email="race@example.com",
                    password_hash=hash_password("password1"),
                    first_name="Other",
                    last_name="Request",
                    role="attendee",
                    created_at=now,
                    updated_at=now,
                )
            )
            other_session.commit()

        try:
            with pytest.raises(DuplicateEmail):
                auth_service.register("race@example.com", "password1", "A", "B")
        finally:
            other_session.close()

        assert test_db_session.query(User).filter(User.email == "race@example.com").count() == 1

    def test__register__other_integrity_errors_propagate(self, auth_service: AuthService, test_db_session: Session):
        with pytest.raises(IntegrityError):
            auth_service.register("a@example.com", "password1", None, "B")

        assert test_db_session.query(User).count() == 0

    def test__register__rejects_short_password(self, auth_service: AuthService):
        with pytest.raises(ValidationError) as exc_info:
            auth_service.register("a@example.com", "short", "A", "B")

        assert "8" in exc_info.value.errors[0]

    def test__register__rejects_admin_role(self, auth_service: AuthService):
        with pytest.raises(ValidationError):
            auth_service.register("a@example.com", "password1", "A", "B", role="admin")


class TestLogin:
    """Tests for AuthService.login()."""

    def test__login__returns_fresh_tokens(self, auth_service: AuthService):
        registered = auth_service.register("a@example.com", "password1", "A", "B")

        result = auth_service.login("a@example.com", "password1")

        assert result.user.id == registered.user.id
        assert result.access_token != registered.access_token
        assert result.refresh_token != registered.refresh_token

    def test__login__unknown_email_and_wrong_password_are_indistinguishable(self, auth_service: AuthService):
        auth_service.register("a@example.com", "password1", "A", "B")

        with pytest.raises(InvalidCredentials) as unknown_email:
            auth_service.login("nobody@example.com", "password1")
        with pytest.raises(InvalidCredentials) as wrong_password:
            auth_service.login("a@example.com", "wrong-password")

        assert unknown_email.value.message == wrong_password.value.message == "Invalid email or password"
        assert unknown_email.value.status_code == wrong_password.value.status_code == 401

    def test__login__does_not_modify_user(self, auth_service: AuthService, test_db_session: Session):
        auth_service.register("a@example.com", "password1", "A", "B")
        before = _reload(test_db_session, "a@example.com")
        snapshot = (before.password_hash, before.updated_at, before.reset_token_hash)

        auth_service.login("a@example.com", "password1")

        after = _reload(test_db_session, "a@example.com")
        assert (after.password_hash, after.updated_at, after.reset_token_hash) == snapshot


class TestLogout:
    """Tests for AuthService.logout()."""

    def test__logout__returns_message(self, auth_service: AuthService):
        assert auth_service.logout() == "Logout successful"


class TestForgotPassword:
    """Tests for AuthService.forgot_password()."""

    def test__forgot_password__stores_hash_and_expiry(self, auth_service: AuthService, test_db_session: Session):
        auth_service.register("a@example.com", "password1", "A", "B")

        result = auth_service.forgot_password("a@example.com")

        user = _reload(test_db_session, "a@example.com")
        assert result.reset_token
        assert user.reset_token_hash == hash_reset_secret(result.reset_token)
        assert user.reset_token_hash != result.reset_token
        assert user.reset_token_expiry is not None

        expiry = user.reset_token_expiry
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        remaining = expiry - datetime.now(timezone.utc)
        assert timedelta(minutes=59) <= remaining <= timedelta(minutes=60)

    def test__forgot_password__unknown_email_fails(self, auth_service: AuthService):
        with pytest.raises(UserNotFound):
            auth_service.forgot_password("nobody@example.com")

    def test__forgot_password__replaces_previous_token(self, auth_service: AuthService):
        auth_service.register("a@example.com", "password1", "A", "B")
        first = auth_service.forgot_password("a@example.com")
        second = auth_service.forgot_password("a@example.com")

        assert first.reset_token != second.reset_token
        with pytest.raises(InvalidOrExpiredToken):
            auth_service.reset_password(first.reset_token, "newpassword1")
        assert auth_service.reset_password(second.reset_token, "newpassword1") == "Password reset successful"


class TestResetPassword:
    """Tests for AuthService.reset_password()."""

    def test__reset_password__sets_new_password_and_clears_token(
        self, auth_service: AuthService, test_db_session: Session
    ):
        auth_service.register("a@example.com", "password1", "A", "B")
        reset = auth_service.forgot_password("a@example.com")

        message = auth_service.reset_password(reset.reset_token, "newpassword1")

        user = _reload(test_db_session, "a@example.com")
        assert message == "Password reset successful"
        assert user.reset_token_hash is None
        assert user.reset_token_expiry is None
        assert verify_password("newpassword1", user.password_hash) is True
        assert verify_password("password1", user.password_hash) is False

    def test__reset_password__token_is_single_use(self, auth_service: AuthService):
        auth_service.register("a@example.com", "password1", "A", "B")
        reset = auth_service.forgot_password("a@example.com")
        auth_service.reset_password(reset.reset_token, "newpassword1")

        with pytest.raises(InvalidOrExpiredToken):
            auth_service.reset_password(reset.reset_token, "anotherpassword1")

    def test__reset_password__expired_token_fails(self, auth_service: AuthService, test_db_session: Session):
        auth_service.register("a@example.com", "password1", "A", "B")
        reset = auth_service.forgot_password("a@example.com")

        user = _reload(test_db_session, "a@example.com")
        user.reset_token_expiry = datetime.now(timezone.utc) - timedelta(minutes=1)
        test_db_session.commit()

        with pytest.raises(InvalidOrExpiredToken) as exc_info:
            auth_service.reset_password(reset.reset_token, "newpassword1")

        assert exc_info.value.message == "Invalid or expired reset token"
        user = _reload(test_db_session, "a@example.com")
        assert verify_password("password1", user.password_hash) is True

    def test__reset_password__unknown_token_fails_with_same_error(self, auth_service: AuthService):
        with pytest.raises(InvalidOrExpiredToken) as exc_info:
            auth_service.reset_password("not-a-real-token", "newpassword1")

        assert exc_info.value.message == "Invalid or expired reset token"

    def test__reset_password__rejects_short_password(self, auth_service: AuthService, test_db_session: Session):
        auth_service.register("a@example.com", "password1", "A", "B")
        reset = auth_service.forgot_password("a@example.com")

        with pytest.raises(ValidationError):
            auth_service.reset_password(reset.reset_token, "short")

        # The token survives a rejected attempt
        user = _reload(test_db_session, "a@example.com")
        assert user.reset_token_hash == hash_reset_secret(reset.reset_token)

    def test__reset_password__then_login_with_new_password(self, auth_service: AuthService):
        auth_service.register("a@example.com", "password1", "A", "B")
        reset = auth_service.forgot_password("a@example.com")
        auth_service.reset_password(reset.reset_token, "newpassword1")

        with pytest.raises(InvalidCredentials):
            auth_service.login("a@example.com", "password1")
        assert auth_service.login("a@example.com", "newpassword1").user.email == "a@example.com"
