"""Unit tests for SessionContext and TokenStore."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from modules.core.exceptions import RemoteError, ValidationError
from modules.core.session import SessionContext, TokenStore

pytestmark = pytest.mark.unit


@pytest.fixture()
def api():
    return MagicMock()


@pytest.fixture()
def fresh_session(token_store):
    return SessionContext(token_store)


class TestTokenStore:
    def test_round_trip(self, tmp_path):
        store = TokenStore(tmp_path / "nested" / "token")

        store.save("abc")

        assert store.load() == "abc"
        store.remove()
        assert store.load() is None

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
    def test_token_never_written_to_readable_file(self, tmp_path, monkeypatch):
        path = tmp_path / "token"
        path.write_text("old", encoding="utf-8")
        path.chmod(0o644)
        modes = []
        original = Path.write_text

        def recording_write_text(self, *args, **kwargs):
            modes.append(stat.S_IMODE(self.stat().st_mode))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "write_text", recording_write_text)
        TokenStore(path).save("secret")

        assert modes == [0o600]
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_file(self, token_store):
        assert token_store.load() is None
        token_store.remove()


class TestLifecycle:
    def test_init_loads_persisted_token(self, token_store, fresh_session):
        token_store.save("persisted")

        fresh_session.init()

        assert fresh_session.token == "persisted"
        assert not fresh_session.is_authenticated

    def test_login_then_authenticate(self, api, fresh_session, token_store):
        api.request.return_value = {"access_token": "new-token", "token_type": "bearer"}
        api.get.return_value = {"id": 9, "sub": "ana@talkstoque.com"}

        user = fresh_session.login(api, "ana@talkstoque.com", "s3cret")

        assert user.id == 9
        assert fresh_session.staff_id == 9
        assert fresh_session.is_authenticated
        assert token_store.load() == "new-token"
        kwargs = api.request.call_args.kwargs
        assert kwargs["data"] == {"username": "ana@talkstoque.com", "password": "s3cret"}
        api.get.assert_called_once_with("fetch_user_info", "/me/token-info")

    def test_blank_credentials_rejected(self, api, fresh_session):
        with pytest.raises(ValidationError):
            fresh_session.login(api, " ", "x")
        api.request.assert_not_called()

    def test_missing_access_token(self, api, fresh_session):
        api.request.return_value = {}

        with pytest.raises(RemoteError):
            fresh_session.login(api, "ana@talkstoque.com", "s3cret")
        assert fresh_session.token is None

    def test_failed_authentication_clears(self, api, fresh_session, token_store):
        token_store.save("stale")
        fresh_session.init()
        api.get.side_effect = RemoteError("fetch_user_info", status_code=401)

        with pytest.raises(RemoteError):
            fresh_session.authenticate(api)

        assert fresh_session.token is None
        assert token_store.load() is None

    def test_malformed_identity_clears(self, api, fresh_session, token_store):
        token_store.save("tok")
        fresh_session.init()
        api.get.return_value = {"sub": "ana@talkstoque.com"}

        with pytest.raises(RemoteError):
            fresh_session.authenticate(api)
        assert fresh_session.token is None

    def test_authenticate_without_token(self, api, fresh_session):
        with pytest.raises(ValidationError):
            fresh_session.authenticate(api)

    def test_logout(self, session):
        session.logout()

        assert session.token is None
        assert session.user is None
        assert session.staff_id is None
