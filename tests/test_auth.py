import json

import pytest

from modportal.constants import AUTH_URL
from modportal.exceptions import AuthError, ConfigError
from modportal.services import Credentials, login
from tests.conftest import FakeResponse, FakeSession


def test_credentials_from_env(monkeypatch):
    monkeypatch.setenv("FACTORIO_USERNAME", "engineer")
    monkeypatch.setenv("FACTORIO_TOKEN", "secret")
    credentials = Credentials.from_env()
    assert credentials.as_params() == {"username": "engineer", "token": "secret"}
    assert "secret" not in repr(credentials)


def test_credentials_from_env_missing(monkeypatch):
    monkeypatch.setenv("FACTORIO_USERNAME", "engineer")
    monkeypatch.delenv("FACTORIO_TOKEN", raising=False)
    with pytest.raises(ConfigError):
        Credentials.from_env()


@pytest.mark.asyncio
async def test_login_returns_token():
    session = FakeSession(
        {AUTH_URL: FakeResponse(payload={"username": "Engineer", "token": "abc"})}
    )

    credentials = await login("engineer@example.com", "hunter2", session=session)

    assert credentials == Credentials(username="Engineer", token="abc")
    method, _, kwargs = session.calls[0]
    assert method == "POST"
    assert kwargs["data"]["api_version"] == "4"
    assert "email_authentication_code" not in kwargs["data"]
    assert not session.closed


@pytest.mark.asyncio
async def test_login_legacy_list_payload():
    session = FakeSession({AUTH_URL: FakeResponse(payload=["abc"])})
    credentials = await login("engineer", "hunter2", email_code="1234", session=session)
    assert credentials.token == "abc"
    assert session.calls[0][2]["data"]["email_authentication_code"] == "1234"


@pytest.mark.asyncio
async def test_login_failure():
    session = FakeSession(
        {
            AUTH_URL: FakeResponse(
                status=401,
                payload={"error": "login-failed", "message": "Invalid password"},
            )
        }
    )
    with pytest.raises(AuthError, match="Invalid password"):
        await login("engineer", "wrong", session=session)


@pytest.mark.asyncio
async def test_login_unexpected_payload():
    session = FakeSession({AUTH_URL: FakeResponse(payload={})})
    with pytest.raises(AuthError):
        await login("engineer", "hunter2", session=session)


class HtmlResponse(FakeResponse):
    async def json(self, content_type="application/json"):
        return json.loads(self._body.decode())


@pytest.mark.asyncio
async def test_login_html_error_page():
    session = FakeSession(
        {AUTH_URL: HtmlResponse(status=502, body=b"<html>Bad Gateway</html>")}
    )
    with pytest.raises(AuthError) as excinfo:
        await login("engineer", "hunter2", session=session)
    assert excinfo.value.context["status_code"] == 502


@pytest.mark.asyncio
async def test_login_non_json_success_body():
    session = FakeSession({AUTH_URL: HtmlResponse(status=200, body=b"not json")})
    with pytest.raises(AuthError):
        await login("engineer", "hunter2", session=session)
