import pytest
import redis
from sqlalchemy.exc import OperationalError

from app.core.db import get_db
from app.main import app
from app.services.admin_session import AdminSessionGate
from app.services.errors import Unauthorized
from app.services.rate_limit import RateLimitResult, get_login_limiter
from tests.conftest import ADMIN_CODE


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_login_issues_session_and_check_accepts_it():
    gate = AdminSessionGate(admin_code="s3cret", ttl_seconds=60)
    session = gate.login("s3cret")

    assert session.token
    assert session.token not in repr(session)
    assert gate.check(session.token) is True
    assert gate.authenticate(session.token).session_id == session.session_id


def test_wrong_code_never_authenticates():
    gate = AdminSessionGate(admin_code="s3cret", ttl_seconds=60)
    for code in ("wrong-code", "s3cre", "s3cret ", ""):
        with pytest.raises(Unauthorized):
            gate.login(code)
    assert gate.check(None) is False
    assert gate.check("made-up-token") is False


def test_unconfigured_code_looks_like_wrong_code():
    gate = AdminSessionGate(admin_code="IN_ENV", ttl_seconds=60)
    assert gate.configured is False

    with pytest.raises(Unauthorized) as exc:
        gate.login("IN_ENV")
    assert exc.value.message == "Invalid admin code"


def test_expired_session_is_treated_as_absent():
    clock = FakeClock()
    gate = AdminSessionGate(admin_code="s3cret", ttl_seconds=60, clock=clock)
    session = gate.login("s3cret")

    clock.now += 59
    assert gate.check(session.token) is True

    clock.now += 1
    with pytest.raises(Unauthorized) as exc:
        gate.authenticate(session.token)
    assert exc.value.message == "Admin session required"


def test_logout_invalidates_immediately_and_is_idempotent():
    gate = AdminSessionGate(admin_code="s3cret", ttl_seconds=60)
    session = gate.login("s3cret")
    other = gate.login("s3cret")

    gate.logout(session.token)
    gate.logout(session.token)
    gate.logout(None)

    assert gate.check(session.token) is False
    assert gate.check(other.token) is True


@pytest.mark.asyncio
async def test_status_before_login_is_false(client):
    r = await client.get("/v1/admin")
    assert r.status_code == 200
    assert r.json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_wrong_code_does_not_set_authenticated(client):
    r = await client.post("/v1/admin", json={"code": "wrong-code"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid admin code"
    assert "admin_session" not in r.cookies

    r = await client.get("/v1/admin")
    assert r.json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_login_logout_roundtrip(client):
    r = await client.post("/v1/admin", json={"code": ADMIN_CODE})
    assert r.status_code == 200
    assert r.json() == {"authenticated": True}
    token = client.cookies.get("admin_session")
    assert token

    assert (await client.get("/v1/admin")).json() == {"authenticated": True}

    r = await client.delete("/v1/admin")
    assert r.status_code == 200
    assert (await client.get("/v1/admin")).json() == {"authenticated": False}

    # the old token is dead even when replayed explicitly
    r = await client.get("/v1/admin", headers={"Authorization": f"Bearer {token}"})
    assert r.json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_bearer_token_is_accepted(client):
    await client.post("/v1/admin", json={"code": ADMIN_CODE})
    token = client.cookies.get("admin_session")
    client.cookies.clear()

    r = await client.get("/v1/admin/pending", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json() == {"listings": []}


@pytest.mark.asyncio
async def test_pending_requires_session(client):
    r = await client.get("/v1/admin/pending")
    assert r.status_code == 401
    assert r.json() == {"error": "Admin session required", "code": "unauthorized"}


class FakeLimiter:
    def __init__(self, limit: int):
        self.limit = limit
        self.calls = 0

    async def allow(self, *, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        self.calls += 1
        return RateLimitResult(allowed=self.calls <= self.limit, remaining=max(0, self.limit - self.calls), reset_seconds=42)


@pytest.mark.asyncio
async def test_login_attempts_are_throttled(client):
    limiter = FakeLimiter(limit=2)
    app.dependency_overrides[get_login_limiter] = lambda: limiter

    assert (await client.post("/v1/admin", json={"code": "nope"})).status_code == 401
    assert (await client.post("/v1/admin", json={"code": "nope"})).status_code == 401

    r = await client.post("/v1/admin", json={"code": ADMIN_CODE})
    assert r.status_code == 429
    assert r.headers["retry-after"] == "42"
    assert r.json()["code"] == "rate_limited"
    assert (await client.get("/v1/admin")).json() == {"authenticated": False}


class UnreachableLimiter:
    async def allow(self, *, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        raise redis.ConnectionError("Error 111 connecting to localhost:6379. Connection refused.")


@pytest.mark.asyncio
async def test_login_fails_closed_when_limiter_store_is_down(client):
    app.dependency_overrides[get_login_limiter] = lambda: UnreachableLimiter()

    r = await client.post("/v1/admin", json={"code": ADMIN_CODE})
    assert r.status_code == 503
    assert r.json() == {"error": "Login temporarily unavailable", "code": "transient_io"}
    assert "set-cookie" not in r.headers
    assert (await client.get("/v1/admin")).json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_pending_reports_transient_io_when_database_is_down(admin_client):
    async def _database_down():
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))
        yield

    app.dependency_overrides[get_db] = _database_down

    r = await admin_client.get("/v1/admin/pending")
    assert r.status_code == 503
    assert r.json() == {"error": "Store unavailable", "code": "transient_io"}
