import pytest

from fakes import FakeTransport, ok, status
from infrastructure.api.moderation_http import ApiRequest, TransportFailure
from services.report_client import ReportClient
from services.session_service import LOGIN_PATH, SessionManager
from use_cases.errors import AuthError, SessionError, ValidationError

DASHBOARD = "/api/reports/admin/dashboard"


def _logged_in(store, transport, token="tok-1"):
    transport.add("POST", LOGIN_PATH, ok({"access_token": token}))
    manager = SessionManager(transport, store)
    manager.login("admin1", "secret")
    return manager


def test_login_stores_token_identity_and_credential(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)

    assert manager.is_active
    assert manager.identity == "admin1"
    assert store.load() == ("tok-1", "admin1", "secret")
    request, token = transport.calls[0]
    assert request.json == {"userId": "admin1", "password": "secret"}
    assert token is None


def test_login_trims_fields(store):
    transport = FakeTransport().add("POST", LOGIN_PATH, ok({"access_token": "tok-1"}))
    manager = SessionManager(transport, store)

    manager.login("  admin1 ", " secret  ")

    assert transport.calls[0][0].json == {"userId": "admin1", "password": "secret"}


@pytest.mark.parametrize("identity,credential", [("", "secret"), ("admin1", "   "), (None, None)])
def test_login_with_missing_fields_makes_no_request(store, identity, credential):
    transport = FakeTransport()
    manager = SessionManager(transport, store)

    with pytest.raises(ValidationError) as exc:
        manager.login(identity, credential)

    assert exc.value.code == "missing_fields"
    assert transport.calls == []
    assert store.load() is None


def test_rejected_login_leaves_existing_session_untouched(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    transport.add("POST", LOGIN_PATH, status(401, "Invalid credentials"))

    with pytest.raises(AuthError) as exc:
        manager.login("admin2", "wrong")

    assert exc.value.reason == "invalid_credentials"
    assert "Invalid credentials" in str(exc.value)
    assert manager.identity == "admin1"
    assert store.load() == ("tok-1", "admin1", "secret")


def test_login_server_error_and_missing_token_are_server_errors(store):
    transport = FakeTransport().add("POST", LOGIN_PATH, status(500), ok({"user": "admin1"}))
    manager = SessionManager(transport, store)

    with pytest.raises(AuthError) as first:
        manager.login("admin1", "secret")
    with pytest.raises(AuthError) as second:
        manager.login("admin1", "secret")

    assert first.value.reason == "server_error"
    assert second.value.reason == "server_error"
    assert not manager.is_active


def test_login_transport_failure_is_a_session_error(store):
    transport = FakeTransport().add("POST", LOGIN_PATH, TransportFailure("connection refused"))
    manager = SessionManager(transport, store)

    with pytest.raises(SessionError) as exc:
        manager.login("admin1", "secret")

    assert exc.value.reason == "transport"
    assert store.load() is None


def test_expired_token_is_refreshed_and_call_retried(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    transport.add("GET", DASHBOARD, status(401), ok({"stats": {"totalPending": 3}, "pendingReports": []}))
    transport.add("POST", LOGIN_PATH, ok({"access_token": "tok-2"}))

    snapshot = ReportClient(manager).get_dashboard()

    assert snapshot.stats.total_pending == 3
    assert [token for _, token in transport.calls_to(DASHBOARD)] == ["tok-1", "tok-2"]
    logins = [req.json for req, _ in transport.calls_to(LOGIN_PATH)]
    assert logins == [{"userId": "admin1", "password": "secret"}] * 2
    assert store.load() == ("tok-2", "admin1", "secret")
    assert manager.session.access_token == "tok-2"


def test_retry_sends_the_same_request(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    request = ApiRequest("POST", "/api/reports/r1/admin-review", json={"status": "resolved_invalid", "notes": "", "shouldStrike": False})
    transport.add("POST", request.path, status(401), ok())
    transport.add("POST", LOGIN_PATH, ok({"access_token": "tok-2"}))

    response = manager.authorized_request(request)

    assert response.ok
    sent = [req for req, _ in transport.calls_to(request.path)]
    assert len(sent) == 2
    assert sent[0] is request and sent[1] is request


def test_failed_reauthentication_clears_the_whole_session(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    transport.add("GET", DASHBOARD, status(401))
    transport.add("POST", LOGIN_PATH, status(401, "Invalid credentials"))

    with pytest.raises(SessionError) as exc:
        manager.authorized_request(ApiRequest("GET", DASHBOARD))

    assert exc.value.reason == "expired"
    assert manager.session is None
    assert store.load() is None
    assert len(transport.calls_to(DASHBOARD)) == 1


def test_second_401_does_not_loop(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    transport.add("GET", DASHBOARD, status(401), status(401))
    transport.add("POST", LOGIN_PATH, ok({"access_token": "tok-2"}))

    with pytest.raises(SessionError) as exc:
        manager.authorized_request(ApiRequest("GET", DASHBOARD))

    assert exc.value.reason == "expired"
    assert len(transport.calls_to(DASHBOARD)) == 2
    assert len(transport.calls_to(LOGIN_PATH)) == 2
    assert not manager.is_active
    assert store.load() is None


def test_transport_failure_is_not_retried(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    transport.add("GET", DASHBOARD, TransportFailure("timed out"))

    with pytest.raises(SessionError) as exc:
        manager.authorized_request(ApiRequest("GET", DASHBOARD))

    assert exc.value.reason == "transport"
    assert len(transport.calls_to(DASHBOARD)) == 1
    assert manager.is_active
    assert store.load() == ("tok-1", "admin1", "secret")


def test_request_without_session_makes_no_network_call(store):
    transport = FakeTransport()
    manager = SessionManager(transport, store)

    with pytest.raises(SessionError) as exc:
        manager.authorized_request(ApiRequest("GET", DASHBOARD))

    assert exc.value.reason == "expired"
    assert transport.calls == []


def test_non_401_errors_pass_through_without_reauth(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)
    transport.add("GET", DASHBOARD, status(500, "boom"))

    response = manager.authorized_request(ApiRequest("GET", DASHBOARD))

    assert response.status_code == 500
    assert len(transport.calls_to(LOGIN_PATH)) == 1


def test_restore_adopts_stored_session_without_network(store):
    store.save("tok-9", "admin1", "secret")
    transport = FakeTransport()
    manager = SessionManager(transport, store)

    assert manager.restore() is True
    assert manager.identity == "admin1"
    assert manager.session.access_token == "tok-9"
    assert transport.calls == []


def test_restore_with_empty_store(store):
    manager = SessionManager(FakeTransport(), store)

    assert manager.restore() is False
    assert not manager.is_active


def test_logout_is_idempotent(store):
    transport = FakeTransport()
    manager = _logged_in(store, transport)

    manager.logout()
    manager.logout()

    assert manager.session is None
    assert store.load() is None


def test_session_repr_hides_secrets(store):
    manager = _logged_in(store, FakeTransport())

    text = repr(manager.session)

    assert "tok-1" not in text
    assert "secret" not in text
    assert "admin1" in text
