import sqlite3
from unittest.mock import patch

from use_cases import bootstrap


def test_run_startup_initializes_storage_then_session_state():
    order = []

    with patch("use_cases.bootstrap.auth.init_storage", side_effect=lambda: order.append("init_storage")), patch(
        "use_cases.bootstrap.session_manager.init_session_state",
        side_effect=lambda: order.append("init_session_state"),
    ):
        result = bootstrap.run_startup()

    assert result.status == "CONTINUE"
    assert order == ["init_storage", "init_session_state"]
    assert result.planned_steps == ("init_storage", "init_session_state")


@patch("use_cases.bootstrap.session_manager.init_session_state")
@patch("use_cases.bootstrap.auth.init_storage", side_effect=sqlite3.OperationalError("unable to open database file"))
def test_run_startup_stops_when_storage_fails(_mock_init_storage, mock_init_state):
    result = bootstrap.run_startup()

    assert result.status == "STOP"
    assert "unable to open database file" in result.message
    assert result.planned_steps == ()
    mock_init_state.assert_not_called()


def test_run_startup_creates_database(tmp_path, monkeypatch):
    db_file = tmp_path / "fresh.db"
    monkeypatch.setenv("CREDENTIALS_DB", str(db_file))

    result = bootstrap.run_startup()

    assert result.status == "CONTINUE"
    assert db_file.exists()
    assert bootstrap.session_manager.st.session_state.console_session is None
