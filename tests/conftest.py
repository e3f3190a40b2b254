import os
import sys

import pytest
import streamlit as st

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from infrastructure.repositories.sqlite_credential_repository import SQLiteCredentialRepository  # noqa: E402

BROWSER_KEY = "k" * 43


@pytest.fixture(autouse=True)
def _isolated_state(tmp_path, monkeypatch):
    # Nothing under test may touch the real admin_session.db
    monkeypatch.setenv("CREDENTIALS_DB", str(tmp_path / "admin_session.db"))
    st.session_state.clear()
    yield
    st.session_state.clear()


@pytest.fixture
def store(tmp_path):
    repo = SQLiteCredentialRepository(str(tmp_path / "creds.db"), "http://localhost:3000", BROWSER_KEY)
    repo.init_db()
    return repo
