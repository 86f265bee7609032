from unittest.mock import MagicMock, patch

import pytest
import streamlit as st

from infrastructure.api.backend_client import BackendClient
from infrastructure.storage.local_storage import MemoryStorage
from services.session_store import SessionStore


class FakeSessionState(dict):
    """Dict with attribute access, standing in for st.session_state outside `streamlit run`."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError as e:
            raise AttributeError(key) from e

    def __setattr__(self, key, value):
        self[key] = value


@pytest.fixture
def session_state():
    state = FakeSessionState()
    with patch.object(st, "session_state", state):
        yield state


@pytest.fixture
def client():
    return MagicMock(spec=BackendClient)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(client, storage):
    return SessionStore(client, storage)
