import pytest

from planifia.domain.User import User
from planifia.infra.Record_Store import RecordStore
from planifia.tests.fakes import FakeResolver, RecordingBus


@pytest.fixture
def store(tmp_path):
    return RecordStore(tmp_path)


@pytest.fixture
def user():
    return User.for_email("ana@example.com")


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def bus():
    return RecordingBus()
