import pytest

from slide_restore.domain.common.errors import ValidationError
from slide_restore.infrastructure.config.json_config_repository import JsonConfigRepository
from slide_restore.infrastructure.config.key_storage_service import ENV_KEY_NAMES, ConfigKeyStorage


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ENV_KEY_NAMES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def repo(tmp_path, logger):
    return JsonConfigRepository(str(tmp_path / "config.json"), logger)


@pytest.fixture
def storage(repo, logger):
    return ConfigKeyStorage(repo, logger)


def test_empty_by_default(storage):
    assert storage.get() is None
    assert not storage.has_key()


def test_set_persists_across_instances(storage, repo, logger, tmp_path):
    assert storage.set("  AIzaSyExampleKey123  ").is_success

    reopened = ConfigKeyStorage(JsonConfigRepository(str(tmp_path / "config.json"), logger), logger)
    assert reopened.get() == "AIzaSyExampleKey123"
    assert reopened.has_key()


def test_short_key_is_rejected(storage):
    result = storage.set("short")

    assert result.is_failure
    assert isinstance(result.error, ValidationError)
    assert storage.get() is None


def test_key_of_exactly_minimum_length(storage):
    # Accepted for storage but not considered usable
    assert storage.set("0123456789").is_success
    assert storage.get() == "0123456789"
    assert not storage.has_key()


def test_clear_removes_the_stored_key(storage, repo):
    storage.set("AIzaSyExampleKey123")
    assert storage.clear().value is True
    assert "api_key" not in repo.load_config().value
    assert storage.get() is None


def test_environment_fallback(storage, monkeypatch):
    monkeypatch.setenv("API_KEY", "env-key-0123456789")
    assert storage.get() == "env-key-0123456789"
    assert storage.has_key()

    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key-0123456789")
    assert storage.get() == "gemini-key-0123456789"


def test_stored_key_wins_over_environment(storage, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key-0123456789")
    storage.set("stored-key-0123456789")

    assert storage.get() == "stored-key-0123456789"
