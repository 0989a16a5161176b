import pytest

from renaming.config import CONTEXT_WINDOW_SIZE, MAX_BATCH_SIZE, RenameConfig


def test_defaults():
    config = RenameConfig()

    assert config.context_window == CONTEXT_WINDOW_SIZE == 200
    assert config.max_batch == MAX_BATCH_SIZE == 1000
    assert config.parallelism >= 1
    assert config.parallel is False


def test_values_below_one_are_rejected():
    with pytest.raises(ValueError):
        RenameConfig(context_window=0)
    with pytest.raises(ValueError):
        RenameConfig(parallelism=0)


def test_from_env(monkeypatch):
    monkeypatch.setenv("RENAME_CONTEXT_WINDOW", "80")
    monkeypatch.setenv("RENAME_MAX_BATCH", "10")
    monkeypatch.setenv("RENAME_PARALLELISM", "3")
    monkeypatch.setenv("RENAME_PARALLEL", "true")

    assert RenameConfig.from_env() == RenameConfig(
        context_window=80, max_batch=10, parallelism=3, parallel=True
    )


def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("RENAME_MAX_BATCH", "lots")

    with pytest.raises(ValueError):
        RenameConfig.from_env()
