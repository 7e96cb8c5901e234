"""
Tests for generator settings.
"""

from pathlib import Path

import pytest

from entity_repository.utils.config import RepositorySettings, get_settings, path_to_module


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without REPOSITORY_* variables or a .env file."""
    monkeypatch.chdir(tmp_path)
    for name in ("BASE_PATH", "ROOT_NAMESPACE", "MODELS_PATH", "REPOSITORIES_PATH",
                 "INTERFACES_PATH", "CONTROLLERS_PATH"):
        monkeypatch.delenv(f"REPOSITORY_{name}", raising=False)


def test_defaults(clean_env):
    settings = RepositorySettings()

    assert settings.BASE_PATH == "app"
    assert settings.ROOT_NAMESPACE == "app"
    assert settings.INTERFACES_PATH == "interfaces"
    assert settings.CONTROLLERS_PATH == "controllers"
    assert settings.models_module == "app.models"
    assert settings.repositories_module == "app.repositories"
    assert settings.repositories_dir == Path("app") / "repositories"


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("REPOSITORY_BASE_PATH", "src/shop")
    monkeypatch.setenv("REPOSITORY_ROOT_NAMESPACE", "shop")
    monkeypatch.setenv("REPOSITORY_REPOSITORIES_PATH", "http/repositories")

    settings = RepositorySettings()

    assert settings.repositories_dir == Path("src/shop/http/repositories")
    assert settings.repositories_module == "shop.http.repositories"


def test_env_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text("REPOSITORY_MODELS_PATH=domain/models\nUNRELATED=1\n")

    assert RepositorySettings().models_module == "app.domain.models"


def test_get_settings_is_cached(clean_env):
    assert get_settings() is get_settings()


@pytest.mark.parametrize("path, expected", [
    ("models", "models"),
    ("http/repositories", "http.repositories"),
    ("Http\\Repositories", "Http.Repositories"),
    ("./models/", "models"),
    ("", ""),
])
def test_path_to_module(path, expected):
    assert path_to_module(path) == expected


def test_empty_namespace(clean_env):
    settings = RepositorySettings(ROOT_NAMESPACE="")
    assert settings.models_module == "models"
