"""
Configuration settings for the repository generator and lookup.

Values are read from ``REPOSITORY_*`` environment variables or a ``.env``
file in the working directory.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def path_to_module(path: str) -> str:
    """Convert a relative filesystem path to a dotted module path."""
    parts = [part for part in path.replace("\\", "/").split("/") if part and part != "."]
    return ".".join(parts)


class RepositorySettings(BaseSettings):
    """Generator settings."""

    # Directory holding the application package, relative to the working directory
    BASE_PATH: str = "app"
    # Import name of the application package
    ROOT_NAMESPACE: str = "app"

    # Sub-paths, relative to BASE_PATH
    MODELS_PATH: str = "models"
    REPOSITORIES_PATH: str = "repositories"
    INTERFACES_PATH: str = "interfaces"
    CONTROLLERS_PATH: str = "controllers"

    model_config = SettingsConfigDict(
        env_prefix="REPOSITORY_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def repositories_dir(self) -> Path:
        """Directory generated repositories are written to."""
        return Path(self.BASE_PATH) / self.REPOSITORIES_PATH

    def module_for(self, path: str) -> str:
        """Dotted module name for a sub-path of the application package."""
        namespace = self.ROOT_NAMESPACE.strip(".\\")
        sub_module = path_to_module(path)
        return ".".join(part for part in (namespace, sub_module) if part)

    @property
    def models_module(self) -> str:
        return self.module_for(self.MODELS_PATH)

    @property
    def repositories_module(self) -> str:
        return self.module_for(self.REPOSITORIES_PATH)


@lru_cache()
def get_settings() -> RepositorySettings:
    """Get cached settings instance."""
    return RepositorySettings()
