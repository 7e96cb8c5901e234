"""
make:repository command.

Generates a repository module for an existing model, e.g.::

    entity-repository make:repository User

writes ``app/repositories/user_repository.py`` containing a
``UserRepository`` bound to ``app.models.User`` and registered in the
default repository registry.
"""

import argparse
import importlib
import keyword
import re
import sys
from pathlib import Path
from typing import Optional, Tuple, Type

from entity_repository.exceptions import ModelNotFoundError, RepositoryAlreadyExistsError, RepositoryError
from entity_repository.utils.config import RepositorySettings, get_settings
from entity_repository.utils.logger import get_logger

logger = get_logger(__name__)

TEMPLATE = '''"""
Repository for {model} model operations.

This module provides database access methods for the {model} model. It
extends the base Repository class, inheriting the common CRUD operations
while allowing custom query logic for {model}.
"""

from sqlalchemy.orm import Session

from entity_repository import Repository, register_repository
from {model_module} import {model}


@register_repository({model})
class {model}Repository(Repository[{model}]):
    """
    Repository for {model} database operations.

    Inherited methods:
        find_one_by(criteria) -> Optional[{model}]
        get_by_id(id) -> Optional[{model}]
        find_by(filters, orders) -> List[{model}]
        create(data) -> {model}
        update(id, data) -> Optional[{model}]
        delete(id) -> None
    """

    def __init__(self, db: Session):
        """
        Initialize the repository with a database session.

        Args:
            db (Session): SQLAlchemy database session
        """
        super().__init__(db, {model})

    # Add your repository logic here
'''


def snake_case(name: str) -> str:
    """Convert ``CamelCase`` to ``snake_case``."""
    name = re.sub(r'(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name).lower()


def _import_optional(module_name: str):
    """Import a module, returning None only if that module itself is missing."""
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        if e.name and (module_name == e.name or module_name.startswith(e.name + ".")):
            return None
        raise


def resolve_model(models_module: str, model_name: str) -> Tuple[Type, str]:
    """
    Find the model class ``model_name``.

    The class is looked up as an attribute of ``models_module`` first, then
    in its ``<snake_case name>`` submodule.

    Returns:
        Tuple of the model class and the module to import it from

    Raises:
        ModelNotFoundError: If no such class exists
    """
    importlib.invalidate_caches()
    for module_name in (models_module, f"{models_module}.{snake_case(model_name)}"):
        module = _import_optional(module_name)
        model = getattr(module, model_name, None) if module is not None else None
        if isinstance(model, type):
            return model, module_name
    raise ModelNotFoundError(f"Model '{models_module}.{model_name}' does not exist.")


def get_content(model_name: str, model_module: str) -> str:
    """
    Generate the content of the repository module.

    Args:
        model_name: Name of the model class
        model_module: Module the model is imported from

    Returns:
        str: Python source of the repository module
    """
    return TEMPLATE.format(model=model_name, model_module=model_module)


class MakeRepositoryCommand:
    """Create a new repository module for the specified model."""

    name = "make:repository"
    help = "Create a new repository file for the specified model"

    def __init__(self, settings: Optional[RepositorySettings] = None):
        self.settings = settings

    def configure(self, parser: argparse.ArgumentParser) -> None:
        """Add the command's arguments to ``parser``."""
        parser.add_argument("name", help="Model class name, e.g. User")
        parser.add_argument(
            "--base-path",
            help="Application directory (default: REPOSITORY_BASE_PATH or 'app')"
        )
        parser.add_argument(
            "--namespace",
            help="Application package import name (default: REPOSITORY_ROOT_NAMESPACE or 'app')"
        )
        parser.add_argument(
            "--app-dir",
            default=".",
            help="Directory to import the application package from (default: current directory)"
        )
        parser.add_argument(
            "--force-dir-init",
            action="store_true",
            help="Add a missing __init__.py to an existing repositories directory"
        )

    def handle(self, args: argparse.Namespace) -> int:
        """
        Execute the command.

        Returns:
            int: Exit status, 0 on success and 1 on error
        """
        settings = self.settings or get_settings()
        overrides = {}
        if getattr(args, "base_path", None):
            overrides["BASE_PATH"] = args.base_path
        if getattr(args, "namespace", None):
            overrides["ROOT_NAMESPACE"] = args.namespace
        if overrides:
            settings = settings.model_copy(update=overrides)

        try:
            file_path = self.generate(
                args.name,
                settings,
                getattr(args, "app_dir", None),
                force_dir_init=getattr(args, "force_dir_init", False),
            )
        except (RepositoryError, OSError) as e:
            print(str(e), file=sys.stderr)
            return 1

        print(f"Repository created successfully: {file_path}")
        return 0

    def generate(
        self,
        model_name: str,
        settings: RepositorySettings,
        app_dir: Optional[str] = None,
        force_dir_init: bool = False,
    ) -> Path:
        """
        Write the repository module for ``model_name``.

        A repositories directory created here gets an empty ``__init__.py``.
        An existing directory is left alone unless ``force_dir_init`` is set,
        in which case a missing ``__init__.py`` is added.

        Returns:
            Path: The written file

        Raises:
            ModelNotFoundError: If the model class does not exist
            RepositoryAlreadyExistsError: If the destination file exists
            OSError: If the directory or file cannot be written
        """
        if not model_name.isidentifier() or keyword.iskeyword(model_name):
            raise ModelNotFoundError(f"Model '{model_name}' is not a valid class name.")

        if app_dir:
            app_dir = str(Path(app_dir).resolve())
            if app_dir not in sys.path:
                sys.path.insert(0, app_dir)

        _, model_module = resolve_model(settings.models_module, model_name)

        directory = settings.repositories_dir
        if app_dir and not directory.is_absolute():
            directory = Path(app_dir) / directory
        file_path = directory / f"{snake_case(model_name)}_repository.py"

        if not directory.is_dir():
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
            (directory / "__init__.py").touch()
            logger.info(f"Created repositories directory: {directory}")
        elif force_dir_init and not (directory / "__init__.py").exists():
            (directory / "__init__.py").touch()
            logger.info(f"Added __init__.py to {directory}")

        if file_path.exists():
            raise RepositoryAlreadyExistsError(f"Repository '{file_path}' already exists.")

        # 'x' mode: never overwrite, even if the file appeared after the check
        with open(file_path, "x", encoding="utf-8") as f:
            f.write(get_content(model_name, model_module))

        logger.info(f"Generated {model_name}Repository at {file_path}")
        return file_path
