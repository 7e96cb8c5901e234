"""
Console commands provided by the package.
"""

from entity_repository.commands.make_repository import MakeRepositoryCommand

# Commands exposed by the entity-repository CLI
COMMANDS = [MakeRepositoryCommand]

__all__ = ['COMMANDS', 'MakeRepositoryCommand']
