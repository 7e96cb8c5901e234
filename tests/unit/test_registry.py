"""
Tests for the repository registry.
"""

import uuid

import pytest

from entity_repository import RepositoryNotFoundError, RepositoryRegistry, default_registry, register_repository
from entity_repository.repositories.registry import entity_key, qualified_key
from tests.fixtures.models import Account, Note
from tests.fixtures.repositories import AccountRepository, NoteRepository


@pytest.mark.parametrize("entity, expected", [
    (Account, "Account"),
    ("Account", "Account"),
    ("app.models.Account", "Account"),
    (Account(name="x"), "Account"),
])
def test_entity_key(entity, expected):
    assert entity_key(entity) == expected


@pytest.mark.parametrize("entity, expected", [
    (Account, "tests.fixtures.models.Account"),
    (Account(name="x"), "tests.fixtures.models.Account"),
    ("Account", "Account"),
    ("app.models.Account", "app.models.Account"),
])
def test_qualified_key(entity, expected):
    assert qualified_key(entity) == expected


def _same_named_models():
    billing = type("Invoice", (), {"__module__": "billing.models"})
    shop = type("Invoice", (), {"__module__": "shop.models"})
    return billing, shop


def test_same_class_name_in_different_modules():
    billing, shop = _same_named_models()
    registry = RepositoryRegistry()
    registry.register(billing, lambda db: ("billing", db))
    registry.register(shop, lambda db: ("shop", db))

    assert registry.resolve(billing, "s") == ("billing", "s")
    assert registry.resolve(shop, "s") == ("shop", "s")
    assert registry.resolve("shop.models.Invoice", "s") == ("shop", "s")
    assert registry.registered() == ["billing.models.Invoice", "shop.models.Invoice"]

    with pytest.raises(RepositoryNotFoundError) as exc:
        registry.resolve("Invoice", "s")
    assert "ambiguous" in str(exc.value)

    registry.unregister(billing)
    assert registry.resolve("Invoice", "s") == ("shop", "s")


def test_class_does_not_fall_back_to_other_module():
    billing, shop = _same_named_models()
    registry = RepositoryRegistry()
    registry.register(billing, lambda db: "billing")

    assert not registry.is_registered(shop)
    with pytest.raises(RepositoryNotFoundError) as exc:
        registry.resolve(shop, None)
    assert str(exc.value) == "Repository 'InvoiceRepository' for entity 'Invoice' not found."


def test_resolve_by_class_and_name(registry, test_db):
    by_class = registry.resolve(Account, test_db)
    by_name = registry.resolve("Account", test_db)

    assert isinstance(by_class, AccountRepository)
    assert isinstance(by_name, AccountRepository)
    assert by_class is not by_name
    assert by_class.db is test_db


def test_resolve_unregistered():
    with pytest.raises(RepositoryNotFoundError) as exc:
        RepositoryRegistry().resolve("Invoice", None)
    assert str(exc.value) == "Repository 'InvoiceRepository' for entity 'Invoice' not found."


def test_resolve_with_factory_function(test_db):
    registry = RepositoryRegistry()
    calls = []

    def factory(db):
        calls.append(db)
        return NoteRepository(db)

    registry.register(Note, factory)

    assert isinstance(registry.resolve(Note, test_db), NoteRepository)
    assert calls == [test_db]


def test_register_for_decorator():
    registry = RepositoryRegistry()

    @registry.register_for(Account)
    class CustomAccountRepository(AccountRepository):
        pass

    assert registry.is_registered("Account")
    assert registry.resolve(Account, None).__class__ is CustomAccountRepository


def test_reregister_replaces(registry, test_db):
    registry.register(Account, NoteRepository)
    assert isinstance(registry.resolve(Account, test_db), NoteRepository)


def test_unregister_and_registered(registry):
    assert registry.registered() == ["Account", "Note"]

    registry.unregister(Note)
    registry.unregister("Missing")

    assert registry.registered() == ["Account"]
    assert not registry.is_registered(Note)


def test_clear(registry):
    registry.clear()
    assert registry.registered() == []


def test_register_repository_uses_default_registry():
    @register_repository("Widget")
    class WidgetRepository(AccountRepository):
        pass

    try:
        assert default_registry.is_registered("Widget")
    finally:
        default_registry.unregister("Widget")


def test_autodiscover(tmp_path, monkeypatch):
    package = f"discover_{uuid.uuid4().hex[:8]}"
    package_dir = tmp_path / package
    package_dir.mkdir()
    (package_dir / "__init__.py").write_text("")
    (package_dir / "gadget_repository.py").write_text(
        "from entity_repository import register_repository\n"
        "\n"
        "\n"
        "@register_repository('Gadget')\n"
        "class GadgetRepository:\n"
        "    def __init__(self, db):\n"
        "        self.db = db\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    try:
        imported = default_registry.autodiscover(package)

        assert imported == [f"{package}.gadget_repository"]
        assert default_registry.resolve("Gadget", "session").db == "session"
    finally:
        default_registry.unregister("Gadget")
