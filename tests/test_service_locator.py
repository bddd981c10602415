import pytest

from swordminder.gui.services.service_locator import (
    ServiceAlreadyRegisteredError,
    ServiceLocator,
    ServiceNotFoundError,
    services,
)


def test_register_and_get():
    services.register("config", {"env": "test"})
    assert services.get("config")["env"] == "test"


def test_double_register_raises():
    services.register("x", 1)
    with pytest.raises(ServiceAlreadyRegisteredError):
        services.register("x", 2)
    services.register("x", 2, allow_override=True)
    assert services.get("x") == 2


def test_get_typed_checks_type():
    services.register("n", 5)
    assert services.get_typed("n", int) == 5
    with pytest.raises(TypeError):
        services.get_typed("n", str)


def test_missing_service():
    with pytest.raises(ServiceNotFoundError):
        services.get("missing")
    assert services.try_get("missing", 123) == 123


def test_registered_none_is_found():
    services.register("nothing", None)
    assert services.get("nothing") is None


def test_override_context_restores_state():
    services.register("bus", "real")
    with services.override_context(bus="fake", extra=1):
        assert services.get("bus") == "fake"
        assert services.get("extra") == 1
    assert services.get("bus") == "real"
    assert services.try_get("extra") is None


def test_unregister_and_list_keys():
    local = ServiceLocator()
    local.register("a", 1)
    local.register("b", 2)
    local.unregister("a")
    assert list(local.list_keys()) == ["b"]
    assert services.try_get("b") is None
