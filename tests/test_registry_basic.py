import pytest

from grid_stress.errors import ConfigError
from grid_stress.registry import ModeRegistry, mode_names, resolve_mode
from grid_stress.tasks.base import TaskContext
from grid_stress.tasks.runner import available_modes, run_mode


def test_registry_register_resolve_names() -> None:
    registry = ModeRegistry()

    def stress_mode(settings, *, context):
        return None

    registry.register("Stress", stress_mode)

    assert registry.resolve("Stress") is stress_mode
    assert registry.resolve(" Stress ") is stress_mode
    assert registry.names() == ["Stress"]
    assert "Stress" in registry
    assert list(registry) == ["Stress"]


def test_registry_duplicate_requires_overwrite() -> None:
    registry = ModeRegistry()
    registry.register("Stress", print)

    with pytest.raises(ValueError):
        registry.register("Stress", repr)

    registry.register("Stress", repr, overwrite=True)
    assert registry.resolve("Stress") is repr


def test_registry_rejects_blank_names() -> None:
    registry = ModeRegistry()

    with pytest.raises(TypeError):
        registry.register("  ", print)


def test_unknown_mode_lists_available_modes() -> None:
    registry = ModeRegistry()
    registry.register("Test", print)
    registry.register("Stress", print)

    with pytest.raises(ConfigError) as exc:
        resolve_mode("Explode", registry=registry)

    message = str(exc.value)
    assert "'Explode' is not a known mode" in message
    assert "Available: Stress, Test." in message


def test_run_mode_uses_custom_registry() -> None:
    registry = ModeRegistry()
    calls = []

    def echo_mode(settings, *, context):
        calls.append(dict(settings))
        return "done"

    registry.register("Echo", echo_mode)

    assert run_mode("Echo", {"a": "1"}, context=TaskContext(), registry=registry) == "done"
    assert calls == [{"a": "1"}]
    assert available_modes(registry=registry) == ["Echo"]
    assert mode_names(registry=registry) == ["Echo"]
