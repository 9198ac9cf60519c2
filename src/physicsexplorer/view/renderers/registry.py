from __future__ import annotations

from physicsexplorer.view.renderers.base import TopicRenderer

_REGISTRY: dict[str, type[TopicRenderer]] = {}


def register_renderer(cls: type[TopicRenderer]) -> type[TopicRenderer]:
    """Class decorator to register a renderer by its KEY."""
    key = getattr(cls, "KEY", None)
    if not key or key == TopicRenderer.KEY:
        raise ValueError(f"{cls.__name__} must define KEY")
    _REGISTRY[key] = cls
    return cls


def create_renderer(key: str) -> TopicRenderer:
    cls = _REGISTRY.get(key)
    if not cls:
        raise KeyError(f"No renderer registered for key '{key}'")
    return cls()


def list_keys() -> list[str]:
    return list(_REGISTRY.keys())
