from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Sequence, runtime_checkable

__all__ = ["ParameterResolver", "NodeParameters", "ItemFieldParameters"]

_MISSING = object()


@runtime_checkable
class ParameterResolver(Protocol):
    """Host-side parameter lookup, evaluated per input item."""

    def get_parameter(self, name: str, item_index: int, default: Any = None) -> Any:
        ...


class NodeParameters:
    """Node-level parameter values shared by every item.

    A callable value is an expression: it is called with the item's JSON
    and its result is the parameter for that item.

    Examples:
         params = NodeParameters(
             {"operation": "get_video", "video_id": lambda item: item["id"]},
             items,
         )
    """

    def __init__(self, parameters: Mapping[str, Any | Callable[[Mapping[str, Any]], Any]],
                 items: Sequence[Mapping[str, Any]] = ()):
        self._parameters = dict(parameters)
        self._items = items

    def get_parameter(self, name: str, item_index: int, default: Any = None) -> Any:
        value = self._parameters.get(name, _MISSING)
        if value is _MISSING:
            return default
        if callable(value):
            return value(self._items[item_index])
        return value


class ItemFieldParameters:
    """Read every parameter from the item's own fields.

    Fields the item does not carry fall back to *fallback* (another
    resolver, typically :class:`NodeParameters`) and then to the default.
    """

    def __init__(self, items: Sequence[Mapping[str, Any]], fallback: ParameterResolver | None = None):
        self._items = items
        self._fallback = fallback

    def get_parameter(self, name: str, item_index: int, default: Any = None) -> Any:
        item = self._items[item_index]
        if name in item:
            return item[name]
        if self._fallback is not None:
            return self._fallback.get_parameter(name, item_index, default)
        return default
