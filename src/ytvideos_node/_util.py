from __future__ import annotations

import inspect, functools, re, types

from typing import Iterable, Any, get_origin, get_args, Union, get_type_hints, Mapping

__all__ = [
    "_raise_invalid_argument",
    "runtime_typecheck",
    "_prune_none",
    "_as_int",
    "_iso_duration_seconds",
]

def _raise_invalid_argument(param: str, value: str, allowed: Iterable[str]) -> None:
    allowed_set = sorted(set(allowed))
    bullets = "\n  • " + "\n  • ".join(allowed_set)
    raise ValueError(f"{param}={value!r} is invalid. Allowed values:{bullets}")

def _is_instance(val: Any, anno: Any) -> bool:

    origin = get_origin(anno)

    if origin is None:
        return anno is Any or isinstance(val, anno)

    if origin is Union or origin is types.UnionType:
        return any(_is_instance(val, arg) for arg in get_args(anno))

    return isinstance(val, origin)

def runtime_typecheck(fn):

    sig   = inspect.signature(fn)
    hints = get_type_hints(fn)

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        bound = sig.bind_partial(*args, **kwargs)
        for name, value in bound.arguments.items():
            anno = hints.get(name)
            if anno and not _is_instance(value, anno):
                raise TypeError(
                    f"{fn.__name__}() argument '{name}' "
                    f"expects {anno}, got {type(value).__name__}"
                )
        return fn(*args, **kwargs)

    return wrapper

def _prune_none(mapping: Mapping[str, object]) -> dict[str, object]:
    """Return a new dict without the None-valued keys."""
    return {k: v for k, v in mapping.items() if v is not None}

def _as_int(value: Any) -> int | None:
    """API counters arrive as strings; missing or hidden ones become ``None``."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

_ISO8601_DUR_RE = re.compile(
    r"^P"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T"
    r"(?:(?P<hours>\d+)H)?"
    r"(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+)S)?"
    r")?$"
)

def _iso_duration_seconds(dur: str | None) -> int | None:
    """``"PT1H2M3S"`` → ``3723``; ``None`` for absent or unparsable values."""
    m = _ISO8601_DUR_RE.match(dur or "")
    if not dur or not m:
        return None
    days = int(m.group("days") or 0)
    hours = int(m.group("hours") or 0)
    minutes = int(m.group("minutes") or 0)
    seconds = int(m.group("seconds") or 0)
    return (((days * 24 + hours) * 60 + minutes) * 60) + seconds
