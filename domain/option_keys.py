from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

OPTION_KEY_PREFIX = "/graph drawing/"


class OptionKey(str, Enum):
    SIBLING_DISTANCE = "sibling distance"
    SIBLING_PRE_SEP = "sibling pre sep"
    SIBLING_POST_SEP = "sibling post sep"
    LEVEL_DISTANCE = "level distance"
    LEVEL_PRE_SEP = "level pre sep"
    LEVEL_POST_SEP = "level post sep"

    @property
    def field_name(self) -> str:
        return self.value.replace(" ", "_")


# "sibling sep" sets both separations of an axis to half its value.
_SHORTHANDS: dict[str, tuple[OptionKey, OptionKey]] = {
    "sibling sep": (OptionKey.SIBLING_PRE_SEP, OptionKey.SIBLING_POST_SEP),
    "level sep": (OptionKey.LEVEL_PRE_SEP, OptionKey.LEVEL_POST_SEP),
}

_KEYS_BY_NAME = {key.value: key for key in OptionKey}


def canonical_option_name(raw: object) -> str:
    name = str(raw).strip().lower()
    if name.startswith(OPTION_KEY_PREFIX):
        name = name[len(OPTION_KEY_PREFIX) :]
    name = " ".join(name.replace("_", " ").replace("-", " ").split())
    if name.startswith("layer "):
        name = "level " + name[len("layer ") :]
    return name


def parse_option_key(raw: object) -> OptionKey:
    if isinstance(raw, OptionKey):
        return raw
    name = canonical_option_name(raw)
    key = _KEYS_BY_NAME.get(name)
    if key is None:
        msg = f"Unknown spacing option: {raw}"
        raise ValueError(msg)
    return key


def _as_number(raw_key: object, value: object) -> float:
    if isinstance(value, bool):
        msg = f"Spacing option {raw_key} must be a number, got {value!r}"
        raise ValueError(msg)
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"Spacing option {raw_key} must be a number, got {value!r}"
        raise ValueError(msg) from exc


def normalize_option_overrides(raw: Mapping[object, object]) -> dict[OptionKey, float]:
    """Turn a user-supplied option mapping into typed overrides.

    Accepts canonical names, snake_case names, the ``/graph drawing/`` prefixed
    form, ``layer`` as a synonym of ``level`` and the ``sibling sep`` /
    ``level sep`` shorthands. Explicit pre/post values win over a shorthand.
    """
    explicit: dict[OptionKey, float] = {}
    expanded: dict[OptionKey, float] = {}
    for raw_key, value in raw.items():
        if isinstance(raw_key, OptionKey):
            explicit[raw_key] = _as_number(raw_key.value, value)
            continue
        name = canonical_option_name(raw_key)
        shorthand = _SHORTHANDS.get(name)
        if shorthand is not None:
            half = _as_number(raw_key, value) / 2
            for key in shorthand:
                expanded[key] = half
            continue
        explicit[parse_option_key(raw_key)] = _as_number(raw_key, value)
    return {**expanded, **explicit}
