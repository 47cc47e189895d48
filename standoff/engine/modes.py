# standoff/engine/modes.py
import logging
import math
from enum import Enum
from typing import Any, Dict, Optional

from .models import DuelConfig
from .rules import clamp
from ..content.balance import BASELINES, CUSTOM_BASE, CUSTOM_FIXED, CUSTOM_OVERRIDES

logger = logging.getLogger(__name__)


class DuelMode(str, Enum):
    NORMAL = "normal"
    TACTICO = "tactico"
    CINEMATIC = "cinematic"
    CUSTOM = "custom"


DEFAULT_MODE = DuelMode.TACTICO


def parse_mode(name: Any, default: DuelMode = DEFAULT_MODE) -> DuelMode:
    """Map a client-supplied mode name onto the fixed mode set."""
    if isinstance(name, DuelMode):
        return name
    if isinstance(name, str):
        try:
            return DuelMode(name.strip().lower())
        except ValueError:
            pass
    if name is not None:
        logger.debug("Unknown duel mode %r, falling back to %s", name, default.value)
    return default


def _coerce(value: Any, cast, lo, hi) -> Optional[Any]:
    # bool is an int subclass but never a meaningful override
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    # clamp first: huge ints must never reach float()
    return cast(clamp(value, lo, hi))


def custom_values(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Only recognised keys survive; each is clamped into its safe range.
    Anything else (unknown keys, strings, NaN...) is dropped silently.
    """
    values: Dict[str, Any] = {}
    if not isinstance(overrides, dict):
        return values
    for key, raw in overrides.items():
        spec = CUSTOM_OVERRIDES.get(key)
        if spec is None:
            continue
        field_name, cast, lo, hi = spec
        value = _coerce(raw, cast, lo, hi)
        if value is not None:
            values[field_name] = value
    return values


def resolve_config(
    mode: Any,
    overrides: Optional[Dict[str, Any]] = None,
    default: DuelMode = DEFAULT_MODE,
) -> DuelConfig:
    """
    Resolve a mode (+ optional custom overrides) into the frozen config a
    room keeps for its whole life.
    """
    selected = parse_mode(mode, default)
    if selected is DuelMode.CUSTOM:
        values = dict(BASELINES[CUSTOM_BASE])
        values.update(CUSTOM_FIXED)
        values.update(custom_values(overrides))
        values["starting_ammo"] = min(values["starting_ammo"], values["max_ammo"])
    else:
        values = dict(BASELINES[selected.value])
    return DuelConfig(mode=selected.value, **values)
