# standoff/engine/rules.py
from .models import DuelConfig, Player

CRIT_STREAK_THRESHOLD = 2
CRIT_STREAK_BONUS = 0.10
CRIT_CAP = 0.50
NERVOUS_LEAD = 2


def clamp(x, lo, hi):
    return max(lo, min(hi, x))


def intimidation_factor(player: Player, opponent: Player, config: DuelConfig) -> float:
    """
    Multiplier for bad luck aimed at `player`: kicks in when the opponent
    leads by enough hp or ammo.
    """
    hp_lead = opponent.hp - player.hp
    ammo_lead = opponent.ammo - player.ammo
    if hp_lead >= config.intimidation_hp_diff or ammo_lead >= config.intimidation_ammo_diff:
        return config.intimidation_multiplier
    return 1.0


def scaled(probability: float, factor: float) -> float:
    return clamp(probability * factor, 0.0, 1.0)


def precise_shot_chance(attacker: Player, config: DuelConfig) -> float:
    base = config.precise_shot_chance
    if attacker.consecutive_hits >= CRIT_STREAK_THRESHOLD:
        base += CRIT_STREAK_BONUS
    return min(CRIT_CAP, base)


def is_clearly_ahead(player: Player, opponent: Player) -> bool:
    return (
        player.ammo - opponent.ammo >= NERVOUS_LEAD
        or player.hp - opponent.hp >= NERVOUS_LEAD
    )
