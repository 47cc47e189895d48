# standoff/content/balance.py
NO_SPECIALS = {
    "turtle_drop_chance": 0.0,
    "precise_shot_chance": 0.0,
    "perfect_block_chance": 0.0,
    "weapon_jam_chance": 0.0,
    "double_reload_chance": 0.0,
    "reload_drop_chance": 0.0,
    "last_stand_chance": 0.0,
    "miracle_dodge_chance": 0.0,
    "ghost_bullet_chance": 0.0,
    "nervous_miss_chance": 0.0,
    "shield_weaken_chance": 0.0,
}

BASELINES = {
    "normal": {
        **NO_SPECIALS,
        "starting_ammo": 1,
        "max_ammo": 3,
        "max_consecutive_blocks": 3,
        "afk_limit": 3,
        "hp_per_player": 3,
        "turn_duration_ms": 10_000,
        "max_turtle_turns_without_attack": 0,
        "intimidation_hp_diff": 2,
        "intimidation_ammo_diff": 2,
        "intimidation_multiplier": 1.0,
    },
    "tactico": {
        "starting_ammo": 1,
        "max_ammo": 3,
        "max_consecutive_blocks": 2,
        "afk_limit": 3,
        "hp_per_player": 3,
        "turn_duration_ms": 10_000,
        "max_turtle_turns_without_attack": 3,
        "turtle_drop_chance": 0.25,
        "precise_shot_chance": 0.10,
        "perfect_block_chance": 0.08,
        "weapon_jam_chance": 0.05,
        "double_reload_chance": 0.10,
        "reload_drop_chance": 0.05,
        "last_stand_chance": 0.15,
        "miracle_dodge_chance": 0.05,
        "ghost_bullet_chance": 0.05,
        "nervous_miss_chance": 0.10,
        "shield_weaken_chance": 0.25,
        "intimidation_hp_diff": 2,
        "intimidation_ammo_diff": 2,
        "intimidation_multiplier": 1.5,
    },
    "cinematic": {
        "starting_ammo": 1,
        "max_ammo": 4,
        "max_consecutive_blocks": 2,
        "afk_limit": 3,
        "hp_per_player": 4,
        "turn_duration_ms": 12_000,
        "max_turtle_turns_without_attack": 3,
        "turtle_drop_chance": 0.30,
        "precise_shot_chance": 0.20,
        "perfect_block_chance": 0.15,
        "weapon_jam_chance": 0.08,
        "double_reload_chance": 0.20,
        "reload_drop_chance": 0.08,
        "last_stand_chance": 0.30,
        "miracle_dodge_chance": 0.10,
        "ghost_bullet_chance": 0.12,
        "nervous_miss_chance": 0.15,
        "shield_weaken_chance": 0.35,
        "intimidation_hp_diff": 2,
        "intimidation_ammo_diff": 2,
        "intimidation_multiplier": 1.5,
    },
}

# custom rooms start from tactico with these pinned
CUSTOM_BASE = "tactico"
CUSTOM_FIXED = {
    "turtle_drop_chance": 0.30,
}

# wire key -> (config field, cast, lo, hi)
CUSTOM_OVERRIDES = {
    "hpPerPlayer": ("hp_per_player", int, 1, 10),
    "maxAmmo": ("max_ammo", int, 1, 12),
    "preciseShotChance": ("precise_shot_chance", float, 0.0, 0.5),
    "maxTurtleTurnsWithoutAttack": ("max_turtle_turns_without_attack", int, 0, 10),
    "afkLimit": ("afk_limit", int, 1, 10),
}
