# standoff/engine/models.py
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

ATTACK = "attack"
RELOAD = "reload"
BLOCK = "block"
AFK = "afk"

# afk is substituted by the engine, never accepted from a client
CHOOSABLE_ACTIONS = (ATTACK, RELOAD, BLOCK)
PLAYER_IDS = (1, 2)
LOG_CAPACITY = 50

CHANCE_FIELDS = (
    "turtle_drop_chance",
    "precise_shot_chance",
    "perfect_block_chance",
    "weapon_jam_chance",
    "double_reload_chance",
    "reload_drop_chance",
    "last_stand_chance",
    "miracle_dodge_chance",
    "ghost_bullet_chance",
    "nervous_miss_chance",
    "shield_weaken_chance",
)


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class DuelConfig:
    mode: str
    starting_ammo: int
    max_ammo: int
    max_consecutive_blocks: int
    afk_limit: int
    hp_per_player: int
    turn_duration_ms: int
    max_turtle_turns_without_attack: int
    turtle_drop_chance: float
    precise_shot_chance: float
    perfect_block_chance: float
    weapon_jam_chance: float
    double_reload_chance: float
    reload_drop_chance: float
    last_stand_chance: float
    miracle_dodge_chance: float
    ghost_bullet_chance: float
    nervous_miss_chance: float
    shield_weaken_chance: float
    intimidation_hp_diff: int
    intimidation_ammo_diff: int
    intimidation_multiplier: float

    def __post_init__(self):
        for name in CHANCE_FIELDS:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value!r}")

    @property
    def specials_enabled(self) -> bool:
        # a zero precise-shot chance switches every probabilistic branch off
        return self.precise_shot_chance > 0

    def to_dict(self) -> Dict[str, Any]:
        return {camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass
class Player:
    id: int
    name: str
    hp: int
    max_hp: int
    ammo: int
    is_blocking: bool = False
    shield_weakened: bool = False
    last_stand_used: bool = False
    consecutive_blocks: int = 0
    consecutive_hits: int = 0
    turns_without_attack: int = 0
    afk_turns: int = 0
    last_action: Optional[str] = None
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass
class GameState:
    players: List[Player]                  # [player 1, player 2]
    config: DuelConfig
    round: int = 1
    is_round_over: bool = False
    winner_id: Optional[int] = None        # None after a finished round means draw
    log: List[str] = field(default_factory=list)   # newest first
    game_started: bool = False
    pending_actions: Dict[int, Optional[str]] = field(default_factory=lambda: {1: None, 2: None})
    turn_ends_at: Optional[int] = None     # epoch ms, None while paused
    total_turns: int = 0

    def player(self, player_id: int) -> Player:
        return self.players[player_id - 1]

    def opponent(self, player_id: int) -> Player:
        return self.players[2 - player_id]

    def push_log(self, message: str) -> None:
        self.log.insert(0, message)
        del self.log[LOG_CAPACITY:]


@dataclass
class TurnSpecials:
    """Which special-event slots a player has spent during one turn."""
    attacker_fired: bool = False
    defender_fired: bool = False


@dataclass
class TurnOutcome:
    result: str                            # "continue" | "win" | "draw"
    winner_id: Optional[int] = None
    events: List[str] = field(default_factory=list)    # chronological
    specials: Dict[int, TurnSpecials] = field(default_factory=dict)
    auto_filled: List[int] = field(default_factory=list)

    @property
    def round_over(self) -> bool:
        return self.result != "continue"
