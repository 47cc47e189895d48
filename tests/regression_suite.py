"""Automated regression suite for Standoff turn resolution.

Drives GameState + submit_action + resolve_turn directly, no sockets or
timers involved.
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path
from typing import Iterable, List, Tuple

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from standoff.engine import resolver  # noqa: E402
from standoff.engine.models import GameState, TurnOutcome  # noqa: E402
from standoff.engine.modes import resolve_config  # noqa: E402
from standoff.engine.rounds import new_game_state  # noqa: E402

_SELECTING = 1  # any non-null deadline means actions are accepted


class FixedRng:
    """Stand-in for random.Random: hands out scripted rolls, then `default`."""

    def __init__(self, *values: float, default: float = 0.99):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


NEVER = FixedRng(default=0.999999)


def make_state(mode: str = "normal", p1=None, p2=None, **config_overrides) -> GameState:
    config = resolve_config(mode)
    if config_overrides:
        config = dataclasses.replace(config, **config_overrides)
    state = new_game_state(config, "Alice")
    state.player(2).name = "Bob"
    state.game_started = True
    state.turn_ends_at = _SELECTING
    for player, fields in ((state.player(1), p1), (state.player(2), p2)):
        for key, value in (fields or {}).items():
            setattr(player, key, value)
    return state


def _assert_invariants(state: GameState, prior_turns: int) -> None:
    cfg = state.config
    assert state.total_turns == prior_turns + 1, "resolve_turn should count exactly one turn"
    assert len(state.log) <= 50, "log ring should never grow past its capacity"
    for player in state.players:
        assert 0 <= player.hp <= player.max_hp, f"hp out of range for {player.name}"
        assert 0 <= player.ammo <= cfg.max_ammo, f"ammo out of range for {player.name}"
        assert player.consecutive_blocks <= cfg.max_consecutive_blocks, f"block streak over cap for {player.name}"


def submit_turn(state: GameState, p1_action: str, p2_action: str, r=None) -> TurnOutcome:
    prior_turns = state.total_turns
    resolver.submit_action(state, 1, p1_action)
    resolver.submit_action(state, 2, p2_action)
    outcome = resolver.resolve_turn(state, r or NEVER)
    _assert_invariants(state, prior_turns)
    if not outcome.round_over:
        # what the server does when the next selection window opens
        state.pending_actions = {1: None, 2: None}
        state.turn_ends_at = _SELECTING
    return outcome


def run_turns(state: GameState, pairs: Iterable[Tuple[str, str]], r=None) -> List[TurnOutcome]:
    return [submit_turn(state, a1, a2, r) for a1, a2 in pairs]


def lines_with(state: GameState, text: str) -> List[str]:
    return [line for line in state.log if text in line]


def scenario_attack_into_block() -> bool:
    state = make_state("normal")
    bob_hp = state.player(2).hp

    outcome = submit_turn(state, "attack", "block")

    assert state.player(2).hp == bob_hp, "A plain block should absorb the shot"
    assert state.player(1).ammo == 0, "The blocked shot still spends ammo"
    assert lines_with(state, "blocks"), "Expected a 'blocks' narration line"
    assert outcome.result == "continue"
    return True


def scenario_both_attack_without_ammo() -> bool:
    state = make_state("normal", p1={"ammo": 0}, p2={"ammo": 0})

    outcome = submit_turn(state, "attack", "attack")

    for player in state.players:
        assert player.hp == player.max_hp and player.ammo == 0
    assert len(lines_with(state, "no ammo")) == 2, "Each empty trigger pull should be narrated"
    assert outcome.result == "continue"
    return True


def scenario_simultaneous_lethal_shots_draw() -> bool:
    state = make_state("normal", p1={"hp": 1, "score": 2}, p2={"hp": 1, "score": 1})

    outcome = submit_turn(state, "attack", "attack")

    assert outcome.result == "draw"
    assert state.is_round_over and state.winner_id is None
    assert [p.hp for p in state.players] == [0, 0]
    assert [p.score for p in state.players] == [2, 1], "A draw must not change the score"
    return True


def scenario_lethal_shot_awards_round() -> bool:
    state = make_state("normal", p2={"hp": 1})

    outcome = submit_turn(state, "attack", "reload")

    assert outcome.result == "win" and outcome.winner_id == 1
    assert state.winner_id == 1 and state.player(1).score == 1
    assert state.player(2).score == 0
    return True


def scenario_block_streak_tires_out() -> bool:
    state = make_state("normal", max_consecutive_blocks=2)
    run_turns(state, [("reload", "block"), ("reload", "block")])
    assert state.player(2).is_blocking and state.player(2).consecutive_blocks == 2

    submit_turn(state, "attack", "block")

    bob = state.player(2)
    assert bob.consecutive_blocks == 2, "Streak is clamped to the cap"
    assert not bob.is_blocking, "Block over the cap must be refused"
    assert bob.hp == bob.max_hp - 1, "The unguarded shot lands"
    return True


def scenario_precise_shot_pierces_block() -> bool:
    state = make_state("tactico", weapon_jam_chance=0.0, nervous_miss_chance=0.0)

    submit_turn(state, "attack", "block", FixedRng(default=0.0))

    assert state.player(2).hp == state.player(2).max_hp - 1, "A precise shot ignores the guard"
    assert lines_with(state, "precise shot")
    return True


def scenario_perfect_block_deflects() -> bool:
    state = make_state("tactico", weapon_jam_chance=0.0, nervous_miss_chance=0.0)
    # precise shot misses, perfect block lands, attacker fails to dodge
    r = FixedRng(0.99, 0.0, 0.99)

    submit_turn(state, "attack", "block", r)

    alice, bob = state.players
    assert bob.hp == bob.max_hp
    assert alice.hp == alice.max_hp - 1, "The deflected bullet hits the shooter"
    assert alice.ammo == 0 and alice.consecutive_hits == 0
    assert lines_with(state, "perfect block")
    return True


def scenario_cracked_shield_gives_way() -> bool:
    state = make_state("tactico", weapon_jam_chance=0.0, nervous_miss_chance=0.0)
    # no precise shot, no perfect block, shield cracks
    submit_turn(state, "attack", "block", FixedRng(0.99, 0.99, 0.0))
    assert state.player(2).shield_weakened

    submit_turn(state, "reload", "block", FixedRng(0.0, 0.99))

    bob = state.player(2)
    assert not bob.shield_weakened, "A failed block consumes the cracked shield"
    assert not bob.is_blocking
    assert lines_with(state, "gives way")
    return True


def scenario_one_special_per_role() -> bool:
    state = make_state("tactico")

    outcome = submit_turn(state, "attack", "attack", FixedRng(default=0.0))

    # every roll succeeds, so each jams and nothing else may fire for them
    for player in state.players:
        assert player.ammo == 1, "A jam keeps the round in the chamber"
        assert player.hp == player.max_hp
        assert outcome.specials[player.id].attacker_fired
    assert len(lines_with(state, "jams")) == 2
    assert not lines_with(state, "precise shot")
    return True


def scenario_last_stand_keeps_one_hp() -> bool:
    state = make_state(
        "tactico",
        weapon_jam_chance=0.0,
        nervous_miss_chance=0.0,
        p2={"hp": 1, "ammo": 0},
    )
    # no dodge, then last stand succeeds
    outcome = submit_turn(state, "attack", "attack", FixedRng(0.99, 0.0))

    bob = state.player(2)
    assert bob.hp == 1 and bob.last_stand_used
    assert outcome.result == "continue"
    assert state.player(1).consecutive_hits == 1
    return True


def scenario_miracle_dodge_cancels_damage() -> bool:
    state = make_state("tactico", weapon_jam_chance=0.0, nervous_miss_chance=0.0)

    submit_turn(state, "attack", "reload", FixedRng(0.99, 0.99, 0.0))

    alice, bob = state.players
    assert bob.hp == bob.max_hp
    assert alice.ammo == 0 and alice.consecutive_hits == 0
    assert lines_with(state, "dodges")
    return True


def scenario_turtle_penalty_drops_ammo() -> bool:
    state = make_state(
        "tactico",
        double_reload_chance=0.0,
        reload_drop_chance=0.0,
        turtle_drop_chance=1.0,
    )

    run_turns(state, [("reload", "reload")] * 3, FixedRng(default=0.5))

    for player in state.players:
        assert player.ammo == state.config.max_ammo - 1, "Third idle turn costs a round"
        assert player.turns_without_attack == 0
    assert len(lines_with(state, "hiding too long")) == 2
    return True


def scenario_turtle_near_miss_keeps_streak() -> bool:
    state = make_state("tactico", double_reload_chance=0.0, reload_drop_chance=0.0, turtle_drop_chance=0.0)

    run_turns(state, [("reload", "reload")] * 4)

    for player in state.players:
        assert player.turns_without_attack == 4, "Streak survives a failed drop roll"
        assert player.ammo == state.config.max_ammo
    assert lines_with(state, "hold on to their ammo")
    return True


SCENARIOS = [
    scenario_attack_into_block,
    scenario_both_attack_without_ammo,
    scenario_simultaneous_lethal_shots_draw,
    scenario_lethal_shot_awards_round,
    scenario_block_streak_tires_out,
    scenario_precise_shot_pierces_block,
    scenario_perfect_block_deflects,
    scenario_cracked_shield_gives_way,
    scenario_one_special_per_role,
    scenario_last_stand_keeps_one_hp,
    scenario_miracle_dodge_cancels_damage,
    scenario_turtle_penalty_drops_ammo,
    scenario_turtle_near_miss_keeps_streak,
]
