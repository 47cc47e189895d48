# standoff/engine/resolver.py
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .dice import chance
from .models import (
    AFK,
    ATTACK,
    BLOCK,
    CHOOSABLE_ACTIONS,
    PLAYER_IDS,
    RELOAD,
    DuelConfig,
    GameState,
    Player,
    TurnOutcome,
    TurnSpecials,
)
from .rounds import evaluate_round
from .rules import intimidation_factor, is_clearly_ahead, precise_shot_chance, scaled
from ..exceptions import InvalidState

AUTO_ATTACK_CUTOFF = 0.34
AUTO_RELOAD_CUTOFF = 0.67


def submit_action(state: GameState, player_id: int, action: str) -> None:
    if action not in CHOOSABLE_ACTIONS:
        raise InvalidState(f"Unknown action {action!r}", {"player_id": player_id})
    if state.is_round_over:
        raise InvalidState("Round is already over", {"player_id": player_id})
    if not state.game_started or state.turn_ends_at is None:
        raise InvalidState("Not accepting actions right now", {"player_id": player_id})
    if state.pending_actions.get(player_id) is not None:
        raise InvalidState("Action already submitted this turn", {"player_id": player_id})
    state.pending_actions[player_id] = action
    state.player(player_id).afk_turns = 0


def ready_to_resolve(state: GameState) -> bool:
    return all(state.pending_actions.get(pid) for pid in PLAYER_IDS)


def random_action(player: Player, r: random.Random) -> str:
    if player.ammo <= 0:
        return RELOAD if r.random() < 0.5 else BLOCK
    roll = r.random()
    if roll < AUTO_ATTACK_CUTOFF:
        return ATTACK
    if roll < AUTO_RELOAD_CUTOFF:
        return RELOAD
    return BLOCK


def auto_fill(state: GameState, r: random.Random) -> List[int]:
    """
    Fill every empty slot after the clock ran out. A player whose missed-turn
    count already reached afk_limit is forced to sit the turn out.
    """
    filled = []
    for player in state.players:
        if state.pending_actions.get(player.id):
            continue
        if player.afk_turns >= state.config.afk_limit:
            player.afk_turns = 0
            state.pending_actions[player.id] = AFK
        else:
            player.afk_turns += 1
            state.pending_actions[player.id] = random_action(player, r)
        filled.append(player.id)
    return filled


@dataclass
class TurnContext:
    state: GameState
    rng: random.Random
    actions: Dict[int, str]
    specials: Dict[int, TurnSpecials]
    events: List[str] = field(default_factory=list)

    @property
    def config(self) -> DuelConfig:
        return self.state.config

    def log(self, message: str) -> None:
        self.events.append(message)
        self.state.push_log(message)

    def roll(self, probability: float) -> bool:
        if not self.config.specials_enabled:
            return False
        return chance(probability, self.rng)

    def roll_against(self, probability: float, victim: Player) -> bool:
        # bad luck scaled up for whoever is being out-gunned
        opponent = self.state.opponent(victim.id)
        return self.roll(scaled(probability, intimidation_factor(victim, opponent, self.config)))


def block_phase(turn: TurnContext) -> None:
    cfg = turn.config
    for player in turn.state.players:
        action = turn.actions[player.id]
        if action != BLOCK:
            player.consecutive_blocks = 0
            if action == AFK:
                turn.log(f"{player.name} is AFK and loses the turn.")
            continue

        player.consecutive_blocks += 1
        guard = turn.specials[player.id]
        if player.consecutive_blocks > cfg.max_consecutive_blocks:
            player.consecutive_blocks = cfg.max_consecutive_blocks
            turn.log(f"{player.name}'s arm is too tired to keep the shield up. The guard drops!")
            continue
        if player.shield_weakened and not guard.defender_fired and turn.roll_against(cfg.shield_weaken_chance, player):
            guard.defender_fired = True
            player.shield_weakened = False
            turn.log(f"{player.name}'s cracked shield gives way. No guard this turn!")
            continue
        player.is_blocking = True
        turn.log(f"{player.name} raises their guard.")


def reload_phase(turn: TurnContext) -> None:
    cfg = turn.config
    for player in turn.state.players:
        if turn.actions[player.id] != RELOAD:
            continue
        if player.ammo >= cfg.max_ammo:
            turn.log(f"{player.name} tries to reload but is already full ({player.ammo}/{cfg.max_ammo}).")
            continue

        own = turn.specials[player.id]
        if not own.attacker_fired and turn.roll(cfg.double_reload_chance):
            own.attacker_fired = True
            player.ammo = min(cfg.max_ammo, player.ammo + 2)
            turn.log(f"{player.name} slams in two rounds at once! Ammo: {player.ammo}.")
        elif player.ammo > 0 and not own.attacker_fired and turn.roll_against(cfg.reload_drop_chance, player):
            own.attacker_fired = True
            player.ammo -= 1
            turn.log(f"{player.name} fumbles the reload and drops a round. Ammo: {player.ammo}.")
        else:
            player.ammo += 1
            turn.log(f"{player.name} reloads. Ammo: {player.ammo}.")


def apply_hit(turn: TurnContext, victim: Player, shooter: Player) -> bool:
    """
    Put one bullet into `victim`. Returns False when it was dodged.
    """
    cfg = turn.config
    guard = turn.specials[victim.id]
    if not victim.is_blocking and not guard.defender_fired and turn.roll(cfg.miracle_dodge_chance):
        guard.defender_fired = True
        turn.log(f"{victim.name} dodges the bullet by a miracle!")
        return False
    if victim.hp == 1 and not victim.last_stand_used and not guard.defender_fired and turn.roll(cfg.last_stand_chance):
        guard.defender_fired = True
        victim.last_stand_used = True
        victim.hp = 1
        turn.log(f"{victim.name} takes the hit but refuses to fall! Last stand at 1 hp.")
        return True
    victim.hp = max(0, victim.hp - 1)
    if victim is shooter:
        turn.log(f"{victim.name} is struck by their own deflected bullet and loses 1 hp.")
    else:
        turn.log(f"{shooter.name} hits {victim.name}. {victim.name} loses 1 hp.")
    return True


def fire_shot(turn: TurnContext, attacker: Player, defender: Player, ahead: bool = False) -> None:
    """
    One shot from `attacker`. `ahead` is whether the attacker was clearly
    ahead when the attack phase began.
    """
    cfg = turn.config
    own = turn.specials[attacker.id]

    if attacker.ammo <= 0:
        attacker.consecutive_hits = 0
        turn.log(f"{attacker.name} tries to shoot but has no ammo.")
        return

    if not own.attacker_fired and turn.roll_against(cfg.weapon_jam_chance, attacker):
        own.attacker_fired = True
        attacker.consecutive_hits = 0
        turn.log(f"{attacker.name}'s weapon jams! The round stays in the chamber.")
        return

    attacker.ammo -= 1

    if ahead and not own.attacker_fired and turn.roll(cfg.nervous_miss_chance):
        own.attacker_fired = True
        attacker.consecutive_hits = 0
        turn.log(f"{attacker.name} gets cocky and the shot goes wide.")
        return

    # a precise shot only matters against a raised guard
    precise = False
    if defender.is_blocking and not own.attacker_fired and turn.roll(precise_shot_chance(attacker, cfg)):
        own.attacker_fired = True
        precise = True
        turn.log(f"{attacker.name} lines up a precise shot!")

    if defender.is_blocking and not precise:
        guard = turn.specials[defender.id]
        attacker.consecutive_hits = 0
        if not guard.defender_fired and turn.roll(cfg.perfect_block_chance):
            guard.defender_fired = True
            turn.log(f"{defender.name} lands a perfect block and deflects the shot back at {attacker.name}!")
            apply_hit(turn, attacker, attacker)
            return
        turn.log(f"{defender.name} blocks {attacker.name}'s shot.")
        if not guard.defender_fired and turn.roll(cfg.shield_weaken_chance):
            guard.defender_fired = True
            defender.shield_weakened = True
            turn.log(f"{defender.name}'s shield cracks under the impact.")
        return

    if not apply_hit(turn, defender, attacker):
        attacker.consecutive_hits = 0
        return

    attacker.consecutive_hits += 1
    if attacker.ammo < cfg.max_ammo and not own.attacker_fired and turn.roll(cfg.ghost_bullet_chance):
        own.attacker_fired = True
        attacker.ammo = min(cfg.max_ammo, attacker.ammo + 1)
        turn.log(f"A ghost bullet reappears in {attacker.name}'s chamber. Ammo: {attacker.ammo}.")


def attack_phase(turn: TurnContext) -> None:
    state = turn.state
    # standings are read before either shot lands
    ahead = {p.id: is_clearly_ahead(p, state.opponent(p.id)) for p in state.players}
    # both shots go off even if the first one was lethal
    for attacker in state.players:
        if turn.actions[attacker.id] == ATTACK:
            fire_shot(turn, attacker, state.opponent(attacker.id), ahead[attacker.id])


def turtle_phase(turn: TurnContext) -> None:
    cfg = turn.config
    for player in turn.state.players:
        if turn.actions[player.id] == ATTACK:
            player.turns_without_attack = 0
        else:
            player.turns_without_attack += 1

    if cfg.max_turtle_turns_without_attack <= 0:
        return
    for player in turn.state.players:
        if player.turns_without_attack < cfg.max_turtle_turns_without_attack or player.ammo <= 0:
            continue
        if turn.roll_against(cfg.turtle_drop_chance, player):
            player.ammo -= 1
            player.turns_without_attack = 0
            turn.log(f"{player.name} has been hiding too long and drops a round. Ammo: {player.ammo}.")
        elif cfg.specials_enabled:
            # streak stays, so the check repeats next turn
            turn.log(f"{player.name}'s grip slips from all that hiding, but they hold on to their ammo.")


def resolve_turn(state: GameState, r: random.Random, auto_filled: Optional[List[int]] = None) -> TurnOutcome:
    """
    Resolves both committed actions simultaneously.

    Phases always run block -> reload -> attack -> turtle, since later
    phases read what earlier ones settled (a guard must be up before shots
    are evaluated). Narration goes to state.log and the returned outcome.
    """
    if not ready_to_resolve(state):
        raise InvalidState("Both actions are required to resolve a turn")
    if state.is_round_over:
        raise InvalidState("Round is already over")

    actions = {pid: state.pending_actions[pid] for pid in PLAYER_IDS}
    turn = TurnContext(
        state=state,
        rng=r,
        actions=actions,
        specials={pid: TurnSpecials() for pid in PLAYER_IDS},
    )
    state.total_turns += 1
    turn.log(f"Turn {state.total_turns}")

    for player in state.players:
        player.is_blocking = False

    block_phase(turn)
    reload_phase(turn)
    attack_phase(turn)
    turtle_phase(turn)

    for player in state.players:
        action = actions[player.id]
        player.last_action = None if action == AFK else action

    result, winner_id = evaluate_round(state, turn.log)
    if result == "continue" and all(p.ammo == 0 for p in state.players):
        turn.log("Both duelists are out of ammo. Someone has to reload.")

    return TurnOutcome(
        result=result,
        winner_id=winner_id,
        events=turn.events,
        specials=turn.specials,
        auto_filled=list(auto_filled or []),
    )
