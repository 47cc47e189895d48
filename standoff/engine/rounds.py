# standoff/engine/rounds.py
from typing import Callable, Optional, Tuple

from .models import DuelConfig, GameState, Player

WAITING_NAME = "Waiting..."


def new_player(player_id: int, name: str, config: DuelConfig) -> Player:
    return Player(
        id=player_id,
        name=name,
        hp=config.hp_per_player,
        max_hp=config.hp_per_player,
        ammo=config.starting_ammo,
    )


def new_game_state(config: DuelConfig, creator_name: str) -> GameState:
    state = GameState(
        players=[new_player(1, creator_name, config), new_player(2, WAITING_NAME, config)],
        config=config,
    )
    state.push_log(f"Room created by {creator_name}.")
    state.push_log("Waiting for a second player to join...")
    return state


def reset_player(player: Player, config: DuelConfig) -> None:
    """Back to round-1 defaults. Score and name are kept."""
    player.hp = config.hp_per_player
    player.max_hp = config.hp_per_player
    player.ammo = config.starting_ammo
    player.is_blocking = False
    player.shield_weakened = False
    player.last_stand_used = False
    player.consecutive_blocks = 0
    player.consecutive_hits = 0
    player.turns_without_attack = 0
    player.afk_turns = 0
    player.last_action = None


def _scoreline(state: GameState) -> str:
    p1, p2 = state.players
    return f"{p1.name} {p1.score} - {p2.score} {p2.name}"


def award_round(state: GameState, winner_id: int) -> None:
    winner = state.player(winner_id)
    state.is_round_over = True
    state.winner_id = winner_id
    winner.score += 1


def evaluate_round(
    state: GameState,
    log: Optional[Callable[[str], None]] = None,
) -> Tuple[str, Optional[int]]:
    """
    Decide whether the last resolution ended the round.

    Returns ("draw", None), ("win", winner_id) or ("continue", None).
    """
    log = log or state.push_log
    p1, p2 = state.players
    p1_down = p1.hp <= 0
    p2_down = p2.hp <= 0

    if p1_down and p2_down:
        p1.hp = 0
        p2.hp = 0
        state.is_round_over = True
        state.winner_id = None
        log("Both duelists fall. The round is a draw.")
        return "draw", None

    if p1_down or p2_down:
        loser = p1 if p1_down else p2
        winner = state.opponent(loser.id)
        loser.hp = 0
        award_round(state, winner.id)
        log(f"{winner.name} wins the round. Score: {_scoreline(state)}.")
        return "win", winner.id

    return "continue", None


def forfeit(state: GameState, winner_id: int) -> bool:
    """End a live round in favour of the player who stayed connected."""
    if state.is_round_over:
        return False
    award_round(state, winner_id)
    state.turn_ends_at = None
    winner = state.player(winner_id)
    state.push_log(f"{winner.name} wins the round because the opponent left.")
    return True


def next_round(state: GameState) -> bool:
    if not state.is_round_over:
        return False
    state.round += 1
    state.is_round_over = False
    state.winner_id = None
    for player in state.players:
        reset_player(player, state.config)
    state.push_log(f"--- Round {state.round} begins. Choose your actions. ---")
    return True
