"""Pure derivations over a ``GameHistory`` used to render the game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from .game import BOARD_SIZE, GameHistory, HistoryEntry, Player, mark_for_step


class GamePhase(str, Enum):
    IN_PROGRESS = "in-progress"
    WON = "won"
    DRAWN = "drawn"


@dataclass(frozen=True)
class MoveDescriptor:
    step: int
    label: str
    selected: bool


def next_player(history: GameHistory) -> Player:
    return mark_for_step(history.viewed_step)


def game_phase(history: GameHistory) -> GamePhase:
    if history.winner:
        return GamePhase.WON
    # Only a full board counts as a draw; no earlier "dead position" check.
    if history.viewed_step == BOARD_SIZE:
        return GamePhase.DRAWN
    return GamePhase.IN_PROGRESS


def status_text(history: GameHistory) -> str:
    result = history.winner
    if result:
        return f"Winner: {result[0]}"
    if game_phase(history) is GamePhase.DRAWN:
        return "Draw"
    return f"Next player: {next_player(history)}"


def move_label(step: int, entry: HistoryEntry) -> str:
    if not step or entry.move_position is None:
        return "Go to game start"
    row, col = entry.move_position
    return f"Go to move #{step}: ({row},{col})"


def move_list(history: GameHistory) -> List[MoveDescriptor]:
    """Move-list rows in the order the history panel shows them."""
    moves = [
        MoveDescriptor(
            step=step,
            label=move_label(step, entry),
            selected=step == history.viewed_step,
        )
        for step, entry in enumerate(history.entries)
    ]
    if not history.ascending:
        moves.reverse()
    return moves


def order_label(history: GameHistory) -> str:
    return "Ascending" if history.ascending else "Descending"


def render_state(history: GameHistory) -> Dict[str, object]:
    """JSON-ready projection of everything the page draws."""

    current = history.current
    result = history.winner
    phase = game_phase(history)
    return {
        "board": list(current.board),
        "viewedStep": history.viewed_step,
        "historyLength": len(history),
        "status": status_text(history),
        "phase": phase.value,
        "winner": result[0] if result else None,
        "winningLine": list(result[1]) if result else None,
        "nextPlayer": next_player(history) if phase is GamePhase.IN_PROGRESS else None,
        "lastMove": current.move_index,
        "ascending": history.ascending,
        "orderLabel": order_label(history),
        "moves": [
            {"step": move.step, "label": move.label, "selected": move.selected}
            for move in move_list(history)
        ],
    }
