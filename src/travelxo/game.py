"""Core rules, move history and time travel for TravelXO."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

Player = str  # "X" or "O"
Board = Tuple[str, ...]
Line = Tuple[int, int, int]

EMPTY = ""
MARK_A: Player = "X"
MARK_B: Player = "O"
BOARD_SIZE = 9

WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

EMPTY_BOARD: Board = (EMPTY,) * BOARD_SIZE


# ---------- Errors ----------


class GameError(ValueError):
    """Base class for rejected game intents."""


class InvalidCellIndex(GameError):
    pass


class InvalidMove(GameError):
    pass


class InvalidStepIndex(GameError):
    pass


class InvalidRecord(GameError):
    """A persisted history that could not have come from legal play."""


# ---------- Win detection ----------


def evaluate(board: Board) -> Optional[Tuple[Player, Line]]:
    """Return ``(mark, line)`` for the first completed line, else ``None``.

    Lines are checked in ``WINNING_LINES`` order, so a board with two
    completed lines always reports the same one.
    """
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return v, (a, b, c)
    return None


def mark_for_step(step: int) -> Player:
    """Whoever moves when ``step`` moves have been made."""
    return MARK_A if step % 2 == 0 else MARK_B


def cell_position(cell_index: int) -> Tuple[int, int]:
    # 1-based (row, column) as shown in the move list
    return cell_index // 3 + 1, cell_index % 3 + 1


# ---------- History ----------


@dataclass(frozen=True)
class HistoryEntry:
    board: Board = EMPTY_BOARD
    move_position: Optional[Tuple[int, int]] = None
    move_index: Optional[int] = None
    winning_line: Optional[Line] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "board": list(self.board),
            "movePosition": list(self.move_position) if self.move_position else None,
            "winningLine": list(self.winning_line) if self.winning_line else None,
        }


@dataclass(frozen=True)
class GameHistory:
    """Every board snapshot of a game plus the currently viewed step.

    Operations never mutate; they return a new ``GameHistory`` (or ``self``
    when the intent is ignored).
    """

    entries: Tuple[HistoryEntry, ...] = field(
        default_factory=lambda: (HistoryEntry(),)
    )
    viewed_step: int = 0
    ascending: bool = True

    @classmethod
    def new(cls) -> "GameHistory":
        return cls()

    # ---- read-only projection ----

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def current(self) -> HistoryEntry:
        return self.entries[self.viewed_step]

    @property
    def next_mark(self) -> Player:
        return mark_for_step(self.viewed_step)

    @property
    def winner(self) -> Optional[Tuple[Player, Line]]:
        return evaluate(self.current.board)

    # ---- intents ----

    def apply_move(self, cell_index: int, strict: bool = False) -> "GameHistory":
        """Play the current turn's mark at ``cell_index`` on the viewed board.

        Anything after the viewed step is discarded first. Illegal moves are
        ignored unless ``strict`` is set, in which case they raise
        ``InvalidCellIndex`` or ``InvalidMove``.
        """
        try:
            self._check_move(cell_index)
        except GameError as exc:
            if strict:
                raise
            logger.debug("Ignoring move at %s: %s", cell_index, exc)
            return self

        kept = self.entries[: self.viewed_step + 1]
        cells: List[str] = list(self.current.board)
        mark = self.next_mark
        cells[cell_index] = mark
        board: Board = tuple(cells)

        result = evaluate(board)
        entry = HistoryEntry(
            board=board,
            move_position=cell_position(cell_index),
            move_index=cell_index,
            winning_line=result[1] if result else None,
        )
        if result:
            logger.info("%s wins on move %d with line %s", mark, len(kept), result[1])
        return replace(self, entries=kept + (entry,), viewed_step=len(kept))

    def jump_to(self, step: int, strict: bool = False) -> "GameHistory":
        if not 0 <= step < len(self.entries):
            if strict:
                raise InvalidStepIndex(
                    f"Step {step} is outside the history (0..{len(self.entries) - 1})"
                )
            logger.debug("Ignoring jump to step %s", step)
            return self
        return replace(self, viewed_step=step)

    def toggle_order(self) -> "GameHistory":
        return replace(self, ascending=not self.ascending)

    # ---- persistence ----

    def to_dict(self) -> Dict[str, object]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "viewedStep": self.viewed_step,
            "ascending": self.ascending,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "GameHistory":
        """Rebuild a history by replaying the moves recorded in ``data``."""
        try:
            raw_entries = list(data["entries"])  # type: ignore[arg-type]
            viewed_step = data["viewedStep"]
            ascending = data.get("ascending", True)  # type: ignore[union-attr]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise InvalidRecord(f"Malformed history record: {exc}") from exc

        if not isinstance(viewed_step, int) or isinstance(viewed_step, bool):
            raise InvalidRecord(f"viewedStep must be an integer, got {viewed_step!r}")
        if not isinstance(ascending, bool):
            raise InvalidRecord(f"ascending must be a boolean, got {ascending!r}")
        if not raw_entries:
            raise InvalidRecord("History record has no entries")
        if not all(isinstance(raw, dict) for raw in raw_entries):
            raise InvalidRecord("History entries must be objects")
        if _record_entry(raw_entries[0], 0) != HistoryEntry().to_dict():
            raise InvalidRecord("History must start from an empty board with no move")

        history = cls(ascending=ascending)
        for step, raw in enumerate(raw_entries[1:], start=1):
            recorded = _record_entry(raw, step)
            cell_index = _changed_cell(history.current.board, tuple(recorded["board"]))
            if cell_index is None:
                raise InvalidRecord(f"Entry {step} is not a single move")
            try:
                history = history.apply_move(cell_index, strict=True)
            except GameError as exc:
                raise InvalidRecord(f"Entry {step} is not a legal move: {exc}") from exc
            if history.current.to_dict() != recorded:
                raise InvalidRecord(f"Entry {step} does not match its replay")

        try:
            return history.jump_to(viewed_step, strict=True)
        except InvalidStepIndex as exc:
            raise InvalidRecord(str(exc)) from exc

    # ---- helpers ----

    def _check_move(self, cell_index: int) -> None:
        if not 0 <= cell_index < BOARD_SIZE:
            raise InvalidCellIndex(f"Cell index {cell_index} is outside 0..8")
        if self.winner:
            raise InvalidMove("Game already finished")
        if self.current.board[cell_index] != EMPTY:
            raise InvalidMove("Cell already occupied")


def _changed_cell(before: Board, after: Board) -> Optional[int]:
    if len(after) != BOARD_SIZE:
        return None
    changed = [i for i in range(BOARD_SIZE) if before[i] != after[i]]
    return changed[0] if len(changed) == 1 else None


def _record_entry(raw: Dict[str, object], step: int) -> Dict[str, object]:
    # Same shape as HistoryEntry.to_dict so records compare directly
    board = raw.get("board")
    if not isinstance(board, (list, tuple)):
        raise InvalidRecord(f"Entry {step} has no board list")
    return {
        "board": list(board),
        "movePosition": raw.get("movePosition"),
        "winningLine": raw.get("winningLine"),
    }
