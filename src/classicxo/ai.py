"""Exhaustive minimax opponent for ClassicXO."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging
import math

from .game import Board, Mark


logger = logging.getLogger(__name__)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


@dataclass
class MinimaxAI:
    """Computer player that searches the whole remaining game tree.

    Scores are relative to the human's mark: a human win is -10, a computer
    win is +10 and a draw is 0, with no preference for faster wins.

      - MinimaxAI(player=Mark.O)
      - choose(board) -> cell index, or None on a full board
    """

    player: Mark
    # Position values are depth-independent, so caching them is exact.
    _tt: Dict[Tuple[Tuple[Mark, ...], bool], int] = field(
        default_factory=dict, repr=False
    )

    def __post_init__(self) -> None:
        if self.player is Mark.EMPTY:
            raise ValueError("AI player must be X or O")

    @property
    def opponent(self) -> Mark:
        return self.player.opponent

    # ---- public API ----

    def choose(self, board: Board) -> Optional[int]:
        best_score = -math.inf
        best_move: Optional[int] = None

        for idx in board.empty_cells():
            with board.hypothetical(idx, self.player):
                score = self._minimax(board, False)
            if score > best_score:
                best_score, best_move = score, idx

        if best_move is not None:
            logger.debug(
                "%s picks cell %d (score %s)", self.player.value, best_move, best_score
            )
        return best_move

    # ---- core search ----

    def _minimax(self, board: Board, maximizing: bool) -> int:
        terminal = self._evaluate(board)
        if terminal is not None:
            return terminal

        key = (board.cells, maximizing)
        cached = self._tt.get(key)
        if cached is not None:
            return cached

        mark = self.player if maximizing else self.opponent
        value = -math.inf if maximizing else math.inf
        for idx in board.empty_cells():
            with board.hypothetical(idx, mark):
                score = self._minimax(board, not maximizing)
            if maximizing:
                if score > value:
                    value = score
            elif score < value:
                value = score

        self._tt[key] = int(value)
        return int(value)

    def _evaluate(self, board: Board) -> Optional[int]:
        """Score a finished position, or None if play continues."""
        for mark in (Mark.X, Mark.O):
            if board.winning_line(mark) is not None:
                return LOSS_SCORE if mark is self.opponent else WIN_SCORE
        if board.is_full():
            return DRAW_SCORE
        return None
