"""Turn order, scoring and computer play for a single ClassicXO session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import logging

from .ai import MinimaxAI
from .game import Board, CellOccupied, Line, Mark


logger = logging.getLogger(__name__)


class GameState(str, Enum):
    AWAITING_SYMBOL_CHOICE = "awaitingSymbolChoice"
    IN_PROGRESS = "inProgress"
    ROUND_OVER = "roundOver"


class Rejection(str, Enum):
    """Why an operation was refused. The engine is untouched on rejection."""

    INVALID_MOVE = "invalidMove"
    INVALID_SYMBOL_CHOICE = "invalidSymbolChoice"


class OutcomeKind(str, Enum):
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    winner: Optional[Mark] = None
    line: Optional[Line] = None

    @classmethod
    def win(cls, winner: Mark, line: Line) -> "Outcome":
        return cls(OutcomeKind.WIN, winner, line)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(OutcomeKind.DRAW)


@dataclass(frozen=True)
class Scores:
    x: int = 0
    o: int = 0


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    board: Tuple[Mark, ...]
    outcome: Optional[Outcome] = None
    computer_move: Optional[int] = None
    error: Optional[Rejection] = None


@dataclass(frozen=True)
class ChoiceResult:
    accepted: bool
    error: Optional[Rejection] = None


@dataclass
class GameEngine:
    """One game session: board, whose turn it is, scores and the AI opponent.

    Lifecycle: construct, then any number of choose_symbol / apply_move /
    play_again cycles, then full_reset or disposal. Not thread-safe; hosts
    serving several callers must hold one lock per engine.
    """

    computer_mode: bool = False
    board: Board = field(default_factory=Board, init=False)
    current_player: Mark = field(default=Mark.X, init=False)
    player_symbol: Optional[Mark] = field(default=None, init=False)
    game_started: bool = field(default=False, init=False)
    outcome: Optional[Outcome] = field(default=None, init=False)
    _x_wins: int = field(default=0, init=False, repr=False)
    _o_wins: int = field(default=0, init=False, repr=False)
    _ai: Optional[MinimaxAI] = field(default=None, init=False, repr=False)
    # Open until a symbol is picked; reopened by play_again and full_reset.
    _choice_open: bool = field(default=True, init=False, repr=False)

    # ---- read-only views ----

    @property
    def scores(self) -> Scores:
        return Scores(x=self._x_wins, o=self._o_wins)

    def current_state(self) -> GameState:
        if self.outcome is not None:
            return GameState.ROUND_OVER
        if self.game_started:
            return GameState.IN_PROGRESS
        return GameState.AWAITING_SYMBOL_CHOICE

    def status_message(self) -> str:
        state = self.current_state()
        if state is GameState.AWAITING_SYMBOL_CHOICE:
            return "Choose X or O first"
        if state is GameState.ROUND_OVER:
            assert self.outcome is not None
            if self.outcome.kind is OutcomeKind.DRAW:
                return "It's a Draw!"
            return f"{self.outcome.winner.value} Wins!"
        return f"{self.current_player.value} to move"

    # ---- commands ----

    def choose_symbol(self, symbol: Mark | str) -> ChoiceResult:
        try:
            mark = Mark(symbol)
        except ValueError:
            mark = Mark.EMPTY
        if mark is Mark.EMPTY:
            logger.debug("Rejected symbol choice %r", symbol)
            return ChoiceResult(False, Rejection.INVALID_SYMBOL_CHOICE)

        if not self._choice_open:
            logger.debug("Rejected symbol choice %s, already chosen", mark.value)
            return ChoiceResult(False, Rejection.INVALID_SYMBOL_CHOICE)

        if mark is not self.player_symbol or self._ai is None:
            self._ai = MinimaxAI(player=mark.opponent)
        self.player_symbol = mark
        self._start_round()
        self._choice_open = False
        logger.info("Player chose %s", mark.value)
        return ChoiceResult(True)

    def apply_move(self, index: int) -> MoveResult:
        if not self.game_started or self.player_symbol is None:
            return self._reject_move(index, "no round in progress")
        if not isinstance(index, int) or isinstance(index, bool):
            return self._reject_move(index, "not a cell index")

        try:
            computer_move = self._play(index)
        except (CellOccupied, IndexError) as exc:
            return self._reject_move(index, str(exc))

        return MoveResult(
            accepted=True,
            board=self.board.cells,
            outcome=self.outcome,
            computer_move=computer_move,
        )

    def play_again(self) -> None:
        self._choice_open = True
        if self.player_symbol is None:
            self.board.clear()
            self.outcome = None
            logger.info("New round requested before a symbol was chosen")
            return
        self._start_round()
        logger.info("New round started, %s opens", self.current_player.value)

    def full_reset(self) -> None:
        self.board.clear()
        self.outcome = None
        self.game_started = False
        self.player_symbol = None
        self.current_player = Mark.X
        self._x_wins = 0
        self._o_wins = 0
        self._ai = None
        self._choice_open = True
        logger.info("Game fully reset")

    def set_computer_mode(self, enabled: bool) -> None:
        self.computer_mode = bool(enabled)
        logger.info(
            "%s", "Playing vs computer" if self.computer_mode else "Two player mode"
        )

    def toggle_computer_mode(self) -> bool:
        self.set_computer_mode(not self.computer_mode)
        return self.computer_mode

    # ---- helpers ----

    def _start_round(self) -> None:
        assert self.player_symbol is not None
        self.board.clear()
        self.outcome = None
        self.current_player = self.player_symbol
        self.game_started = True

    def _play(self, index: int) -> Optional[int]:
        """Place the current player's mark and, if due, the computer's reply.

        Returns the computer's cell when it moved.
        """
        mover = self.current_player
        self.board.set(index, mover)
        logger.debug("%s plays %d", mover.value, index)

        line = self.board.winning_line(mover)
        if line is not None:
            self._finish(Outcome.win(mover, line))
            return None
        if self.board.is_full():
            self._finish(Outcome.draw())
            return None

        self.current_player = mover.opponent
        if not self.computer_mode or self.current_player is self.player_symbol:
            return None

        assert self._ai is not None
        reply = self._ai.choose(self.board)
        if reply is None:
            return None
        self._play(reply)
        return reply

    def _finish(self, outcome: Outcome) -> None:
        self.outcome = outcome
        self.game_started = False
        if outcome.winner is Mark.X:
            self._x_wins += 1
        elif outcome.winner is Mark.O:
            self._o_wins += 1
        logger.info(
            "Round over: %s (X %d, O %d)",
            "draw" if outcome.kind is OutcomeKind.DRAW else f"{outcome.winner.value} wins",
            self._x_wins,
            self._o_wins,
        )

    def _reject_move(self, index: object, reason: str) -> MoveResult:
        logger.debug("Rejected move %r: %s", index, reason)
        return MoveResult(
            accepted=False, board=self.board.cells, error=Rejection.INVALID_MOVE
        )
