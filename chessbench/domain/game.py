"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn -->
passes this information to the service layer, which can then pass it onwards to the API layer.

An illegal move is not an error here: the player who submits it loses on the spot.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from chessbench.core.exceptions import CorruptGameError, GameStateError
from chessbench.core.models import UNKNOWN_LABEL, GameModel
from chessbench.core.shared_types import Color, Reason, Status
from chessbench.domain import rules
from chessbench.domain.rules import Applied, Position

logger = logging.getLogger(__name__)

INVALID_MOVE_MARKER = "??"
EMPTY_MOVE_TEXT = "(empty)"


def is_blank(move_text: Optional[str]) -> bool:
    return move_text is None or move_text.strip() == ""


def invalid_move_entry(move_text: Optional[str]) -> str:
    """History entry for a rejected move: the raw text as submitted, plus the marker."""
    raw = EMPTY_MOVE_TEXT if is_blank(move_text) else move_text
    return f"{raw}{INVALID_MOVE_MARKER}"


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position
    move_history: list[str]
    status: Status = Status.CONTINUE
    winner: Optional[Color] = None
    reason: Optional[Reason] = None
    labels: dict[str, str] = field(default_factory=dict)
    version: int = 0

    @classmethod
    def new_game(
        cls,
        white_player: str = UNKNOWN_LABEL,
        black_player: str = UNKNOWN_LABEL,
        test_type: str = UNKNOWN_LABEL,
        test_description: str = UNKNOWN_LABEL,
    ) -> Self:
        """Fresh game at the standard starting position."""
        return cls(
            position=rules.parse_position(rules.STARTING_FEN),
            move_history=[],
            labels={
                "white_player": white_player,
                "black_player": black_player,
                "test_type": test_type,
                "test_description": test_description,
            },
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Define how to construct a Game from the information the Service layer actually has.

        The position is rebuilt by replaying the move history (so repetitions can be detected), then checked against the stored FEN.
        """
        status_name = model.status.upper()
        if status_name not in Status.__members__:
            raise CorruptGameError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        status = Status[status_name]

        # The rejected move of an invalid_move game was recorded but never played.
        played = model.move_history
        if status == Status.INVALID_MOVE and played:
            played = played[:-1]

        position = rules.replay_position(played)
        if rules.serialize(position) != model.fen:
            raise CorruptGameError(
                f"Stored position {model.fen!r} does not match its move history (replays to {rules.serialize(position)!r})."
            )

        return cls(
            position=position,
            move_history=list(model.move_history),
            status=status,
            winner=Color(model.winner) if model.winner else None,
            reason=Reason(model.reason) if model.reason else None,
            labels={
                "white_player": model.white_player,
                "black_player": model.black_player,
                "test_type": model.test_type,
                "test_description": model.test_description,
            },
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            fen=self.fen,
            side_to_move=self.side_to_move.value,
            status=self.status.value,
            legal_moves=self.legal_moves(),
            move_history=list(self.move_history),
            winner=self.winner.value if self.winner else None,
            reason=self.reason.value if self.reason else None,
            version=self.version,
            **self.labels,
        )

    @property
    def fen(self) -> str:
        return rules.serialize(self.position)

    @property
    def side_to_move(self) -> Color:
        return rules.side_to_move(self.position)

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal

    def legal_moves(self) -> list[str]:
        return rules.legal_moves(self.position)

    def make_move(self, move_text: Optional[str]) -> None:
        """
        Attempt to make a move
        -----

        1. the game must still be going on
        2. blank input is illegal without asking the rules engine
        3. illegal move --> the mover loses. The raw text is recorded, the position is NOT changed.
        4. legal move --> record the SAN, update the position, classify the result
        """
        if self.is_finished:
            raise GameStateError(
                f"Game is already finished. status: {self.status}, reason: {self.reason}"
            )

        result = None if is_blank(move_text) else rules.apply_move(self.position, move_text)
        if not isinstance(result, Applied):
            self._forfeit(move_text)
            return

        mover = self.side_to_move
        self.position = result.position
        self.move_history.append(result.san)
        self._update_game_status(mover)
        logger.debug("%s played %s -> %s", mover, result.san, self.status)

    # -- PRIVATE HELPERS ---
    def _forfeit(self, move_text: Optional[str]) -> None:
        """The side to move submitted an illegal move: the opponent wins, the position stays frozen."""
        offender = self.side_to_move
        self.move_history.append(invalid_move_entry(move_text))
        self.status = Status.INVALID_MOVE
        self.reason = Reason.INVALID_MOVE
        self.winner = offender.opponent
        logger.info("Illegal move %r by %s, %s wins", move_text, offender, self.winner)

    def _update_game_status(self, mover: Color) -> None:
        """NOTE the position has already been updated. `mover` is the side that just played."""
        self.status, self.reason = rules.classify(self.position)
        self.winner = mover if self.status == Status.MATE else None


# --- STATELESS ENTRYPOINTS (no stored game) ---
@dataclass(frozen=True)
class LegalMoves:
    side_to_move: Color
    legal_moves: list[str]


@dataclass(frozen=True)
class MoveOutcome:
    """Result of trying a move on a bare FEN. Nothing is persisted, so an illegal move does not have a winner."""

    status: Status
    fen: str
    side_to_move: Color
    legal_moves: list[str]
    winner: Optional[Color] = None
    reason: Optional[Reason] = None


def compute_legal_moves(fen: str) -> LegalMoves:
    position = rules.parse_position(fen)
    return LegalMoves(
        side_to_move=rules.side_to_move(position),
        legal_moves=rules.legal_moves(position),
    )


def evaluate_move(fen: str, move_text: Optional[str]) -> MoveOutcome:
    """Same legality and classification rules as Game.make_move, on a position given by FEN."""
    position = rules.parse_position(fen)
    result = None if is_blank(move_text) else rules.apply_move(position, move_text)

    if not isinstance(result, Applied):
        return MoveOutcome(
            status=Status.INVALID_MOVE,
            fen=fen,
            side_to_move=rules.side_to_move(position),
            legal_moves=rules.legal_moves(position),
            reason=Reason.INVALID_MOVE,
        )

    mover = rules.side_to_move(position)
    new_position = result.position
    status, reason = rules.classify(new_position)
    return MoveOutcome(
        status=status,
        fen=rules.serialize(new_position),
        side_to_move=rules.side_to_move(new_position),
        legal_moves=rules.legal_moves(new_position),
        winner=mover if status == Status.MATE else None,
        reason=reason,
    )

