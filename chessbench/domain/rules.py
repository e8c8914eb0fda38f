"""
Rules engine adapter.

Thin, stateless layer over python-chess. A position is a `chess.Board`; no function here mutates the board it receives.
Illegal moves are a normal result (`Rejected`), malformed FEN strings raise InvalidPositionError.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import chess

from chessbench.core.exceptions import CorruptGameError, InvalidPositionError
from chessbench.core.shared_types import Color, Reason, Status

Position = chess.Board

STARTING_FEN = chess.STARTING_FEN
FEN_FIELDS = 6
FIFTY_MOVE_HALF_MOVES = 100


@dataclass(frozen=True)
class Applied:
    """The move was legal. `san` is the canonical notation, including any check/mate suffix."""

    position: Position
    san: str


@dataclass(frozen=True)
class Rejected:
    """The move was not legal in the position (or could not be read as a move at all)."""

    move_text: str


MoveResult = Applied | Rejected


def parse_position(fen: str) -> Position:
    """Parse a full six-field FEN string into a position."""
    if len(fen.split()) != FEN_FIELDS:
        raise InvalidPositionError(
            f"FEN string must contain {FEN_FIELDS} space-separated parts: {fen!r}"
        )
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise InvalidPositionError(f"Invalid FEN {fen!r}: {exc}") from exc

    if not board.is_valid():
        raise InvalidPositionError(
            f"Invalid FEN {fen!r}: position is not legal ({board.status()!r})"
        )
    return board


def replay_position(moves: Iterable[str], starting_fen: str = STARTING_FEN) -> Position:
    """
    Rebuild a position by playing the given SAN moves from the starting position.

    Unlike `parse_position`, the resulting board keeps its move stack, which is needed to detect threefold repetition.
    """
    board = parse_position(starting_fen)
    for ply, san in enumerate(moves):
        try:
            board.push_san(san)
        except ValueError as exc:
            raise CorruptGameError(
                f"Stored move history cannot be replayed: ply {ply} {san!r} is not legal."
            ) from exc
    return board


def serialize(position: Position) -> str:
    return position.fen()


def side_to_move(position: Position) -> Color:
    return Color.WHITE if position.turn == chess.WHITE else Color.BLACK


def apply_move(position: Position, move_text: str) -> MoveResult:
    """
    Try the move written in standard algebraic notation.

    Matching is case-sensitive (`Nf3` is a move, `nf3` is not). Check and mate suffixes are optional on input.
    """
    try:
        move = position.parse_san(move_text)
    except ValueError:
        return Rejected(move_text)

    # parse_san accepts null moves ("--", "0000"), which are never legal here
    if not move or not position.is_legal(move):
        return Rejected(move_text)

    san = position.san(move)
    new_position = position.copy()
    new_position.push(move)
    return Applied(new_position, san)


def legal_moves(position: Position) -> list[str]:
    return [position.san(move) for move in position.legal_moves]


def is_checkmate(position: Position) -> bool:
    return position.is_checkmate()


def is_stalemate(position: Position) -> bool:
    return position.is_stalemate()


def draw_reason(position: Position) -> Optional[Reason]:
    """
    Which draw rule applies, if any.

    NOTE a position can satisfy more than one. Order: repetition, material, fifty-move rule.
    Repetition can only be seen on positions that carry their move stack (see `replay_position`).
    """
    if position.is_repetition(3):
        return Reason.THREEFOLD_REPETITION
    if position.is_insufficient_material():
        return Reason.INSUFFICIENT_MATERIAL
    if position.halfmove_clock >= FIFTY_MOVE_HALF_MOVES:
        return Reason.FIFTY_MOVE_RULE
    return None


def is_draw(position: Position) -> bool:
    return draw_reason(position) is not None


def classify(position: Position) -> tuple[Status, Optional[Reason]]:
    """Status of the game in the given position: checkmate, stalemate, draw, or continue (in that priority)."""
    if is_checkmate(position):
        return Status.MATE, Reason.CHECKMATE
    if is_stalemate(position):
        return Status.STALEMATE, Reason.STALEMATE
    reason = draw_reason(position)
    if reason is not None:
        return Status.DRAW, reason
    return Status.CONTINUE, None
