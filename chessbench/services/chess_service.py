"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from chessbench.api.models import (
    NO_LAST_MOVE,
    ApplyMoveRequest,
    ApplyMoveResponse,
    CreateGameRequest,
    CreateGameResponse,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    StartPositionResponse,
)
from chessbench.core.exceptions import GameNotFoundError
from chessbench.core.models import GameModel
from chessbench.db.repository import GameRepository
from chessbench.domain.game import Game, compute_legal_moves, evaluate_move
from chessbench.domain.rules import STARTING_FEN

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> CreateGameResponse:
        """Start a game at the standard starting position."""

        new_game = Game.new_game(
            white_player=request.white_player,
            black_player=request.black_player,
            test_type=request.test_type,
            test_description=request.test_description,
        )
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info(
            "Created game %s (%s vs %s, test type %r)",
            game_id,
            stored_game.white_player,
            stored_game.black_player,
            stored_game.test_type,
        )

        return CreateGameResponse(
            game_id=game_id,
            fen=stored_game.fen,
            side_to_move=stored_game.side_to_move,
            legal_moves=stored_game.legal_moves,
            status=stored_game.status,
            white_player=stored_game.white_player,
            black_player=stored_game.black_player,
            test_type=stored_game.test_type,
            test_description=stored_game.test_description,
        )

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by clients to follow a game.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt on a stored game.
        ----

        Read, apply, write back. The write is rejected (ConcurrentUpdateError) if another move was stored in between.
        An illegal move ends the game, the response looks the same as for a legal one.
        """
        stored_model = self._fetch_game(request.game_id)

        game = Game.from_model(stored_model)
        game.make_move(request.move)
        after_move = game.to_model()

        updated = self.repo.update_game(request.game_id, after_move)
        if updated is None:
            raise GameNotFoundError(f"Game with game_id={request.game_id} not found.")

        if game.is_finished:
            logger.info(
                "Game %s finished: %s (%s), winner %s",
                request.game_id,
                game.status,
                game.reason,
                game.winner,
            )
        return self._create_game_response(request.game_id, updated)

    def apply_move(self, request: ApplyMoveRequest) -> ApplyMoveResponse:
        """Try a move on a bare FEN. Nothing is stored."""
        outcome = evaluate_move(request.fen, request.move)
        return ApplyMoveResponse(
            status=outcome.status,
            fen=outcome.fen,
            side_to_move=outcome.side_to_move,
            winner=outcome.winner,
            reason=outcome.reason,
            legal_moves=outcome.legal_moves,
        )

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves for a bare FEN."""
        result = compute_legal_moves(request.fen)
        return LegalMovesResponse(
            fen=request.fen,
            side_to_move=result.side_to_move,
            legal_moves=result.legal_moves,
        )

    def start_position(self) -> StartPositionResponse:
        return StartPositionResponse(fen=STARTING_FEN)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            fen=model.fen,
            side_to_move=model.side_to_move,
            legal_moves=model.legal_moves,
            status=model.status,
            winner=model.winner,
            reason=model.reason,
            move_history=model.move_history,
            last_move=model.move_history[-1] if model.move_history else NO_LAST_MOVE,
            white_player=model.white_player,
            black_player=model.black_player,
            test_type=model.test_type,
            test_description=model.test_description,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            logger.info("Game %s not found", game_id)
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
