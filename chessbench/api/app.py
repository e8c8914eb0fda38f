"""
HTTP layer: routes, dependencies and the mapping of exceptions to status codes.

Every error body has the shape {"ok": false, "error": "..."}. An illegal move is not an error (always 200).
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Awaitable, Callable, Optional

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.orm import Session

from chessbench.api.models import (
    ApplyMoveRequest,
    ApplyMoveResponse,
    CreateGameRequest,
    CreateGameResponse,
    ErrorResponse,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    StartPositionResponse,
)
from chessbench.core.config import Settings, configure_logging, get_settings
from chessbench.core.exceptions import (
    ConcurrentUpdateError,
    GameError,
    GameNotFoundError,
    GameStateError,
    InvalidPositionError,
    InvalidRequestError,
    UnauthorizedError,
)
from chessbench.db.database import get_db, init_db
from chessbench.db.sql_repository import SQLGameRepository
from chessbench.services.chess_service import ChessService

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[GameError], int] = {
    InvalidRequestError: status.HTTP_400_BAD_REQUEST,
    InvalidPositionError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    GameNotFoundError: status.HTTP_404_NOT_FOUND,
    GameStateError: status.HTTP_409_CONFLICT,
    ConcurrentUpdateError: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    init_db()
    yield


app = FastAPI(title="chessbench", version="0.1.0", lifespan=lifespan)


@app.middleware("http")
async def catch_unexpected_errors(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Turn anything the exception handlers did not map into a 500 body. Registered before CORS so the response still gets its headers."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# added last, so it wraps every response, including the 500s above
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- DEPENDENCIES ---
def get_service(db: Annotated[Session, Depends(get_db)]) -> ChessService:
    return ChessService(SQLGameRepository(db))


def require_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    x_api_key: Annotated[Optional[str], Header()] = None,
) -> None:
    """Only enforced when an API secret is configured."""
    if settings.api_secret is None:
        return
    if x_api_key != settings.api_secret:
        logger.info("Unauthorized request: invalid or missing API key")
        raise UnauthorizedError("Unauthorized: Invalid or missing API key")


Service = Annotated[ChessService, Depends(get_service)]


# --- EXCEPTION HANDLERS ---
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(by_alias=True),
    )


@app.exception_handler(GameError)
async def game_error_handler(_: Request, exc: GameError) -> JSONResponse:
    status_code = next(
        (
            code
            for error_type, code in ERROR_STATUS_CODES.items()
            if isinstance(exc, error_type)
        ),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Unmapped game error", exc_info=exc)
    return _error(status_code, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _error(status.HTTP_400_BAD_REQUEST, f"Invalid request: {details}")


# --- ROUTES ---
@app.get("/health")
def health() -> PlainTextResponse:
    return PlainTextResponse("ok")


@app.get("/start-position", response_model=StartPositionResponse)
def start_position(service: Service) -> StartPositionResponse:
    return service.start_position()


@app.post(
    "/new-game",
    response_model=CreateGameResponse,
    dependencies=[Depends(require_api_key)],
)
def new_game(
    service: Service, request: Optional[CreateGameRequest] = None
) -> CreateGameResponse:
    return service.create_new_game(request or CreateGameRequest())


@app.post("/current-position", response_model=GameResponse)
def current_position(request: GetGameRequest, service: Service) -> GameResponse:
    return service.get_game_state(request)


@app.post("/make-move", response_model=GameResponse)
def make_move(request: MoveRequest, service: Service) -> GameResponse:
    return service.make_move(request)


@app.post("/apply-move", response_model=ApplyMoveResponse)
def apply_move(request: ApplyMoveRequest, service: Service) -> ApplyMoveResponse:
    return service.apply_move(request)


@app.post("/legal-moves", response_model=LegalMovesResponse)
def legal_moves(request: LegalMovesRequest, service: Service) -> LegalMovesResponse:
    return service.legal_moves(request)
