from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    chess_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...config import Settings
from ...engine.game import Game
from ...engine.perft import perft as perft_nodes, perft_divide
from ...engine.position import CheckState, Position
from ...errors import ChessError
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="FEN string (default: startpos)")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4")


class PerftRequest(BaseModel):
    fen: str = Field(..., description="FEN string")
    depth: int = Field(default=1, ge=0)
    divide: bool = Field(default=False, description="Also report counts per root move")


class PerftResponse(BaseModel):
    nodes: int
    depth: int
    divide: Optional[Dict[str, int]] = None


class GameState(BaseModel):
    game_id: str
    fen: str
    legal_moves: list[str]
    check_state: str
    in_check: bool
    checkmate: bool
    stalemate: bool
    draw: bool
    hash: str
    last_move: Optional[str]
    move_history: list[str]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings if settings is not None else Settings.from_env()
    app = FastAPI(title="chesscore API", version="0.1.0")
    app.state.settings = settings

    # Basic logging setup
    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(ValueError, chess_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    # In-memory session store for games
    store = InMemorySessionStore()
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game = Game.from_fen(req.fen) if req is not None and req.fen else Game.new()
        game_id = store.create(game)
        logger.info("created game %s", game_id)
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _game_state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        game = Game.from_fen(req.fen)
        store.set(game_id, game)
        return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        game.apply_move(req.move)
        return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _game_state(game_id, game)

    @app.delete("/api/games/{game_id}", status_code=204)
    async def delete_game(game_id: str) -> Response:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        logger.info("deleted game %s", game_id)
        return Response(status_code=204)

    # CPU-bound, so a sync handler: FastAPI runs it in the threadpool
    @app.post("/api/perft", response_model=PerftResponse)
    def perft(req: PerftRequest) -> PerftResponse:
        if req.depth > settings.max_perft_depth:
            raise HTTPException(
                status_code=400,
                detail=f"depth must be <= {settings.max_perft_depth}",
            )
        position = Position.from_fen(req.fen)
        if req.divide and req.depth >= 1:
            divide = perft_divide(position, req.depth)
            return PerftResponse(nodes=sum(divide.values()), depth=req.depth, divide=divide)
        return PerftResponse(nodes=perft_nodes(position, req.depth), depth=req.depth)

    return app


def _game_state(game_id: str, game: Game) -> GameState:
    history = game.move_history_uci()
    check_state = game.check_state()
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        check_state=check_state.value,
        in_check=game.in_check(),
        checkmate=check_state is CheckState.CHECKMATE,
        stalemate=check_state is CheckState.STALEMATE,
        draw=game.is_draw(),
        hash=f"{game.position.hash:016x}",
        last_move=history[-1] if history else None,
        move_history=history,
    )


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game
