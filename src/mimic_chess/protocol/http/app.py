from __future__ import annotations

import logging
from typing import Dict, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ..snapshot import StateSnapshot
from ...engine.board import BLACK, WHITE
from ...engine.game import Game
from ...engine.move import parse_uci, square_to_str, str_to_square
from ...engine.state import DEFAULT_PROMOTION_POLICY, PROMOTION_POLICIES


logger = logging.getLogger(__name__)

PolicyName = Literal["queen", "pawn"]


class CreateGameRequest(BaseModel):
    promotion_policy: Optional[PolicyName] = Field(
        default=None, description="What a promotion records for mimic logic"
    )


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str
    promotion_policy: str


class MoveRequest(BaseModel):
    move: str = Field(..., description="Move string, e.g., e2e4")


class DestinationsResponse(BaseModel):
    square: str
    logic: str
    destinations: list[str]


class GameView(BaseModel):
    game_id: str
    fen: str
    side_to_move: str
    logic: Dict[str, str]
    legal_moves: list[str]
    winner: Optional[str]
    last_move: Optional[str]
    move_history: list[str]
    snapshot: StateSnapshot


def create_app(
    promotion_policy: str = DEFAULT_PROMOTION_POLICY, log_level: str = "INFO"
) -> FastAPI:
    if promotion_policy not in PROMOTION_POLICIES:
        raise ValueError(f"unknown promotion policy: {promotion_policy!r}")

    app = FastAPI(title="Mimic Chess API", version="0.1.0")

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    # basicConfig is a no-op once a handler exists, e.g. after the default app
    logging.getLogger().setLevel(level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(default_policy=promotion_policy)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game_id = store.create(req.promotion_policy if req else None)
        game = _require_game(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(
            game_id=game_id, fen=game.to_fen(), promotion_policy=game.promotion_policy
        )

    @app.get("/api/games/{game_id}/state", response_model=GameView)
    async def get_state(game_id: str) -> GameView:
        return _view(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=DestinationsResponse)
    async def destinations(game_id: str, square: str) -> DestinationsResponse:
        game = _require_game(store, game_id)
        try:
            sq = str_to_square(square)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        piece = game.state.board.piece_at(sq)
        color = piece.color if piece is not None else game.side_to_move
        return DestinationsResponse(
            square=square,
            logic=game.mimic_logic(color).label(),
            destinations=[square_to_str(s) for s in sorted(game.destinations(sq))],
        )

    @app.post("/api/games/{game_id}/move", response_model=GameView)
    async def make_move(game_id: str, req: MoveRequest) -> GameView:
        game = _require_game(store, game_id)
        try:
            move = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if game.winner is not None:
            raise HTTPException(status_code=409, detail="game is over")
        try:
            game.apply_move(move)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        if game.winner is not None:
            logger.info("game won", extra={"game_id": game_id, "winner": game.winner})
        return _view(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameView)
    async def undo(game_id: str) -> GameView:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _view(game_id, game)

    @app.post("/api/games/{game_id}/reset", response_model=GameView)
    async def reset(game_id: str) -> GameView:
        game = _require_game(store, game_id)
        game.reset()
        return _view(game_id, game)

    @app.put("/api/games/{game_id}/snapshot", response_model=GameView)
    async def replace_snapshot(game_id: str, snapshot: StateSnapshot) -> GameView:
        game = _require_game(store, game_id)
        try:
            state = snapshot.to_state()
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid snapshot")
        # Last writer wins; the engine does no merging
        game.replace_state(state)
        logger.info("snapshot applied", extra={"game_id": game_id})
        return _view(game_id, game)

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"deleted": game_id}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _view(game_id: str, game: Game) -> GameView:
    history = game.move_history_uci()
    return GameView(
        game_id=game_id,
        fen=game.to_fen(),
        side_to_move=game.side_to_move,
        logic={c: game.mimic_logic(c).label() for c in (WHITE, BLACK)},
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        winner=game.winner,
        last_move=history[-1] if history else None,
        move_history=history,
        snapshot=StateSnapshot.from_state(game.state),
    )


# Default app for non-factory servers
app = create_app()
