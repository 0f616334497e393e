"""Slot Machine FastAPI Application."""
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from slot_machine.config import settings
from slot_machine.errors import ErrorCode, GameError, LowBalanceError
from slot_machine.ladder import bet_minus, bet_plus
from slot_machine.logic.game import (
    Game,
    adjust_bet,
    create_game,
    from_portable_form,
    spin as spin_game,
    to_portable_form,
)
from slot_machine.logic.symbols import RandomSymbolSource
from slot_machine.middleware import ErrorHandlerMiddleware, PlayerIdMiddleware
from slot_machine.protocol import (
    BetDirection,
    GameView,
    SetBetRequest,
    SpinResponse,
    StepBetRequest,
)
from slot_machine.redis_service import redis_service
from slot_machine.telemetry import (
    BetChangedEvent,
    GameCreatedEvent,
    SpinProcessedEvent,
    SpinRejectedEvent,
    telemetry_service,
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage Redis connection lifecycle."""
    await redis_service.connect()
    yield
    await redis_service.close()


app = FastAPI(
    title="Slot Machine",
    version="0.1.0",
    description="Three-reel slot machine with one game per player",
    lifespan=lifespan,
)

app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(PlayerIdMiddleware)

# Reel source shared by all games served by this process
symbol_source = RandomSymbolSource()


def _new_game(player_id: str) -> Game:
    game = create_game(
        settings.initial_credits,
        settings.bet_size,
        settings.bet_min,
        settings.bet_max,
        source=symbol_source,
    )
    logger.info("New game for player %s", player_id)
    telemetry_service.emit_game_created(
        GameCreatedEvent(
            player_id=player_id,
            credits=game.credits,
            bet_size=game.bet_size,
            bet_min=game.bet_min,
            bet_max=game.bet_max,
        )
    )
    return game


async def _load_game(player_id: str) -> Game:
    """Load the player's stored game, creating a default one if missing."""
    data = await redis_service.load_game(player_id)
    if data is None:
        game = _new_game(player_id)
        await redis_service.save_game(player_id, to_portable_form(game))
        return game
    return from_portable_form(data, source=symbol_source)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/init")
async def init(request: Request) -> dict:
    """Return the player's game, starting a new one if needed."""
    player_id = request.state.player_id
    async with redis_service.player_lock(player_id):
        game = await _load_game(player_id)
    return GameView.from_game(game).model_dump(mode="json")


@app.post("/bet")
async def set_bet(request: Request, body: SetBetRequest) -> dict:
    """Set the bet size. INVALID_BET leaves the stored game untouched."""
    player_id = request.state.player_id
    async with redis_service.player_lock(player_id):
        game = await _load_game(player_id)
        old_size = game.bet_size
        adjust_bet(game, body.betSize)
        await redis_service.save_game(player_id, to_portable_form(game))

    telemetry_service.emit_bet_changed(
        BetChangedEvent(player_id=player_id, old_size=old_size, new_size=game.bet_size)
    )
    return GameView.from_game(game).model_dump(mode="json")


@app.post("/bet/step")
async def step_bet(request: Request, body: StepBetRequest) -> dict:
    """Move the bet one rung along the bet ladder."""
    player_id = request.state.player_id
    async with redis_service.player_lock(player_id):
        game = await _load_game(player_id)
        old_size = game.bet_size
        if body.direction == BetDirection.PLUS:
            bet_plus(game)
        else:
            bet_minus(game)
        await redis_service.save_game(player_id, to_portable_form(game))

    telemetry_service.emit_bet_changed(
        BetChangedEvent(player_id=player_id, old_size=old_size, new_size=game.bet_size)
    )
    return GameView.from_game(game).model_dump(mode="json")


@app.post("/spin")
async def spin(request: Request) -> dict:
    """
    Spin the player's reels.

    Implements:
    - Per-player locking (ROUND_IN_PROGRESS on concurrent requests)
    - LOW_BALANCE when credits do not cover the bet
    - Persisting the updated game
    """
    player_id = request.state.player_id
    try:
        async with redis_service.player_lock(player_id) as lock_metrics:
            game = await _load_game(player_id)
            try:
                result = spin_game(game)
            except LowBalanceError as e:
                telemetry_service.emit_spin_rejected(
                    SpinRejectedEvent(
                        player_id=player_id,
                        reason=e.code.value,
                        credits=e.credits,
                        bet_size=e.bet,
                    )
                )
                raise
            await redis_service.save_game(player_id, to_portable_form(game))
    except GameError as e:
        if e.code == ErrorCode.ROUND_IN_PROGRESS:
            telemetry_service.emit_spin_rejected(
                SpinRejectedEvent(
                    player_id=player_id,
                    reason=e.code.value,
                    credits=None,
                    bet_size=None,
                )
            )
        raise

    round_id = str(uuid.uuid4())
    logger.debug(
        "Spin %s for player %s: lock acquired in %.2fms",
        round_id, player_id, lock_metrics.acquire_ms,
    )
    telemetry_service.emit_spin_processed(
        SpinProcessedEvent(
            player_id=player_id,
            round_id=round_id,
            symbols=[s.value for s in result.symbols],
            multiplier=result.multiplier,
            bet_size=result.bet_size,
            win=result.win,
            credits_after=result.credits_after,
            lock_acquire_ms=lock_metrics.acquire_ms,
        )
    )
    return SpinResponse.from_result(round_id, result).model_dump(mode="json")


@app.post("/reset")
async def reset(request: Request) -> dict:
    """Drop the player's game and start a fresh default one."""
    player_id = request.state.player_id
    async with redis_service.player_lock(player_id):
        await redis_service.delete_game(player_id)
        game = await _load_game(player_id)
    return GameView.from_game(game).model_dump(mode="json")
