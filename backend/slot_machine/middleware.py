"""Middleware for player identification and error handling."""
import logging
import re

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from slot_machine.errors import ErrorCode, GameError


logger = logging.getLogger(__name__)

# Player ids become part of Redis keys
PLAYER_ID_PATTERN = re.compile(r"[A-Za-z0-9_.:-]{1,64}")


class PlayerIdMiddleware(BaseHTTPMiddleware):
    """
    Identify the player behind each game request.

    The X-Player-Id header is stripped of surrounding whitespace and must
    match PLAYER_ID_PATTERN. The normalized id is stored on
    request.state.player_id.
    """

    PROTECTED_PATHS = {"/init", "/bet", "/bet/step", "/spin", "/reset"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.PROTECTED_PATHS:
            player_id = request.headers.get("X-Player-Id", "").strip()
            if not player_id:
                return GameError(
                    ErrorCode.INVALID_REQUEST,
                    "Missing required header: X-Player-Id",
                ).to_response()
            if not PLAYER_ID_PATTERN.fullmatch(player_id):
                logger.info("Rejected player id %r on %s", player_id[:80], request.url.path)
                return GameError(
                    ErrorCode.INVALID_REQUEST,
                    "X-Player-Id must be 1-64 characters of letters, digits, '_', '.', ':' or '-'",
                ).to_response()
            request.state.player_id = player_id

        return await call_next(request)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn GameError and unexpected failures into protocol error bodies."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except GameError as e:
            if not e.recoverable:
                logger.warning("%s on %s: %s", e.code.value, request.url.path, e.message)
            return e.to_response()
        except Exception:
            logger.exception("Unhandled error on %s", request.url.path)
            return GameError(ErrorCode.INTERNAL_ERROR, "Internal server error").to_response()
