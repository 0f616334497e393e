"""Error codes and game exceptions."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from slot_machine.config import settings


class ErrorCode(str, Enum):
    """Error codes shared by the core, the CLI and the HTTP service."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BET = "INVALID_BET"
    LOW_BALANCE = "LOW_BALANCE"
    SYMBOL_OUT_OF_RANGE = "SYMBOL_OUT_OF_RANGE"
    BET_LIMIT = "BET_LIMIT"
    ROUND_IN_PROGRESS = "ROUND_IN_PROGRESS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_BET: 400,
    ErrorCode.LOW_BALANCE: 402,
    ErrorCode.SYMBOL_OUT_OF_RANGE: 400,
    ErrorCode.BET_LIMIT: 409,
    ErrorCode.ROUND_IN_PROGRESS: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Recoverable: the caller can retry after changing something (bet, timing).
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INVALID_BET: True,
    ErrorCode.LOW_BALANCE: True,
    ErrorCode.SYMBOL_OUT_OF_RANGE: False,
    ErrorCode.BET_LIMIT: True,
    ErrorCode.ROUND_IN_PROGRESS: True,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class GameError(Exception):
    """Base game error that maps to a protocol error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )


class InvalidBetError(GameError):
    """Bet configuration or bet change would break bet_min <= bet <= bet_max."""

    def __init__(self, bet: int, bet_min: int, bet_max: int):
        self.bet = bet
        self.bet_min = bet_min
        self.bet_max = bet_max
        super().__init__(ErrorCode.INVALID_BET, self._reason())

    def _reason(self) -> str:
        if self.bet_min > self.bet_max:
            return "bet_min > bet_max"
        if self.bet < self.bet_min:
            return "bet < bet_min"
        return "bet > bet_max"


class LowBalanceError(GameError):
    """Not enough credits on the balance to cover the bet."""

    def __init__(self, credits: int, bet: int):
        self.credits = credits
        self.bet = bet
        super().__init__(
            ErrorCode.LOW_BALANCE,
            "Insufficient credits on the balance!",
        )


class SymbolOutOfRangeError(GameError):
    """Number has no symbol assigned to it."""

    def __init__(self, number: int, low: int, high: int):
        self.number = number
        super().__init__(
            ErrorCode.SYMBOL_OUT_OF_RANGE,
            f"Number {number} is outside [{low}, {high}]",
        )


class BetLimitError(GameError):
    """Bet ladder cannot move any further in the requested direction."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.BET_LIMIT, message)
