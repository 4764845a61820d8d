from __future__ import annotations

from typing import Any, Dict, Optional

from .types import QueryFailure, QueryKind


class PortfolioError(Exception):
    """查詢流程的基底例外。"""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str, code: str = "InternalError") -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def to_failure(self) -> QueryFailure:
        """轉換為附加在部分結果上的錯誤標記。"""

        return QueryFailure(
            kind=self.kind,
            code=self.code,
            message=self.message,
            status_code=self.status_code,
        )


class ValidationError(PortfolioError):
    """使用者輸入驗證失敗，不會發出任何網路請求。"""

    kind = "validation"
    status_code = 400

    EMPTY_INPUT = "EmptyInput"
    UNSUPPORTED_CHAIN = "UnsupportedChain"
    MISSING_PARAMETERS = "MissingParameters"


class UpstreamError(PortfolioError):
    """Tatum API 回傳非 2xx 狀態，狀態碼與內容原樣保留。"""

    kind = "upstream"

    _CODES = {
        400: "BadRequest",
        401: "Unauthorized",
        403: "Forbidden",
    }

    def __init__(self, status_code: int, body: Any = None, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Tatum API responded with status {status_code}",
            code=self.code_for_status(status_code),
        )
        self.status_code = status_code
        self.body = body

    @classmethod
    def code_for_status(cls, status_code: int) -> str:
        if status_code >= 500:
            return "ServerError"
        return cls._CODES.get(status_code, "BadRequest")

    def to_failure(self) -> QueryFailure:
        failure = super().to_failure()
        failure.body = self.body
        return failure


class NormalizationError(PortfolioError):
    """上游回應 200 但格式不符預期。"""

    kind = "normalization"
    status_code = 500

    UNEXPECTED_SHAPE = "UnexpectedShape"

    def __init__(self, message: str) -> None:
        super().__init__(message, code=self.UNEXPECTED_SHAPE)


class TransportError(PortfolioError):
    """網路失敗或逾時。"""

    kind = "transport"
    status_code = 502

    NETWORK_ERROR = "NetworkError"
    TIMEOUT = "Timeout"

    def __init__(self, message: str, code: str = NETWORK_ERROR) -> None:
        super().__init__(message, code=code)
        if code == self.TIMEOUT:
            self.status_code = 504


class QueryFailedError(PortfolioError):
    """餘額與 NFT 兩個子查詢皆失敗。"""

    kind = "query"

    def __init__(self, errors: Dict[QueryKind, PortfolioError]) -> None:
        primary = errors.get(QueryKind.BALANCES) or next(iter(errors.values()))
        super().__init__(
            "Both balance and NFT queries failed",
            code=primary.code,
        )
        self.errors = errors
        self.status_code = primary.status_code

    def failures(self) -> Dict[QueryKind, QueryFailure]:
        return {kind: error.to_failure() for kind, error in self.errors.items()}
