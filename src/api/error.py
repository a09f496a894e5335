"""API error type and handler

Routes raise ClientError with the Error of a failed Result; the handler
renders it as {"error": {"code", "message"}}.
"""

import logging
from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    "INSUFFICIENT_BALANCE": status.HTTP_402_PAYMENT_REQUIRED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ORDER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SERVICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "DISPUTE_ALREADY_OPEN": status.HTTP_409_CONFLICT,
    "ESCROW_NOT_HELD": status.HTTP_409_CONFLICT,
    "BONUS_ALREADY_GRANTED": status.HTTP_409_CONFLICT,
    "SERVICE_UNAVAILABLE": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        if status_code is None:
            status_code = ERROR_STATUS_CODES.get(error.code)
            if status_code is None:
                status_code = (
                    status.HTTP_500_INTERNAL_SERVER_ERROR
                    if error.code.endswith("_FAILED")
                    else status.HTTP_400_BAD_REQUEST
                )
        self.status_code = status_code


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} - {exc.error.code}: {exc.error.message} ({exc.error.reason})"
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.error.code, "message": exc.error.message}},
    )
