"""Uniform response envelope: ``{errorCode, statusFlag, message, data}``.

``statusFlag`` is 1 for success, 2 for success with a warning and 0 for
failure. ``errorCode`` is 0 on success, 302 for authentication and lookup
failures and 655 for everything else.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

STATUS_FAILURE = 0
STATUS_SUCCESS = 1
STATUS_WARNING = 2

ERROR_NONE = 0
ERROR_ACCESS = 302
ERROR_GENERAL = 655


def envelope(error_code: int, status_flag: int, message: str, data: Any = None) -> dict:
    return {
        "errorCode": error_code,
        "statusFlag": status_flag,
        "message": message,
        "data": jsonable_encoder(data),
    }


def success(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(ERROR_NONE, STATUS_SUCCESS, message, data))


def warn(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(ERROR_GENERAL, STATUS_WARNING, message, data))


def failure(status_code: int, message: str, data: Any = None) -> JSONResponse:
    error_code = ERROR_ACCESS if status_code in (401, 403, 404) else ERROR_GENERAL
    return JSONResponse(status_code=status_code, content=envelope(error_code, STATUS_FAILURE, message, data))
