"""
Uniform response envelope

Every endpoint answers with ``{code, message, data, timestamp}`` where
``timestamp`` is epoch milliseconds.
"""

import time
from typing import Any, Dict

from fastapi.encoders import jsonable_encoder


SUCCESS_CODE = 200
SUCCESS_MESSAGE = "Success"


def current_millis() -> int:
    return int(time.time() * 1000)


def success(data: Any = None, message: str = SUCCESS_MESSAGE) -> Dict[str, Any]:
    """Build a success envelope"""
    return {
        "code": SUCCESS_CODE,
        "message": message,
        "data": jsonable_encoder(data),
        "timestamp": current_millis(),
    }


def error_body(code: int, message: str, data: Any = None) -> Dict[str, Any]:
    """Build an error envelope"""
    return {
        "code": code,
        "message": message,
        "data": jsonable_encoder(data),
        "timestamp": current_millis(),
    }
