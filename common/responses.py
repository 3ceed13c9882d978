"""
ParuShop - Response Envelope
=============================
Every response, success or failure, has the same shape so clients can
branch on a single `success` flag:

    {"statusCode": 200, "success": true,  "message": "...", "data": {...}}
    {"statusCode": 404, "success": false, "message": "...", "errors": []}
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        jsonable_encoder({
            "statusCode": status_code,
            "success": status_code < 400,
            "message": message,
            "data": data,
        }),
        status_code=status_code,
    )


def error_response(status_code: int, message: str, errors: Optional[list] = None) -> JSONResponse:
    return JSONResponse(
        jsonable_encoder({
            "statusCode": status_code,
            "success": False,
            "message": message,
            "errors": errors or [],
        }),
        status_code=status_code,
    )
