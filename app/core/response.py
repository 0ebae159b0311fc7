# app/core/response.py

from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from datetime import datetime
import uuid


def make_meta():
    return {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "trace_id": str(uuid.uuid4()),
    }


def error(code=400, message="Ошибка", details=None):
    return JSONResponse(
        status_code=code,
        content=jsonable_encoder({
            "status": "error",
            "code": code,
            "message": message,
            "details": details,
            "meta": make_meta()
        })
    )
