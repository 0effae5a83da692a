"""
Utility functions untuk API
"""
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def to_json_response(response: BaseModel) -> JSONResponse:
    """Serialize a boundary response; failed results are sent as 400"""
    status_code = 200 if getattr(response, "result", True) else 400
    return JSONResponse(status_code=status_code, content=response.model_dump())
