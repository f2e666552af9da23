from typing import Any, Optional
from pydantic import BaseModel


class ResponseModel(BaseModel):
    """Error body shape: the status code mirrored in `code`, plus a message and optional details."""
    code: int = 400
    message: str = "error"
    data: Optional[Any] = None

    @staticmethod
    def fail(code: int = 400, message: str = "error", data: Any = None):
        return {"code": code, "message": message, "data": data}
