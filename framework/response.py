from typing import Any, Optional
from pydantic import BaseModel


class ResponseModel(BaseModel):
    """Envelope returned by every endpoint: {code, message, data}."""
    code: int = 200
    message: str = "success"
    data: Optional[Any] = None

    @staticmethod
    def success(data: Any = None):
        return ResponseModel(data=data).model_dump(mode="json")

    @staticmethod
    def fail(code: int = 400, message: str = "error", data: Any = None):
        return ResponseModel(code=code, message=message, data=data).model_dump(mode="json")
