"""Error response schemas.

Every error response, JSON or hypermedia, uses the same envelope:
{"error": {"code": "...", "message": "..."}}.
"""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail

    @classmethod
    def build(cls, code: str, message: str) -> dict[str, object]:
        """Envelope as a plain dict, ready for ``JSONResponse(content=...)``."""
        return cls(error=ErrorDetail(code=code, message=message)).model_dump()
