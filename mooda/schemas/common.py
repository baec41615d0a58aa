"""
Error envelope shared by every router's documented 4xx/5xx responses.
"""
from typing import Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """`{code, message, details}` as produced by `mooda.core.errors` handlers."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


NOT_FOUND = {404: {"model": ErrorResponse}}
