"""
API response schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from bookshelf.models import ResultStatus


class ResponseEnvelope(BaseModel):
    """Envelope wrapping every book endpoint response."""
    status: ResultStatus = Field(..., description="success or fail")
    message: Optional[str] = Field(None, description="Human-readable message")
    data: Optional[Dict[str, Any]] = Field(None, description="Operation payload")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "success",
                    "message": "Buku berhasil ditambahkan",
                    "data": {"bookId": "Qbax5Oy7L8WKf74l"},
                },
                {
                    "status": "fail",
                    "message": "Buku tidak ditemukan",
                },
            ]
        }
    }


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    books_count: int = Field(..., description="Number of books in the store")


# Documented error responses shared by the book routes
FAIL_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ResponseEnvelope, "description": "Invalid book payload"},
    404: {"model": ResponseEnvelope, "description": "Book not found"},
    500: {"model": ResponseEnvelope, "description": "Store consistency failure"},
}