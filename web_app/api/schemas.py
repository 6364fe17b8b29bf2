"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field, StrictInt, StrictStr
from typing import Optional


class GenerateShortUrlRequest(BaseModel):
    """JSON request to shorten a URL.

    Types are strict: a quoted or fractional ttl_seconds is a parse error,
    not something to coerce.
    """

    long_url: Optional[StrictStr] = Field(None, description="The URL to shorten")
    ttl_seconds: Optional[StrictInt] = Field(
        None,
        description="Seconds until the short URL expires; 0 or absent means never",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "long_url": "https://example.com/very/long/path/to/resource",
                    "ttl_seconds": 3600
                },
                {
                    "long_url": "https://github.com/user/repo"
                }
            ]
        }
    }


class ShortUrlResponse(BaseModel):
    """Response after shortening a URL."""

    short_url: str = Field(..., description="The complete short URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_url": "https://short.link/aB3xZ"
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
