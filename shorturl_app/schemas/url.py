from pydantic import BaseModel, Field, ConfigDict

from shorturl_app.models.url import URLMapping


class ShortURLResponse(BaseModel):
    """Body returned by a successful shorten"""
    original_url: str = Field(..., description="The URL exactly as submitted")
    short_url: int = Field(..., ge=1, description="Short identifier for the URL")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"original_url": "https://www.example.com", "short_url": 1}
        }
    )

    @classmethod
    def from_mapping(cls, mapping: URLMapping) -> "ShortURLResponse":
        return cls(original_url=mapping.original_url, short_url=mapping.short_id)


class ErrorResponse(BaseModel):
    """Error body; client errors are still served with HTTP 200"""
    error: str
