"""Request schemas for the Orders API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CreateOrderRequestSchema(BaseModel):
    """
    Request schema for creating an order

    Used for POST /orders. The client is the acting account.
    """

    service_id: str = Field(..., min_length=1, description="Service offer to purchase")

    client_message: Optional[str] = Field(
        default=None,
        max_length=5000,
        description="Brief for the specialist"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "service_id": "svc_logo_design",
                "client_message": "Minimalist logo for a coffee shop",
            }
        }


class SubmitCompletionRequestSchema(BaseModel):
    """Used for POST /orders/{order_id}/submit"""

    result_url: str = Field(..., min_length=1, description="Proof reference from file storage")

    result_description: Optional[str] = Field(default=None, max_length=5000)


class DisputeRequestSchema(BaseModel):
    """Used for POST /orders/{order_id}/dispute"""

    reason: str = Field(..., min_length=1, max_length=2000, description="Why the client disputes the order")

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, v):
        """Reject whitespace-only reasons"""
        if not v.strip():
            raise ValueError("Reason must not be empty")
        return v.strip()
