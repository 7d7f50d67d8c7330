"""
Request/response models for the HTTP API.
"""

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional
from datetime import datetime


class ChatRequest(BaseModel):
    # The mobile client sends camelCase
    model_config = ConfigDict(populate_by_name=True)

    user_message: str = Field(alias="userMessage")


class ChatResponse(BaseModel):
    reply: str
    outcome: str  # answered|degraded
    reason_code: Optional[str] = None
    category: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    vector_provider: str
    embed_provider: str
    entry_count: int
    generator_healthy: bool


class FAQCreateRequest(BaseModel):
    category: str
    question: str
    answer: str
    submitted_by: Optional[str] = None

    @field_validator('category', 'question', 'answer')
    @classmethod
    def must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('field cannot be empty')
        return v


class FAQStatusRequest(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def status_must_be_valid(cls, v):
        valid_statuses = ['pending', 'approved', 'rejected']
        if v not in valid_statuses:
            raise ValueError(f'status must be one of: {valid_statuses}')
        return v


class FAQResponse(BaseModel):
    id: int
    category: str
    question: str
    answer: str
    submitted_by: str
    status: str
    created_at: datetime


class SuccessResponse(BaseModel):
    success: bool
