# backend/caras/schemas/chatbot.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ChatQuery(BaseModel):
    query: str = Field(..., min_length=1, max_length=2000)
    conversation_id: Optional[str] = Field(default=None, max_length=64)
    visitor_id: Optional[str] = Field(default=None, max_length=64)


class ChatReply(BaseModel):
    conversation_id: str
    visitor_id: str
    html: str
    ok: bool


class ChatGreeting(BaseModel):
    greeting: str
    suggested_questions: List[str]
