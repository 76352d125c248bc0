# backend/caras/api/chatbot.py
from __future__ import annotations

from fastapi import APIRouter, status

from caras.api.notices import notice
from caras.config import Config
from caras.schemas.chatbot import ChatGreeting, ChatQuery, ChatReply
from caras.services import chatbot as svc

router = APIRouter(prefix="/chatbot", tags=["Chatbot"])


@router.get("", response_model=ChatGreeting)
def greeting() -> ChatGreeting:
    return svc.greeting()


@router.post("/ask", response_model=ChatReply)
def ask(payload: ChatQuery) -> ChatReply:
    try:
        return svc.ask_assistant(
            payload,
            url=Config.CHAT_QUERY_URL,
            api_key=Config.CHAT_API_KEY,
            timeout=Config.CHAT_TIMEOUT_SECONDS,
        )
    except svc.ChatNotConfigured as err:
        raise notice(status.HTTP_503_SERVICE_UNAVAILABLE, "Assistant unavailable", str(err))
