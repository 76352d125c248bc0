# backend/caras/services/chatbot.py
from __future__ import annotations

import html
import logging
import re
import secrets
from typing import List, Optional

import requests

from caras.schemas.chatbot import ChatGreeting, ChatQuery, ChatReply

logger = logging.getLogger(__name__)

GREETING = "Hello! I am the CARAS Assistant. How can I help you today?"

SUGGESTED_QUESTIONS = [
    "What is CARAS and what do you do?",
    "How can I join as an altar server?",
    "What are the qualifications and age requirements?",
    "Where is your parish located?",
]

NOT_UNDERSTOOD = "Sorry, I could not understand that."
UNREACHABLE = "There was a problem contacting the assistant."

_HEADING = re.compile(r"^#{1,6}\s*", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_NUMBERED = re.compile(r"^(\d+)\.\s+(.*)$")
_SENTENCE_BREAK = re.compile(r"(?<=[.?!])\s+")

_P_OPEN = '<p style="margin:4px 0;">'
_UL_OPEN = '<ul style="margin:4px 0 4px 18px; padding:0;">'


class ChatNotConfigured(RuntimeError):
    pass


def greeting() -> ChatGreeting:
    return ChatGreeting(greeting=GREETING, suggested_questions=list(SUGGESTED_QUESTIONS))


def new_id() -> str:
    return secrets.token_hex(6)


def markdown_to_html(md: Optional[str]) -> str:
    """
    The small subset of markdown the assistant produces. The answer is
    HTML-escaped first so only the tags emitted here reach the page.
    """
    if not md:
        return ""
    text = html.escape(md.strip(), quote=False)
    text = _HEADING.sub("", text)
    text = _BOLD.sub(r"<strong>\1</strong>", text)

    out: List[str] = []
    in_list = False
    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            if in_list:
                in_list = False
                out.append("</ul>")
            out.append("<br/>")
            continue

        if line.startswith("- "):
            if not in_list:
                in_list = True
                out.append(_UL_OPEN)
            out.append(f"<li>{line[2:]}</li>")
            continue

        if in_list:
            in_list = False
            out.append("</ul>")

        if _NUMBERED.match(line):
            out.append(f"{_P_OPEN}{line}</p>")
            continue

        for sentence in _SENTENCE_BREAK.split(line):
            if sentence.strip():
                out.append(f"{_P_OPEN}{sentence.strip()}</p>")

    if in_list:
        out.append("</ul>")
    return "".join(out)


def ask_assistant(
    query: ChatQuery,
    url: Optional[str],
    api_key: Optional[str],
    timeout: int = 20,
    http=requests,
) -> ChatReply:
    if not url:
        raise ChatNotConfigured("CHAT_QUERY_URL is not set")

    conversation_id = query.conversation_id or new_id()
    visitor_id = query.visitor_id or new_id()

    def reply(body: str, ok: bool) -> ChatReply:
        return ChatReply(conversation_id=conversation_id, visitor_id=visitor_id, html=body, ok=ok)

    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    try:
        resp = http.post(
            url,
            json={
                "query": query.query.strip(),
                "conversationId": conversation_id,
                "visitorId": visitor_id,
                "streaming": False,
            },
            headers=headers,
            timeout=timeout,
        )
    except requests.RequestException:
        logger.warning("chat endpoint unreachable", exc_info=True)
        return reply(UNREACHABLE, False)

    if not (200 <= resp.status_code < 300):
        logger.warning("chat endpoint returned %s: %s", resp.status_code, resp.text[:200])
        return reply(NOT_UNDERSTOOD, False)

    try:
        data = resp.json()
    except ValueError:
        logger.warning("chat endpoint returned a non-JSON body")
        return reply(UNREACHABLE, False)

    raw = ""
    if isinstance(data, dict):
        raw = data.get("answer") or data.get("text") or ""
    body = markdown_to_html(raw)
    if not body:
        return reply(NOT_UNDERSTOOD, False)
    return reply(body, True)
