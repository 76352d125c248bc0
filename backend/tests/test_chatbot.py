import requests

from caras.config import Config
from caras.schemas.chatbot import ChatQuery
from caras.services import chatbot
from caras.services.chatbot import NOT_UNDERSTOOD, UNREACHABLE, ask_assistant, markdown_to_html

P = '<p style="margin:4px 0;">'
UL = '<ul style="margin:4px 0 4px 18px; padding:0;">'


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.sent = None

    def post(self, url, **kw):
        self.sent = (url, kw)
        if self.error:
            raise self.error
        return self.response


def test_sentences_become_paragraphs_and_bold_survives():
    html = markdown_to_html("**CARAS** serves the altar. We meet on Saturdays!")
    assert html == f"{P}<strong>CARAS</strong> serves the altar.</p>{P}We meet on Saturdays!</p>"


def test_headings_lists_numbers_and_blank_lines():
    md = "## How to join\n- Fill in the form\n- Attend the orientation\n\n1. Submit. 2. Wait."
    assert markdown_to_html(md) == (
        f"{P}How to join</p>"
        f"{UL}<li>Fill in the form</li><li>Attend the orientation</li></ul>"
        "<br/>"
        f"{P}1. Submit. 2. Wait.</p>"
    )


def test_answer_is_escaped_before_rendering():
    html = markdown_to_html('<img src=x onerror="alert(1)"> **hi**')
    assert "<img" not in html
    assert "&lt;img" in html
    assert "<strong>hi</strong>" in html


def test_ask_sends_the_expected_payload():
    http = FakeHttp(FakeResponse(200, {"answer": "Welcome."}))
    reply = ask_assistant(
        ChatQuery(query=" how to join? ", conversation_id="c1", visitor_id="v1"),
        url="https://chat.example/query",
        api_key="k",
        http=http,
    )
    assert reply.ok and reply.html == f"{P}Welcome.</p>"
    url, kw = http.sent
    assert url == "https://chat.example/query"
    assert kw["json"] == {"query": "how to join?", "conversationId": "c1", "visitorId": "v1", "streaming": False}
    assert kw["headers"]["Authorization"] == "Bearer k"


def test_text_field_is_used_when_answer_missing():
    http = FakeHttp(FakeResponse(200, {"text": "From text."}))
    reply = ask_assistant(ChatQuery(query="hi"), url="https://chat.example/q", api_key=None, http=http)
    assert reply.html == f"{P}From text.</p>"
    assert reply.conversation_id and reply.visitor_id


def test_fallbacks():
    q = ChatQuery(query="hi")
    bad = ask_assistant(q, "https://chat.example/q", "k", http=FakeHttp(FakeResponse(500, text="oops")))
    assert (bad.ok, bad.html) == (False, NOT_UNDERSTOOD)

    empty = ask_assistant(q, "https://chat.example/q", "k", http=FakeHttp(FakeResponse(200, {"answer": ""})))
    assert empty.html == NOT_UNDERSTOOD

    down = ask_assistant(
        q, "https://chat.example/q", "k", http=FakeHttp(error=requests.ConnectionError("refused"))
    )
    assert (down.ok, down.html) == (False, UNREACHABLE)


def test_routes(client, monkeypatch):
    r = client.get("/chatbot")
    assert r.json()["suggested_questions"][0] == "What is CARAS and what do you do?"

    monkeypatch.setattr(Config, "CHAT_QUERY_URL", None)
    r = client.post("/chatbot/ask", json={"query": "hello"})
    assert r.status_code == 503

    monkeypatch.setattr(Config, "CHAT_QUERY_URL", "https://chat.example/q")
    monkeypatch.setattr(chatbot.requests, "post", FakeHttp(FakeResponse(200, {"answer": "Hi!"})).post)
    r = client.post("/chatbot/ask", json={"query": "hello", "conversation_id": "abc"})
    assert r.status_code == 200
    assert r.json()["conversation_id"] == "abc"
    assert r.json()["html"] == f"{P}Hi!</p>"
