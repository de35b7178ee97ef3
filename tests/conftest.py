import pytest

from app import create_app
from applymail.composer import EmailComposer
from applymail.llm import ModelReply


class FakeCapability:
    """Stands in for the Groq client. Replies are served in order; exceptions are raised."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def invoke(self, system, prompt, schema, temperature):
        self.calls.append({
            "system": system,
            "prompt": prompt,
            "schema": schema,
            "temperature": temperature,
        })
        if not self.replies:
            raise RuntimeError("no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def text_reply(text):
    return ModelReply(parsed=None, text=text)


@pytest.fixture
def failing_llm():
    return FakeCapability(ConnectionError("provider unreachable"), ConnectionError("provider unreachable"))


@pytest.fixture
def make_client():
    def _make(llm):
        app = create_app(composer=EmailComposer(llm=llm))
        app.config["TESTING"] = True
        return app.test_client()
    return _make
