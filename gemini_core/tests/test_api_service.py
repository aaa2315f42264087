import pytest

from gemini_core.api import service as api_service
from gemini_core.domain.exceptions import ValidationError
from gemini_core.domain.models import ModelMessage, StreamHandlers


class StubService:
    def __init__(self):
        self.calls = []

    def stream_conversation(self, messages, prompt_type=None, tools=None, handlers=None):
        self.calls.append((messages, prompt_type, tools, handlers))
        if not messages:
            raise ValidationError(code="EMPTY_MESSAGES", message="messages must not be empty")
        if handlers and handlers.on_message:
            handlers.on_message(ModelMessage(content="hi"))
        return ModelMessage(content="hi")

    def get_system_prompt(self, prompt_type):
        return f"prompt:{prompt_type}"


def test_facade_delegates_to_default_service(monkeypatch):
    stub = StubService()
    monkeypatch.setattr(api_service, "_service", stub)
    seen = []
    result = api_service.stream_conversation(
        [{"role": "user", "parts": [{"text": "Hi"}]}],
        prompt_type="standardAssistant",
        handlers=StreamHandlers(on_message=seen.append),
    )
    assert result.content == "hi"
    assert seen == [result]
    assert api_service.get_system_prompt("x") == "prompt:x"


def test_facade_reraises(monkeypatch):
    monkeypatch.setattr(api_service, "_service", StubService())
    with pytest.raises(ValidationError):
        api_service.stream_conversation([])


def test_default_service_is_created_lazily(monkeypatch):
    created = []

    def fake_create():
        created.append(1)
        return StubService()

    monkeypatch.setattr(api_service, "create_gemini_service", fake_create)
    api_service.reset_default_service()
    first = api_service.get_default_service()
    assert api_service.get_default_service() is first
    assert created == [1]
    api_service.reset_default_service()
