"""Minimal demonstration of a streamed Gemini reply."""

from gemini_core import create_gemini_service
from gemini_core.domain.models import StreamHandlers

if __name__ == "__main__":
    question = "What is your return policy?"
    service = create_gemini_service()
    print("User:", question)
    print("Model: ", end="", flush=True)
    service.stream_conversation(
        [{"role": "user", "parts": [{"text": question}]}],
        handlers=StreamHandlers(on_text=lambda t: print(t, end="", flush=True)),
    )
    print()
