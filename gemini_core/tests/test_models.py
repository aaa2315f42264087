from gemini_core.domain.models import GenerationConfig, Message, Part, StreamChunk


def test_message_from_dict():
    m = Message.from_dict({"role": "user", "parts": [{"text": "a"}, "b", Part(text="c")]})
    assert m.parts == [Part(text="a"), Part(text="b"), Part(text="c")]
    assert m.to_payload() == {"role": "user", "parts": [{"text": "a"}, {"text": "b"}, {"text": "c"}]}


def test_chunk_without_candidates_has_empty_text():
    assert StreamChunk(model="m", candidates=[]).text() == ""
    assert GenerationConfig().to_payload() == {}


def test_non_text_part_round_trips():
    raw = {"inline_data": {"mime_type": "image/png", "data": "AAAA"}}
    part = Part.from_payload(raw)
    assert part.text == ""
    assert part.to_payload() == raw
    assert Part.from_payload({"text": "hi"}) == Part(text="hi")
