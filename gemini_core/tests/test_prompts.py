import json
import tempfile
from pathlib import Path

import pytest

from gemini_core.domain.exceptions import ValidationError
from gemini_core.prompts import load_prompt_table


def test_bundled_prompt_table():
    table = load_prompt_table()
    assert "standardAssistant" in table
    assert table["standardAssistant"]["content"]


def test_custom_prompt_file():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "prompts.json"
        path.write_text(json.dumps({"systemPrompts": {"terse": {"content": "Be brief."}}}), encoding="utf-8")
        table = load_prompt_table(path)
        assert table == {"terse": {"content": "Be brief."}}


def test_malformed_prompt_file():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "prompts.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_prompt_table(path)
        path.write_text(json.dumps({"prompts": {}}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_prompt_table(path)
