from gemini_core.config.settings import Settings


def test_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    s = Settings()
    assert s.api.default_model == "gemini-1.5-flash"
    assert s.api.max_tokens == 2000
    assert s.api.temperature == 0.7
    assert s.api.default_prompt_type == "standardAssistant"


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMINI_API_KEY", "  abc  ")
    monkeypatch.setenv("API__DEFAULT_MODEL", "gemini-1.5-pro")
    s = Settings()
    assert s.gemini_api_key == "abc"
    assert s.api.default_model == "gemini-1.5-pro"


def test_settings_from_yaml(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("API__DEFAULT_MODEL", raising=False)
    cfg = tmp_path / "custom.yaml"
    cfg.write_text("api:\n  max_tokens: 512\n  default_prompt_type: enthusiasticAssistant\n", encoding="utf-8")
    monkeypatch.setenv("GEMINI_CONFIG_FILE", str(cfg))
    s = Settings()
    assert s.api.max_tokens == 512
    assert s.api.default_prompt_type == "enthusiasticAssistant"


def test_blank_api_key_is_none(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMINI_API_KEY", "")
    assert Settings().gemini_api_key is None
