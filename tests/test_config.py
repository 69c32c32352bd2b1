from medassist.config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "LLM_API_KEY", "GEMINI_API_KEY", "LLM_MODEL"):
        monkeypatch.delenv(name, raising=False)

    s = Settings(_env_file=None)

    assert s.is_database_configured() is False
    assert s.is_llm_configured() is False
    assert s.API_V1_STR == "/api"
    assert s.LLM_MODEL == "gemini-2.0-flash"
    assert s.DIAGNOSIS_HISTORY_LIMIT == 50


def test_gemini_api_key_alias(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-secret")

    s = Settings(_env_file=None)

    assert s.LLM_API_KEY == "gemini-secret"
    assert s.is_llm_configured()


def test_test_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "TEST")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")

    s = Settings(_env_file=None)

    assert s.is_test_environment()
    assert s.is_database_configured()
