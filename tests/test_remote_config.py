import pytest

from remote_code_runner import RemoteSettings, UnknownLanguageError, get_language, language_for_path


def test_settings_from_env_with_overrides() -> None:
    env = {
        "RAPID_API_URL": "https://judge0-ce.p.rapidapi.com/submissions/",
        "RAPID_API_KEY": "env-key",
        "RAPID_API_HOST": "judge0-ce.p.rapidapi.com",
    }
    settings = RemoteSettings.from_env(env, api_key="cli-key")

    assert settings.submissions_url == "https://judge0-ce.p.rapidapi.com/submissions"
    assert settings.api_key == "cli-key"
    assert settings.status_url("abc") == "https://judge0-ce.p.rapidapi.com/submissions/abc"


def test_headers_only_include_configured_credentials() -> None:
    bare = RemoteSettings(submissions_url="http://localhost:2358/submissions")
    assert bare.headers() == {"Content-Type": "application/json"}

    full = RemoteSettings(api_key="k", api_host="h")
    assert full.headers()["X-RapidAPI-Key"] == "k"
    assert full.headers()["X-RapidAPI-Host"] == "h"


def test_relative_url_is_rejected() -> None:
    with pytest.raises(ValueError, match="absolute http"):
        RemoteSettings(submissions_url="judge0/submissions")


def test_status_url_requires_token() -> None:
    with pytest.raises(ValueError, match="token"):
        RemoteSettings().status_url("")


def test_language_lookup_by_key_id_and_extension() -> None:
    assert get_language("python").id == 71
    assert get_language(" CPP ").id == 54
    assert get_language(62).key == "java"
    assert get_language("63").key == "javascript"
    assert language_for_path("solution.rs").key == "rust"
    assert language_for_path("Main.JAVA").key == "java"


def test_unknown_language_raises() -> None:
    with pytest.raises(UnknownLanguageError):
        get_language("klingon")
    with pytest.raises(UnknownLanguageError):
        get_language(True)  # type: ignore[arg-type]
    with pytest.raises(UnknownLanguageError):
        language_for_path("notes.txt")
