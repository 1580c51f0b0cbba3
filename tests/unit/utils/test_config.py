"""
Tests for the configuration module.
"""
import pytest

from mock_interviewer.utils import config


class TestGetConfigValue:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MOCK_INTERVIEWER_TEST_KEY", "from-env")
        assert config.get_config_value("MOCK_INTERVIEWER_TEST_KEY", "fallback") == "from-env"

    def test_default_when_missing(self, monkeypatch):
        monkeypatch.delenv("MOCK_INTERVIEWER_TEST_KEY", raising=False)
        assert config.get_config_value("MOCK_INTERVIEWER_TEST_KEY", "fallback") == "fallback"
        assert config.get_config_value("MOCK_INTERVIEWER_TEST_KEY") is None


class TestValidateConfig:
    @pytest.fixture
    def valid(self, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "test-key")
        monkeypatch.setattr(config, "CHROMA_DB_URL", "http://localhost:8000")
        monkeypatch.setattr(config, "SERVER_URL", "https://interviews.example.com")
        monkeypatch.setattr(config, "MONGODB_URI", "mongodb+srv://cluster.example.net")

    def test_valid_configuration(self, valid):
        config.validate_config()

    def test_lists_every_problem(self, valid, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "")
        monkeypatch.setattr(config, "CHROMA_DB_URL", "localhost:8000")
        monkeypatch.setattr(config, "MONGODB_URI", "postgres://db")

        with pytest.raises(ValueError) as exc_info:
            config.validate_config()

        message = str(exc_info.value)
        assert "GOOGLE_API_KEY: is required" in message
        assert "CHROMA_DB_URL: must be a valid http(s) URL" in message
        assert "MONGODB_URI: must be a valid MongoDB connection URI" in message
        assert "SERVER_URL" not in message


def test_llm_config_keys():
    assert set(config.get_llm_config()) == {"model", "fast_model", "temperature"}
