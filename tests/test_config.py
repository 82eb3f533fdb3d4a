"""Tests for config loading."""

import pytest

from career_draft.config import AppConfig, LLMConfig, StorageConfig, load_config


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.model == "claude-haiku-4-5-20251001"
        assert config.generation.questions_per_category == 5
        assert config.validation.required_interview_questions == 5
        assert config.api.base_url == "http://localhost:3000"

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config == AppConfig()

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  model: test-model\n"
            "generation:\n  questions_per_category: 3\n"
            "validation:\n  required_interview_questions: 8\n"
        )
        config = load_config(yaml_path)
        assert config.llm.model == "test-model"
        assert config.generation.questions_per_category == 3
        assert config.validation.required_interview_questions == 8
        # Defaults for unspecified
        assert config.llm.max_tokens == 4096
        assert config.storage.db_path == "~/.career-draft/drafts.db"

    def test_empty_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_unknown_key_rejected(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("llm:\n  temperature: 0.7\n")
        with pytest.raises(TypeError):
            load_config(yaml_path)

    def test_storage_resolved_paths(self):
        storage = StorageConfig(db_path="~/test.db", log_db_path="~/gen.db")
        assert "~" not in str(storage.resolved_db_path)
        assert "~" not in str(storage.resolved_log_db_path)

    def test_frozen_config(self):
        config = LLMConfig()
        with pytest.raises(AttributeError):
            config.model = "changed"
