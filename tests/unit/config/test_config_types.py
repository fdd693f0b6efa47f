"""Unit tests for typed configuration dataclasses."""

from hmatch.config_types import AppConfig, KnowledgeConfig, OutputConfig


def test_output_config_defaults():
    config = OutputConfig()

    assert config.format == "text"
    assert config.precision == 3
    assert config.show_errors is True


def test_knowledge_config_defaults():
    assert KnowledgeConfig().skills is True


def test_app_config_to_dict():
    config = AppConfig(output=OutputConfig(format="json"))

    data = config.to_dict()

    assert data["log_level"] == "INFO"
    assert data["output"]["format"] == "json"
    assert data["knowledge"] == {"skills": True}


def test_app_config_from_dict_round_trip():
    original = AppConfig(log_level="DEBUG", knowledge=KnowledgeConfig(skills=False))

    restored = AppConfig.from_dict(original.to_dict())

    assert restored == original


def test_app_config_from_partial_dict():
    config = AppConfig.from_dict({"output": {"precision": 1}})

    assert config.log_level == "INFO"
    assert config.output.precision == 1
    assert config.output.format == "text"
