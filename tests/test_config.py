"""Tests for configuration helpers."""

import logging

import pytest

from cloze_memorizer import config


class TestLoadLogLevel:

    @pytest.mark.parametrize("name, expected", [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        (" warning ", logging.WARNING),
    ])
    def test_known_levels(self, name, expected):
        assert config.load_log_level(name) == expected

    def test_default_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "ERROR")
        assert config.load_log_level() == logging.ERROR

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            config.load_log_level("chatty")


class TestEnvInt:

    def test_missing_uses_default(self, monkeypatch):
        monkeypatch.delenv("CLOZE_TEST_VALUE", raising=False)
        assert config._env_int("CLOZE_TEST_VALUE", 7) == 7

    def test_blank_uses_default(self, monkeypatch):
        monkeypatch.setenv("CLOZE_TEST_VALUE", "  ")
        assert config._env_int("CLOZE_TEST_VALUE", 7) == 7

    def test_reads_integer(self, monkeypatch):
        monkeypatch.setenv("CLOZE_TEST_VALUE", "12")
        assert config._env_int("CLOZE_TEST_VALUE", 7) == 12

    def test_rejects_non_integer(self, monkeypatch):
        monkeypatch.setenv("CLOZE_TEST_VALUE", "ten")
        with pytest.raises(ValueError, match="CLOZE_TEST_VALUE"):
            config._env_int("CLOZE_TEST_VALUE", 7)

    def test_out_of_range(self, monkeypatch):
        monkeypatch.setenv("CLOZE_TEST_VALUE", "0")
        with pytest.raises(ValueError, match="between 1 and 100"):
            config._env_int("CLOZE_TEST_VALUE", 7, minimum=1, maximum=100)


class TestLoadTuning:

    def test_defaults_without_overrides(self):
        assert config.load_tuning() == config._TUNING_DEFAULTS
        assert config.PERCENTAGE_STEP == 5

    def test_applies_overrides(self, monkeypatch):
        monkeypatch.setenv("CLOZE_PERCENTAGE_STEP", "10")
        monkeypatch.setenv("CLOZE_VERSE_MODE_THRESHOLD", "70")
        values = config.load_tuning()
        assert values["PERCENTAGE_STEP"] == 10
        assert config.PERCENTAGE_STEP == 10
        assert config.VERSE_MODE_THRESHOLD == 70

    def test_unset_variable_restores_default(self, monkeypatch):
        monkeypatch.setattr(config, "PERCENTAGE_STEP", 25)
        config.load_tuning()
        assert config.PERCENTAGE_STEP == 5

    @pytest.mark.parametrize("raw", ["five", "0", "-5", "101"])
    def test_rejects_bad_step(self, monkeypatch, raw):
        monkeypatch.setenv("CLOZE_PERCENTAGE_STEP", raw)
        with pytest.raises(ValueError, match="CLOZE_PERCENTAGE_STEP"):
            config.load_tuning()

    def test_bad_value_leaves_settings_untouched(self, monkeypatch):
        monkeypatch.setenv("CLOZE_MIN_DELETED_WORDS", "3")
        monkeypatch.setenv("CLOZE_DEFAULT_PERCENTAGE", "250")
        with pytest.raises(ValueError, match="CLOZE_DEFAULT_PERCENTAGE"):
            config.load_tuning()
        assert config.MIN_DELETED_WORDS == 2

    def test_step_override_reaches_session(self, monkeypatch):
        from cloze_memorizer.session.practice import PracticeSession

        monkeypatch.setenv("CLOZE_PERCENTAGE_STEP", "10")
        config.load_tuning()
        session = PracticeSession("one two three four five six seven eight nine ten", percentage=20)
        session.harder()
        assert session.percentage == 30

    def test_importing_never_raises(self, monkeypatch):
        import importlib

        monkeypatch.setenv("CLOZE_PERCENTAGE_STEP", "five")
        reloaded = importlib.reload(config)
        assert reloaded.PERCENTAGE_STEP == 5
