import pytest

from oxibloom.config import OxibloomConfig, load_config


class TestConfig:
    def test_defaults(self):
        """Ensure the dataclass has the end-to-end defaults."""
        config = load_config({})
        assert config == OxibloomConfig()
        assert config.item_count == 1_000_000
        assert config.fp_rate == 0.01
        assert config.buffer_length == 1024

    def test_environment_overrides(self):
        config = load_config(
            {
                "OXIBLOOM_ITEM_COUNT": "5000",
                "OXIBLOOM_FP_RATE": "0.001",
                "OXIBLOOM_BUFFER_LENGTH": "4096",
                "OXIBLOOM_SAMPLE_COUNT": "",
                "UNRELATED": "x",
            }
        )
        assert config.item_count == 5000
        assert config.fp_rate == 0.001
        assert config.buffer_length == 4096
        assert config.sample_count == OxibloomConfig().sample_count

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="OXIBLOOM_ITEM_COUNT"):
            load_config({"OXIBLOOM_ITEM_COUNT": "lots"})
