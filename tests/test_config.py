import pytest

from mixramp.config import CHUNK_SECONDS, DB_LADDER, MixRampConfig


def test_ladder_is_strictly_increasing():
    assert len(DB_LADDER) == 15
    assert DB_LADDER[0] == -90.0 and DB_LADDER[-1] == 6.0
    assert all(a < b for a, b in zip(DB_LADDER, DB_LADDER[1:]))


def test_defaults():
    config = MixRampConfig()
    assert config.chunk_seconds == CHUNK_SECONDS == 0.10
    assert config.ladder == DB_LADDER
    assert config.reference_db == 89.0
    assert config.log_level == "WARNING"
    assert config.log_file is None


def test_from_env():
    config = MixRampConfig.from_env({"MIXRAMP_LOG_LEVEL": "debug", "MIXRAMP_LOG_FILE": "/tmp/mixramp.log"})
    assert config.log_level == "DEBUG"
    assert config.log_file == "/tmp/mixramp.log"
    assert config.ladder == DB_LADDER


def test_from_env_ignores_empty_log_file():
    assert MixRampConfig.from_env({"MIXRAMP_LOG_FILE": ""}).log_file is None


@pytest.mark.parametrize("kwargs", [
    {"chunk_seconds": 0.0},
    {"ladder": (-10.0, -20.0)},
    {"ladder": (0.0, 0.0)},
])
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        MixRampConfig(**kwargs)
