from pathlib import Path

import pytest

from deployment.constants import CONSTRUCTOR_PARAMS_DIR
from deployment.params import ConfigError
from deployment.utils import _load_yaml, get_artifact_filepath, validate_config
from tests.conftest import CHAIN_ID


@pytest.fixture
def config(tmp_path):
    return {
        "deployment": {"chain_id": CHAIN_ID},
        "artifacts": {"dir": str(tmp_path), "filename": "registry.json"},
        "contracts": ["PaymentSettlement"],
    }


def test_validate_config_returns_registry_filepath(config, tmp_path):
    assert validate_config(config, chain_id=CHAIN_ID, live=True) == tmp_path / "registry.json"


def test_chain_mismatch_only_matters_for_live_networks(config):
    with pytest.raises(ConfigError, match="does not match"):
        validate_config(config, chain_id=1, live=True)

    validate_config(config, chain_id=1337, live=False)


@pytest.mark.parametrize(
    "broken",
    [
        lambda c: c.pop("deployment"),
        lambda c: c["deployment"].pop("chain_id"),
        lambda c: c.pop("contracts"),
        lambda c: c["artifacts"].pop("filename"),
    ],
)
def test_invalid_config(config, broken):
    broken(config)
    with pytest.raises(ConfigError):
        validate_config(config, chain_id=CHAIN_ID, live=True)


def test_empty_params_file():
    with pytest.raises(ConfigError, match="empty or malformed"):
        validate_config(None, chain_id=CHAIN_ID, live=True)


def test_shipped_params_files_are_valid():
    for filename in ("payment-settlement.yml", "upgrade-payment-settlement.yml"):
        config = _load_yaml(CONSTRUCTOR_PARAMS_DIR / "sepolia" / filename)
        registry_filepath = validate_config(config, chain_id=11155111, live=True)
        assert registry_filepath == Path("deployment/artifacts/payment-settlement.json")


def test_artifact_filepath_default_dir():
    filepath = get_artifact_filepath({"artifacts": {"filename": "x.json"}})
    assert filepath.name == "x.json"
    assert filepath.parent.name == "artifacts"
