"""
Tests for connector.config.loader.
"""

import json

import pytest

from connector.config.loader import load_gateway_config, parse_config_argument, resolve_base_dir
from connector.errors import StartupConfigError


class TestParseConfigArgument:

    def test_protocol_from_file_name(self):
        assert parse_config_argument(["guacd_rdp.json"]) == ("guacd_rdp.json", "rdp")

    def test_path_uses_basename(self):
        assert parse_config_argument(["conf/guacd_vnc.json"])[1] == "vnc"

    def test_missing_argument(self):
        with pytest.raises(StartupConfigError, match="Missing configuration file"):
            parse_config_argument([])

    @pytest.mark.parametrize("name", [
        "rdp.json",
        "guacd_.json",
        "guacd_rdp.yaml",
        "guacd_rdp.json.bak",
        "guacd_r-d-p.json",
    ])
    def test_bad_file_name(self, name):
        with pytest.raises(StartupConfigError, match="does not match"):
            parse_config_argument([name])


class TestResolveBaseDir:

    def test_existing_directory(self, tmp_path):
        assert resolve_base_dir({"script_path": str(tmp_path)}) == tmp_path.resolve()

    def test_unset(self):
        with pytest.raises(StartupConfigError, match="not set"):
            resolve_base_dir({})

    def test_missing_directory(self, tmp_path):
        with pytest.raises(StartupConfigError, match="cannot be resolved"):
            resolve_base_dir({"script_path": str(tmp_path / "nope")})

    def test_file_instead_of_directory(self, tmp_path):
        file_path = tmp_path / "file"
        file_path.write_text("x")
        with pytest.raises(StartupConfigError, match="not a directory"):
            resolve_base_dir({"script_path": str(file_path)})


class TestLoadGatewayConfig:

    def test_loads_both_files(self, config_dir):
        config = load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})
        assert config.protocol == "rdp"
        assert config.config_file == "guacd_rdp.json"
        assert config.credentials.secret == "s3cret-authtoken"
        assert config.credentials.username == "rdpuser"
        assert config.connection.protocol_type == "rdp"
        assert config.connection.default_width == 1280
        assert config.connection.use_credentials is True
        assert config.connection.guacd_port == 4823
        assert config.connection.log_level == "NORMAL"

    def test_missing_credentials_file(self, config_dir):
        (config_dir / "rdp_credentials").unlink()
        with pytest.raises(StartupConfigError, match="Cannot read credentials"):
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})

    def test_missing_config_file(self, config_dir):
        (config_dir / "guacd_rdp.json").unlink()
        with pytest.raises(StartupConfigError, match="Cannot read configuration"):
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})

    def test_invalid_json(self, config_dir):
        (config_dir / "guacd_rdp.json").write_text("{not json")
        with pytest.raises(StartupConfigError, match="Invalid JSON"):
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})

    def test_json_array_rejected(self, config_dir):
        (config_dir / "rdp_credentials").write_text("[]")
        with pytest.raises(StartupConfigError, match="must contain a JSON object"):
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})

    def test_short_key_rejected(self, config_dir):
        (config_dir / "rdp_credentials").write_text(json.dumps({
            "authtoken": "s", "guac_key": "too-short",
        }))
        with pytest.raises(StartupConfigError, match="guac_key"):
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})

    def test_validation_error_does_not_echo_secrets(self, config_dir):
        (config_dir / "rdp_credentials").write_text(json.dumps({
            "authtoken": "visible-secret", "guac_key": "leaky-key-value",
        }))
        with pytest.raises(StartupConfigError) as exc_info:
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})
        assert "leaky-key-value" not in str(exc_info.value)
        assert "visible-secret" not in str(exc_info.value)

    def test_invalid_connection_config(self, config_dir):
        (config_dir / "guacd_rdp.json").write_text(json.dumps({"settings": {}}))
        with pytest.raises(StartupConfigError, match="Invalid configuration"):
            load_gateway_config(["guacd_rdp.json"], {"script_path": str(config_dir)})

    def test_credentials_for_other_protocol(self, config_dir):
        (config_dir / "guacd_vnc.json").write_text(json.dumps({"type": "vnc"}))
        with pytest.raises(StartupConfigError, match="vnc_credentials"):
            load_gateway_config(["guacd_vnc.json"], {"script_path": str(config_dir)})
