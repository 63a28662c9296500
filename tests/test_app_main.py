"""
Tests for the process entry point (connector.app.main).
"""

import logging

import pytest

from connector import app as app_module

FD_VAR = "SPANK_ISO_NETNS_LISTENING_FD_0"
PORT_VAR = "SPANK_ISO_NETNS_LISTENING_PORT_0"


@pytest.fixture(autouse=True)
def no_logging_setup(mocker):
    """Keep pytest's log capture in place."""
    return mocker.patch.object(app_module, "setup_json_logging")


@pytest.fixture
def environ(monkeypatch, config_dir):
    monkeypatch.setenv("script_path", str(config_dir))
    monkeypatch.setenv(FD_VAR, "use-insecure-testing-port")
    monkeypatch.setenv(PORT_VAR, "0")
    return monkeypatch


class TestMain:

    def test_missing_argument(self, environ):
        assert app_module.main([]) == 1

    def test_bad_file_name(self, environ):
        assert app_module.main(["rdp.json"]) == 1

    def test_missing_script_path(self, environ):
        environ.delenv("script_path")
        assert app_module.main(["guacd_rdp.json"]) == 1

    def test_bad_key(self, environ, config_dir):
        (config_dir / "rdp_credentials").write_text('{"authtoken": "x", "guac_key": "short"}')
        assert app_module.main(["guacd_rdp.json"]) == 1

    def test_invalid_fd(self, environ):
        environ.setenv(FD_VAR, "not-a-number")
        assert app_module.main(["guacd_rdp.json"]) == 1

    def test_unset_fd(self, environ):
        environ.delenv(FD_VAR)
        assert app_module.main(["guacd_rdp.json"]) == 1

    def test_errors_logged(self, environ, caplog):
        app_module.main([])
        assert "Error reading configuration" in caplog.text

    def test_serves_in_port_mode(self, environ, mocker, caplog):
        caplog.set_level(logging.INFO, logger="guacd-connector")
        serve = mocker.patch("werkzeug.serving.BaseWSGIServer.serve_forever")
        assert app_module.main(["guacd_rdp.json"]) == 0
        serve.assert_called_once()
        assert "insecure testing mode" in caplog.text

    def test_keyboard_interrupt_exits_cleanly(self, environ, mocker):
        mocker.patch("werkzeug.serving.BaseWSGIServer.serve_forever", side_effect=KeyboardInterrupt)
        assert app_module.main(["guacd_rdp.json"]) == 0

    def test_log_level_from_env(self, environ, no_logging_setup):
        environ.setenv("LOG_LEVEL", "DEBUG")
        app_module.main([])
        no_logging_setup.assert_called_once_with(level="DEBUG")


class TestModuleEntryPoint:

    def test_python_m_connector_runs_main(self, mocker):
        import runpy

        main = mocker.patch("connector.app.main", return_value=0)
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("connector", run_name="__main__")
        assert exc_info.value.code == 0
        main.assert_called_once_with()

    def test_exit_code_propagated(self, mocker):
        import runpy

        mocker.patch("connector.app.main", return_value=1)
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("connector", run_name="__main__")
        assert exc_info.value.code == 1
