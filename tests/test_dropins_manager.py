"""Tests for dropins_manager.py - CLI entry point."""

from unittest.mock import patch

import pytest

from dropins_manager.dropins_manager import build_parser, main
from dropins_manager.output import get_output


class TestBuildParser:

    def test_verbosity_count(self):
        args = build_parser().parse_args(["-vv", "scan"])
        assert args.verbose == 2
        assert args.command == "scan"

    def test_no_command(self):
        assert build_parser().parse_args([]).command is None


class TestMain:

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "deploy" in capsys.readouterr().out

    def test_configures_output(self):
        with patch("dropins_manager.dropins_manager.DeployCommands.process_cli_command"):
            main(["-vvv", "--no-color", "deploy"])
        assert get_output().verbosity == 3
        assert get_output().use_color is False

    @patch("dropins_manager.dropins_manager.DeployCommands.process_cli_command")
    def test_dispatches_deploy(self, mock_process):
        main(["deploy", "--carbon-home", "/srv/carbon"])
        args = mock_process.call_args[0][0]
        assert args.command == "deploy"
        assert args.carbon_home == "/srv/carbon"

    @patch("dropins_manager.dropins_manager.ConfigCommands.process_cli_command")
    def test_dispatches_config(self, mock_process):
        main(["config", "where"])
        assert mock_process.call_args[0][0].config_command == "where"

    def test_deploy_end_to_end(self, carbon_home, make_bundle, monkeypatch, tmp_path):
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "user")
        make_bundle(carbon_home / "osgi" / "dropins" / "b.jar", symbolic_name="B", version="2.0")

        main(["deploy", "--carbon-home", str(carbon_home)])

        registry = carbon_home / "osgi" / "default" / "configuration" / "org.eclipse.equinox.simpleconfigurator"
        assert (registry / "bundles.info").read_text() == "#version=1\nB,2.0,../../dropins/b.jar,4,true\n"
        assert (registry / "previous.info").exists()

    def test_invalid_command_exits(self):
        with pytest.raises(SystemExit):
            main(["bogus"])
