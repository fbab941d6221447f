"""Tests for models and configuration loading."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from http_prober.core.config import ProbeSettings, load_commands
from http_prober.core.exceptions import ConfigurationError
from http_prober.core.models import ProbeCommand, ProbeSummary


class TestProbeCommand:
    """Tests for probe command templates."""

    def test_defaults(self):
        command = ProbeCommand()

        assert command.method == "GET"
        assert command.resource == "/"
        assert command.protocols() == ("http", "https")

    def test_explicit_protocol(self):
        assert ProbeCommand(protocol="HTTPS").protocols() == ("https",)

    def test_unknown_protocol_rejected(self):
        with pytest.raises(ValidationError):
            ProbeCommand(protocol="ftp")

    def test_method_normalized(self):
        assert ProbeCommand(method=" post ").method == "POST"
        assert ProbeCommand(method="").method == "GET"

    def test_resource_gets_leading_slash(self):
        assert ProbeCommand(resource="health").resource == "/health"

    def test_immutable(self):
        command = ProbeCommand()

        with pytest.raises(ValidationError):
            command.method = "POST"

    def test_credentials(self):
        assert ProbeCommand(username="admin").has_credentials is True
        assert ProbeCommand().has_credentials is False


class TestParseCommand:
    """Tests for the short command form."""

    def test_bare_resource(self):
        command = ProbeCommand.parse("/health")

        assert command.method == "GET"
        assert command.resource == "/health"
        assert command.protocol == ""

    def test_method_and_resource(self):
        command = ProbeCommand.parse("post:/api/items")

        assert command.method == "POST"
        assert command.resource == "/api/items"

    def test_protocol_method_resource(self):
        command = ProbeCommand.parse("https:get:/")

        assert command.protocol == "https"
        assert command.method == "GET"

    def test_resource_may_contain_colons(self):
        command = ProbeCommand.parse("get:/a:b")

        assert command.resource == "/a:b"

    def test_missing_resource(self):
        with pytest.raises(ConfigurationError):
            ProbeCommand.parse("get")

    def test_too_many_parts(self):
        with pytest.raises(ConfigurationError):
            ProbeCommand.parse("crawl:http:get:/")

    def test_bad_protocol(self):
        with pytest.raises(ConfigurationError):
            ProbeCommand.parse("gopher:get:/")


class TestProbeSummary:
    """Tests for summary warnings."""

    def test_no_calls(self):
        assert ProbeSummary().warning == "no.calls"

    def test_no_successful_calls(self):
        assert ProbeSummary(total=3, failures=3).warning == "no.successful.calls"

    def test_no_warning(self):
        assert ProbeSummary(total=3, failures=2, successful=1).warning is None


class TestLoadCommands:
    """Tests for command files."""

    def test_json_file(self, tmp_path: Path):
        path = tmp_path / "probes.json"
        path.write_text(json.dumps({
            "commands": [
                {
                    "method": "GET",
                    "resource": "/health",
                    "protocol": "http",
                    "headers": ["Accept: application/json"],
                },
                {"resource": "/login", "method": "POST", "username": "u", "password": "p"},
            ]
        }))

        commands = load_commands(path)

        assert len(commands) == 2
        assert commands[0].headers == ("Accept: application/json",)
        assert commands[1].has_credentials is True

    def test_yaml_list(self, tmp_path: Path):
        path = tmp_path / "probes.yaml"
        path.write_text(yaml.dump([{"resource": "/"}, {"resource": "/metrics", "protocol": "https"}]))

        commands = load_commands(path)

        assert [c.resource for c in commands] == ["/", "/metrics"]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "probes.yaml"
        path.write_text("")

        assert load_commands(path) == []

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            load_commands(tmp_path / "nope.json")

    def test_invalid_command(self, tmp_path: Path):
        path = tmp_path / "probes.json"
        path.write_text(json.dumps({"commands": [{"protocol": "ftp"}]}))

        with pytest.raises(ConfigurationError):
            load_commands(path)

    def test_unparsable_json(self, tmp_path: Path):
        path = tmp_path / "probes.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            load_commands(path)


class TestProbeSettings:
    """Tests for probe settings."""

    def test_defaults(self):
        settings = ProbeSettings()

        assert settings.retry_count == 0
        assert settings.retry_wait == 0
        assert settings.warmup_seconds == 9
        assert settings.timeout == 30
        assert settings.max_idle_connections == 10
        assert settings.target_ports == []

    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "http-prober.yaml"
        path.write_text(yaml.dump({"retry_count": 3, "target_ports": [8080], "print_state": True}))

        settings = ProbeSettings.from_yaml(path)

        assert settings.retry_count == 3
        assert settings.target_ports == [8080]
        assert settings.print_state is True

    def test_negative_retry_count_rejected(self):
        with pytest.raises(ValidationError):
            ProbeSettings(retry_count=-1)
