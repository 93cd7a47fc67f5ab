"""Tests for the service descriptor model and its JSON files."""

import json

import pytest
from pydantic import ValidationError

from svckit.descriptor import (
    LoggingSpec,
    LogTarget,
    ServiceSpec,
    load_descriptor,
    save_descriptor,
)
from svckit.descriptor.schema import salvage_spec


class TestServiceSpec:
    def test_defaults(self):
        spec = ServiceSpec(name="demo")
        assert spec.args == []
        assert spec.environment == {}
        assert spec.keep_alive is False
        assert spec.restart_delay == 0
        assert spec.logging.stdout.use_default
        assert spec.logging.stderr.use_default

    @pytest.mark.parametrize("name", ["", "with space", "a/b"])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            ServiceSpec(name=name)

    def test_negative_restart_delay(self):
        with pytest.raises(ValidationError):
            ServiceSpec(name="demo", restart_delay=-1)

    def test_command(self):
        spec = ServiceSpec(name="demo", executable="/usr/bin/demo", args=["--port", "8080"])
        assert spec.command == ["/usr/bin/demo", "--port", "8080"]

    def test_command_without_executable(self):
        assert ServiceSpec(name="demo").command == []

    def test_args_require_executable(self):
        with pytest.raises(ValidationError, match="args require an executable"):
            ServiceSpec(name="demo", args=["--flag"])

    @pytest.mark.parametrize("field, value", [
        ("description", "x\nExecStartPre=/bin/rm -rf /"),
        ("documentation", "a\rb"),
        ("working_directory", "/srv\n"),
        ("user", "demo\x00"),
        ("group", "st\x7faff"),
        ("executable", "/bin/true\n"),
        ("environment", {"A": "line1\nline2"}),
        ("environment", {"BAD\n": "x"}),
    ])
    def test_control_characters_rejected(self, field, value):
        with pytest.raises(ValidationError, match="control characters"):
            ServiceSpec(name="demo", **{field: value})

    def test_control_characters_in_args_rejected(self):
        with pytest.raises(ValidationError, match="control characters"):
            ServiceSpec(name="demo", executable="/bin/echo", args=["ok", "line\nbreak"])

    @pytest.mark.parametrize("key", ["", "A=B"])
    def test_invalid_environment_names(self, key):
        with pytest.raises(ValidationError, match="invalid environment variable name"):
            ServiceSpec(name="demo", environment={key: "x"})

    def test_surrounding_whitespace_trimmed(self):
        spec = ServiceSpec(name="demo", description=" Demo ", user="demo  ", working_directory=" /srv ")
        assert spec.description == "Demo"
        assert spec.user == "demo"
        assert spec.working_directory == "/srv"

    def test_args_keep_whitespace(self):
        spec = ServiceSpec(name="demo", executable="/bin/echo", args=[" padded "])
        assert spec.args == [" padded "]


class TestLogTarget:
    def test_explicit_path(self):
        target = LogTarget(path="/var/log/demo.log")
        assert not target.use_default

    def test_disabled(self):
        target = LogTarget(disabled=True)
        assert not target.use_default

    def test_disabled_with_path_rejected(self):
        with pytest.raises(ValidationError, match="both disabled"):
            LogTarget(disabled=True, path="/tmp/x.log")

    def test_dev_null_means_disabled(self):
        assert LogTarget(path="/dev/null") == LogTarget(disabled=True)

    def test_path_trimmed(self):
        assert LogTarget(path=" /tmp/x.log ").path == "/tmp/x.log"


class TestSalvageSpec:
    def test_valid_fields_kept(self):
        spec = salvage_spec("demo", {"executable": "/bin/true", "user": "demo"})
        assert spec == ServiceSpec(name="demo", executable="/bin/true", user="demo")

    def test_rejected_fields_dropped(self):
        spec = salvage_spec("demo", {
            "executable": "/bin/true",
            "environment": {"A": "x\ny"},
            "restart_delay": -5,
            "logging": {"stdout": {"path": "/tmp/a\nb"}},
        })
        assert spec == ServiceSpec(name="demo", executable="/bin/true")

    def test_args_dropped_with_rejected_executable(self):
        spec = salvage_spec("demo", {"executable": "bad\n", "args": ["x"], "user": "demo"})
        assert spec == ServiceSpec(name="demo", user="demo")

    def test_invalid_name_replaced(self):
        assert salvage_spec("demo", {"name": "with space"}).name == "demo"

    def test_invalid_fallback_name_raises(self):
        with pytest.raises(ValidationError):
            salvage_spec("with space", {})


class TestDescriptorFiles:
    def test_load_camel_case(self, tmp_path):
        path = tmp_path / "demo.json"
        path.write_text(json.dumps({
            "name": "demo",
            "executable": "/usr/bin/demo",
            "workingDirectory": "/srv/demo",
            "keepAlive": True,
            "restartDelay": 5,
            "environment": {"API_TOKEN": "x", "logLevel": "debug"},
            "logging": {"stdout": {"path": "/tmp/demo.out"}},
        }))

        spec = load_descriptor(path)

        assert spec.working_directory == "/srv/demo"
        assert spec.keep_alive is True
        assert spec.restart_delay == 5
        # Environment names are user data and keep their case
        assert spec.environment == {"API_TOKEN": "x", "logLevel": "debug"}
        assert spec.logging.stdout.path == "/tmp/demo.out"

    def test_save_load_round_trip(self, tmp_path):
        path = tmp_path / "specs" / "demo.json"
        spec = ServiceSpec(
            name="demo",
            executable="/usr/bin/demo",
            environment={"HOME_DIR": "/home/demo"},
            logging=LoggingSpec(stderr=LogTarget(disabled=True)),
        )

        save_descriptor(spec, path)
        data = json.loads(path.read_text())

        assert "workingDirectory" in data
        assert data["environment"] == {"HOME_DIR": "/home/demo"}
        assert load_descriptor(path) == spec

    def test_load_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"executable": "/bin/true"}))
        with pytest.raises(ValueError):
            load_descriptor(path)
