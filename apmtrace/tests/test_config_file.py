"""Tests for config file loading and priority."""

import os
import tempfile
from pathlib import Path
import unittest

from apmtrace import config
from apmtrace.errors import ConfigError
from apmtrace.exporter.recorders import ConsoleRecorder, LoggingRecorder
from apmtrace.processors.sampler import AlwaysSample, NeverSample, PercentageSampler


class TestConfigFileLoading(unittest.TestCase):
    """Test TOML config file loading."""

    def test_load_toml_config_basic(self):
        """Test loading a basic TOML config file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
            f.write("""
[recorder]
type = "logging"

[sampler]
type = "percentage"
percentage = 25

[deployment]
service_name = "checkout"
""")
            f.flush()

        try:
            loaded = config.load_toml_config(f.name)
            self.assertEqual(loaded["recorder"]["type"], "logging")
            self.assertEqual(loaded["sampler"]["percentage"], 25)
            self.assertEqual(loaded["deployment"]["service_name"], "checkout")
        finally:
            os.unlink(f.name)

    def test_load_toml_config_missing_file(self):
        """Test that loading missing file returns empty dict."""
        loaded = config.load_toml_config("/nonexistent/file.toml")
        self.assertEqual(loaded, {})

    def test_load_toml_config_invalid_toml(self):
        """Test that invalid TOML raises ConfigError."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
            f.write("invalid [toml content")
            f.flush()

        try:
            with self.assertRaises(ConfigError):
                config.load_toml_config(f.name)
        finally:
            os.unlink(f.name)

    def test_find_config_file_current_directory(self):
        """Test finding config file in current directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "apmtrace.toml"
            config_path.write_text("[sampler]\ntype = \"never\"")

            original_cwd = os.getcwd()
            try:
                os.chdir(tmpdir)

                found = config.find_config_file()
                self.assertIsNotNone(found)
                self.assertEqual(Path(found).name, "apmtrace.toml")
            finally:
                os.chdir(original_cwd)


class TestConfigPriority(unittest.TestCase):
    """Test that overrides beat environment, and environment beats the file."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = str(Path(self.tmpdir.name) / "apmtrace.toml")
        Path(self.path).write_text("[sampler]\ntype = \"never\"\n\n[recorder]\ntype = \"logging\"\n")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_file_values(self):
        loaded = config.load_config(self.path, environ={})
        self.assertEqual(loaded.sampler.type, "never")
        self.assertEqual(loaded.recorder.type, "logging")

    def test_env_overrides_file(self):
        loaded = config.load_config(
            self.path,
            environ={"APMTRACE_SAMPLER": "percentage", "APMTRACE_SAMPLE_PERCENTAGE": "10"},
        )
        self.assertEqual(loaded.sampler.type, "percentage")
        self.assertEqual(loaded.sampler.percentage, 10.0)
        self.assertEqual(loaded.recorder.type, "logging")

    def test_keyword_overrides_env(self):
        loaded = config.load_config(
            self.path,
            environ={"APMTRACE_SAMPLER": "percentage"},
            sampler={"type": "always"},
        )
        self.assertEqual(loaded.sampler.type, "always")

    def test_invalid_values_raise_config_error(self):
        with self.assertRaises(ConfigError):
            config.load_config(self.path, environ={}, sampler={"percentage": 150})
        with self.assertRaises(ConfigError):
            config.validate_config({"recorder": {"type": "http"}})
        with self.assertRaises(ConfigError):
            config.validate_config({"unknown": {}})


class TestBuildTracer(unittest.TestCase):
    def test_build_from_config(self):
        tracer = config.build_tracer(config.validate_config({
            "recorder": {"type": "logging"},
            "sampler": {"type": "percentage", "percentage": 50},
            "deployment": {"service_name": "checkout", "build_stamp": "7"},
        }))
        self.assertIsInstance(tracer.get_recorder(), LoggingRecorder)
        self.assertIsInstance(tracer.get_sampler(), PercentageSampler)
        self.assertEqual(tracer.get_sampler().percentage, 50)
        self.assertEqual(tracer.get_deployment_meta_data().service_name, "checkout")
        self.assertEqual(tracer.get_deployment_meta_data().build_stamp, "7")

    def test_defaults(self):
        tracer = config.build_tracer(config.TracerConfig())
        self.assertIsInstance(tracer.get_recorder(), ConsoleRecorder)
        self.assertIsInstance(tracer.get_sampler(), AlwaysSample)

    def test_keyword_collaborators_win(self):
        sampler = NeverSample()
        tracer = config.build_tracer(config.TracerConfig(), sampler=sampler)
        self.assertIs(tracer.get_sampler(), sampler)


if __name__ == "__main__":
    unittest.main()
