"""
Tests for YAML configuration loading, validation and CLI overrides.

Run with:  python -m pytest command_console -v
"""

import pytest
import yaml

from command_console.config import (
    SAMPLE_CONFIG,
    ConfigurationManager,
    ConsoleConfig,
    create_argument_parser,
    setup_configuration,
)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Work in an empty directory so auto-discovery finds nothing stray"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_yaml(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(data, f)
    return path


# ============================================================
# Loading
# ============================================================

class TestConfigLoading:
    """Tests for reading configuration files"""

    def test_missing_config_file(self, config_dir):
        """Missing file falls back to defaults"""
        config = ConfigurationManager().load_config("nonexistent.yaml")
        assert config == ConsoleConfig()

    def test_no_config_found_uses_defaults(self, config_dir):
        manager = ConfigurationManager()
        config = manager.load_config()
        assert config.history.capacity == 50
        assert manager.config_file_path is None

    def test_auto_discovery_in_working_directory(self, config_dir):
        write_yaml(config_dir / "command_console.yaml", {"history": {"capacity": 12}})
        manager = ConfigurationManager()
        config = manager.load_config()
        assert config.history.capacity == 12
        assert manager.config_file_path == config_dir / "command_console.yaml"

    def test_corrupted_yaml_handling(self, config_dir):
        """Should not crash on corrupted YAML"""
        path = config_dir / "corrupted.yaml"
        path.write_text("history: [unclosed\n  capacity: : :\n", encoding='utf-8')
        config = ConfigurationManager().load_config(str(path))
        assert config == ConsoleConfig()

    def test_empty_config_file(self, config_dir):
        path = config_dir / "empty.yaml"
        path.write_text("", encoding='utf-8')
        config = ConfigurationManager().load_config(str(path))
        assert config == ConsoleConfig()

    def test_non_mapping_top_level(self, config_dir):
        path = config_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding='utf-8')
        config = ConfigurationManager().load_config(str(path))
        assert config == ConsoleConfig()

    def test_partial_config_completion(self, config_dir):
        """Missing sections keep their defaults"""
        path = write_yaml(config_dir / "partial.yaml", {"scripts": {"max_commands": 16}})
        config = ConfigurationManager().load_config(str(path))
        assert config.scripts.max_commands == 16
        assert config.scripts.script_dir == "."
        assert config.queue.max_commands_per_tick == 0
        assert config.parser.max_tokens == 10000

    def test_variables_become_lowercase_strings(self, config_dir):
        path = write_yaml(config_dir / "vars.yaml", {"variables": {"SV.Rate": 60}})
        config = ConfigurationManager().load_config(str(path))
        assert config.variables == {"sv.rate": "60"}

    def test_sample_config_matches_defaults(self):
        assert ConsoleConfig.from_dict(yaml.safe_load(SAMPLE_CONFIG)) == ConsoleConfig()

    def test_create_sample_config(self, config_dir):
        path = config_dir / "sample.yaml"
        assert ConfigurationManager().create_sample_config(str(path))
        assert path.read_text(encoding='utf-8') == SAMPLE_CONFIG

    def test_config_save_load_roundtrip(self, config_dir):
        manager = ConfigurationManager()
        original = ConsoleConfig()
        original.history.capacity = 20
        original.scripts.startup_script = "autoexec.cfg"
        original.queue.max_commands_per_tick = 8
        original.variables = {"sv.rate": "30"}
        manager.config = original

        assert manager.save_config(str(config_dir / "nested" / "saved.yaml"))

        loaded = ConfigurationManager().load_config(str(config_dir / "nested" / "saved.yaml"))
        assert loaded == original

    def test_get_config_returns_copy(self, config_dir):
        manager = ConfigurationManager()
        manager.load_config()
        copy = manager.get_config()
        copy.history.capacity = 3
        assert manager.config.history.capacity == 50


# ============================================================
# Validation
# ============================================================

class TestConfigValidation:
    """Tests for validate_config"""

    def validate(self, config):
        manager = ConfigurationManager()
        manager.config = config
        return manager.validate_config()

    def test_defaults_are_valid(self, config_dir):
        assert self.validate(ConsoleConfig()) == (True, [])

    def test_history_capacity_too_small(self, config_dir):
        config = ConsoleConfig()
        config.history.capacity = 1
        is_valid, errors = self.validate(config)
        assert not is_valid
        assert any("history capacity" in error.lower() for error in errors)

    def test_negative_per_tick_limit(self, config_dir):
        config = ConsoleConfig()
        config.queue.max_commands_per_tick = -1
        is_valid, errors = self.validate(config)
        assert not is_valid
        assert any("max_commands_per_tick" in error for error in errors)

    def test_missing_script_directory(self, config_dir):
        config = ConsoleConfig()
        config.scripts.script_dir = str(config_dir / "does-not-exist")
        is_valid, errors = self.validate(config)
        assert not is_valid
        assert any("script directory" in error.lower() for error in errors)

    def test_numeric_strings_are_coerced(self, config_dir):
        path = write_yaml(config_dir / "strings.yaml", {
            "history": {"capacity": "10"},
            "queue": {"max_commands_per_tick": "3"},
        })
        config = ConfigurationManager().load_config(str(path))
        assert config.history.capacity == 10
        assert config.queue.max_commands_per_tick == 3
        assert self.validate(config) == (True, [])

    def test_non_numeric_value_is_reported(self, config_dir):
        config = ConsoleConfig.from_dict({"history": {"capacity": "lots"}})
        is_valid, errors = self.validate(config)
        assert not is_valid
        assert any("history capacity must be an integer" in error.lower() for error in errors)

    def test_non_numeric_value_in_file_exits(self, config_dir):
        path = write_yaml(config_dir / "bad.yaml", {"history": {"capacity": "lots"}})
        config, should_exit = setup_configuration(["-c", str(path)])
        assert should_exit
        assert config.history.capacity == "lots"

    def test_verbose_and_quiet_conflict(self, config_dir):
        config = ConsoleConfig()
        config.console.verbose = True
        config.console.quiet = True
        is_valid, errors = self.validate(config)
        assert not is_valid
        assert any("verbose" in error for error in errors)


# ============================================================
# Command line
# ============================================================

class TestCommandLine:
    """Tests for CLI overrides and setup_configuration"""

    def test_cli_overrides_file(self, config_dir):
        path = write_yaml(config_dir / "base.yaml", {"history": {"capacity": 12}})
        args = create_argument_parser().parse_args([
            "-c", str(path),
            "--history-size", "30",
            "--max-per-tick", "4",
            "--set", "sv.rate=30",
            "--set", "Cl.Fov = 75",
            "-v",
        ])

        manager = ConfigurationManager()
        manager.load_config(args.config)
        config = manager.merge_cli_args(args)

        assert config.history.capacity == 30
        assert config.queue.max_commands_per_tick == 4
        assert config.variables == {"sv.rate": "30", "cl.fov": "75"}
        assert config.console.verbose

    def test_create_config_exits(self, config_dir):
        config, should_exit = setup_configuration(["--create-config", "sample.yaml"])
        assert config is None
        assert should_exit
        assert (config_dir / "sample.yaml").exists()

    def test_invalid_config_exits(self, config_dir):
        config, should_exit = setup_configuration(["--history-size", "1"])
        assert should_exit
        assert config.history.capacity == 1

    def test_valid_config_continues(self, config_dir):
        config, should_exit = setup_configuration(["--startup-script", "autoexec.cfg"])
        assert not should_exit
        assert config.scripts.startup_script == "autoexec.cfg"

    def test_save_config_writes_effective_settings(self, config_dir):
        config, should_exit = setup_configuration(["--max-per-tick", "2",
                                                   "--save-config", "effective.yaml"])
        assert not should_exit
        saved = yaml.safe_load((config_dir / "effective.yaml").read_text(encoding='utf-8'))
        assert saved["queue"]["max_commands_per_tick"] == 2
