"""
Configuration system for the command console
Supports YAML files, CLI overrides, and programmatic access
"""

from __future__ import annotations

import argparse
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from command_console.builtins import DEFAULT_MAX_SCRIPT_COMMANDS
from command_console.history import DEFAULT_CAPACITY
from command_console.tokenizer import MAX_TOKENS

DEFAULT_CONFIG_NAME = "command_console.yaml"


def _as_int(value: Any) -> Any:
    """Coerce YAML scalars like "10" to int; anything else is returned unchanged for validate_config to report"""
    if isinstance(value, bool):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return value


@dataclass
class HistoryConfig:
    """Command history settings"""
    capacity: int = DEFAULT_CAPACITY

    def to_dict(self) -> Dict[str, Any]:
        return {'capacity': self.capacity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HistoryConfig':
        return cls(capacity=_as_int(data.get('capacity', DEFAULT_CAPACITY)))


@dataclass
class ParserConfig:
    """Tokenizer limits"""
    max_tokens: int = MAX_TOKENS

    def to_dict(self) -> Dict[str, Any]:
        return {'max_tokens': self.max_tokens}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParserConfig':
        return cls(max_tokens=_as_int(data.get('max_tokens', MAX_TOKENS)))


@dataclass
class ScriptConfig:
    """Script (exec) settings"""
    max_commands: int = DEFAULT_MAX_SCRIPT_COMMANDS
    script_dir: str = "."
    startup_script: Optional[str] = None  # queued as "exec -s <file>" on init

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_commands': self.max_commands,
            'script_dir': self.script_dir,
            'startup_script': self.startup_script,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScriptConfig':
        return cls(
            max_commands=_as_int(data.get('max_commands', DEFAULT_MAX_SCRIPT_COMMANDS)),
            script_dir=str(data.get('script_dir') or "."),
            startup_script=data.get('startup_script'),
        )


@dataclass
class QueueConfig:
    """Execution queue settings"""
    max_commands_per_tick: int = 0  # 0 = drain until empty or gated

    def to_dict(self) -> Dict[str, Any]:
        return {'max_commands_per_tick': self.max_commands_per_tick}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueueConfig':
        return cls(max_commands_per_tick=_as_int(data.get('max_commands_per_tick', 0)))


@dataclass
class LoggingConfig:
    """Console messages logging level configuration"""
    verbose: bool = False
    quiet: bool = False

    @property
    def level(self) -> int:
        if self.verbose:
            return logging.DEBUG
        if self.quiet:
            return logging.WARNING
        return logging.INFO


@dataclass
class ConsoleConfig:
    """Complete configuration for the command console"""
    history: HistoryConfig = field(default_factory=HistoryConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    scripts: ScriptConfig = field(default_factory=ScriptConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    console: LoggingConfig = field(default_factory=LoggingConfig)

    # Initial values for console variables, applied at init
    variables: Dict[str, str] = field(default_factory=dict)

    config_version: str = "1.0"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        return {
            'config_version': self.config_version,
            'history': self.history.to_dict(),
            'parser': self.parser.to_dict(),
            'scripts': self.scripts.to_dict(),
            'queue': self.queue.to_dict(),
            'console': {
                'verbose': self.console.verbose,
                'quiet': self.console.quiet,
            },
            'variables': dict(self.variables),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConsoleConfig':
        """Create from dictionary (YAML loading), missing sections keep defaults"""
        config = cls()

        if 'config_version' in data:
            config.config_version = str(data['config_version'])
        if 'history' in data:
            config.history = HistoryConfig.from_dict(data['history'] or {})
        if 'parser' in data:
            config.parser = ParserConfig.from_dict(data['parser'] or {})
        if 'scripts' in data:
            config.scripts = ScriptConfig.from_dict(data['scripts'] or {})
        if 'queue' in data:
            config.queue = QueueConfig.from_dict(data['queue'] or {})
        if 'console' in data:
            console_data = data['console'] or {}
            config.console.verbose = console_data.get('verbose', False)
            config.console.quiet = console_data.get('quiet', False)
        if 'variables' in data:
            # YAML turns 60 into an int; variables are always strings
            config.variables = {str(k).lower(): str(v) for k, v in (data['variables'] or {}).items()}

        return config


class ConfigurationManager:
    """
    Manages configuration loading, saving, and validation
    """

    def __init__(self):
        self.config: Optional[ConsoleConfig] = None
        self.config_file_path: Optional[Path] = None
        self.logger = logging.getLogger(__name__)

        # Standard config file locations (in order of preference)
        self.config_search_paths = [
            Path.cwd() / DEFAULT_CONFIG_NAME,
            Path.cwd() / "config" / DEFAULT_CONFIG_NAME,
            Path.home() / ".config" / "command_console" / "config.yaml",
        ]

    def load_config(self, config_file: Optional[str] = None) -> ConsoleConfig:
        """
        Load configuration from file with fallback chain

        Args:
            config_file: Specific config file path, or None for auto-discovery

        Returns:
            Loaded configuration object (defaults if nothing usable was found)
        """
        self.config = ConsoleConfig()

        if config_file:
            config_path = Path(config_file)
            if config_path.exists():
                self.config = self._load_yaml_file(config_path)
                self.config_file_path = config_path
                self.logger.info(f"Loaded config from: {config_path}")
            else:
                self.logger.warning(f"Config file not found: {config_path}")
                self.logger.info("Using default configuration")
        else:
            for path in self.config_search_paths:
                if path.exists():
                    self.config = self._load_yaml_file(path)
                    self.config_file_path = path
                    self.logger.info(f"Auto-discovered config: {path}")
                    break
            else:
                self.logger.info("No config file found, using defaults")

        return self.config

    def _load_yaml_file(self, file_path: Path) -> ConsoleConfig:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                yaml_data = yaml.safe_load(f) or {}
            if not isinstance(yaml_data, dict):
                raise ValueError(f"expected a mapping at top level, got {type(yaml_data).__name__}")
            return ConsoleConfig.from_dict(yaml_data)

        except (OSError, yaml.YAMLError, ValueError, AttributeError) as e:
            self.logger.error(f"Error loading config file {file_path}: {e}")
            return ConsoleConfig()

    def merge_cli_args(self, args: argparse.Namespace) -> ConsoleConfig:
        """
        Merge CLI arguments into configuration (CLI takes precedence)
        """
        if self.config is None:
            self.config = ConsoleConfig()

        if getattr(args, 'script_dir', None):
            self.config.scripts.script_dir = args.script_dir
        if getattr(args, 'startup_script', None):
            self.config.scripts.startup_script = args.startup_script
        if getattr(args, 'history_size', None) is not None:
            self.config.history.capacity = args.history_size
        if getattr(args, 'max_per_tick', None) is not None:
            self.config.queue.max_commands_per_tick = args.max_per_tick

        for assignment in getattr(args, 'set', None) or []:
            name, _, value = assignment.partition('=')
            self.config.variables[name.strip().lower()] = value.strip()

        if getattr(args, 'verbose', False):
            self.config.console.verbose = True
        if getattr(args, 'quiet', False):
            self.config.console.quiet = True

        return self.config

    def save_config(self, file_path: Optional[str] = None) -> bool:
        """
        Save current configuration to a YAML file

        Returns:
            True if saved successfully
        """
        if file_path:
            target_path = Path(file_path)
        elif self.config_file_path:
            target_path = self.config_file_path
        else:
            target_path = Path(DEFAULT_CONFIG_NAME)

        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            with open(target_path, 'w', encoding='utf-8') as f:
                f.write("# Command console configuration\n")
                f.write(f"# Version: {self.config.config_version}\n\n")
                yaml.dump(self.config.to_dict(), f,
                          default_flow_style=False,
                          sort_keys=False,
                          indent=2)

            self.logger.info(f"Configuration saved to: {target_path}")
            return True

        except OSError as e:
            self.logger.error(f"Error saving config to {target_path}: {e}")
            return False

    def create_sample_config(self, file_path: str = "command_console_sample.yaml") -> bool:
        """Create a sample configuration file with comments"""
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(SAMPLE_CONFIG)
            self.logger.info(f"Sample configuration created: {file_path}")
            return True
        except OSError as e:
            self.logger.error(f"Error creating sample config: {e}")
            return False

    def validate_config(self) -> tuple[bool, list[str]]:
        """
        Validate configuration for common issues

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        config = self.config or ConsoleConfig()

        # (label, value, minimum)
        limits = [
            ("History capacity", config.history.capacity, 2),
            ("max_tokens", config.parser.max_tokens, 1),
            ("script max_commands", config.scripts.max_commands, 1),
            ("max_commands_per_tick", config.queue.max_commands_per_tick, 0),
        ]
        for label, value, minimum in limits:
            if not isinstance(value, int) or isinstance(value, bool):
                errors.append(f"{label} must be an integer: {value!r}")
            elif value < minimum:
                errors.append(f"{label} must be at least {minimum}: {value}")

        if not Path(config.scripts.script_dir).expanduser().is_dir():
            errors.append(f"Script directory does not exist: {config.scripts.script_dir}")

        if config.console.verbose and config.console.quiet:
            errors.append("Console cannot be both verbose and quiet")

        return len(errors) == 0, errors

    def get_config(self) -> ConsoleConfig:
        """Get a copy of the current configuration"""
        return deepcopy(self.config)


SAMPLE_CONFIG = """# Command Console Configuration File

# =============================================================================
# HISTORY
# =============================================================================
history:
  capacity: 50                    # Ring size; capacity - 1 lines can be recalled

# =============================================================================
# TOKENIZER
# =============================================================================
parser:
  max_tokens: 10000               # Tokens kept from a single line

# =============================================================================
# SCRIPTS (exec)
# =============================================================================
scripts:
  max_commands: 128               # Overflow threshold per exec invocation
  script_dir: "."                 # Relative exec paths resolve against this
  startup_script: null            # e.g. "autoexec.cfg", run silently at init

# =============================================================================
# EXECUTION QUEUE
# =============================================================================
queue:
  max_commands_per_tick: 0        # 0 = drain until empty or a wait gate closes

# =============================================================================
# CONSOLE MESSAGES LOGGING LEVEL
# =============================================================================
console:
  verbose: false                  # Verbose output (debug logging)
  quiet: false                    # Quiet mode (warnings and errors only)

# =============================================================================
# INITIAL VARIABLE VALUES
# =============================================================================
variables: {}
#  console.showlastline: "1"

config_version: "1.0"
"""


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Interactive command console',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                 # Start with default settings
  %(prog)s -c my_console.yaml              # Use specific config file
  %(prog)s --startup-script autoexec.cfg   # Run a script at startup
  %(prog)s --set sv.rate=30                # Preset a console variable
  %(prog)s --create-config sample.yaml     # Create sample config file

Configuration is loaded in this order (later overrides earlier):
  1. Built-in defaults
  2. Configuration file (YAML)
  3. Command line arguments
"""
    )

    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument('-c', '--config', help='Configuration file path')
    config_group.add_argument('--create-config', metavar='FILE',
                              help='Create a sample configuration file and exit')
    config_group.add_argument('--save-config', metavar='FILE',
                              help='Save the effective configuration to FILE')

    console_group = parser.add_argument_group('Console')
    console_group.add_argument('--script-dir', help='Directory exec resolves relative paths against')
    console_group.add_argument('--startup-script', help='Script queued silently at startup')
    console_group.add_argument('--history-size', type=int, help='History ring capacity')
    console_group.add_argument('--max-per-tick', type=int,
                               help='Maximum queued commands run per tick (0 = unlimited)')
    console_group.add_argument('--set', action='append', metavar='NAME=VALUE',
                               help='Preset a console variable (repeatable)')

    debug_group = parser.add_argument_group('Debug Options')
    debug_group.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')
    debug_group.add_argument('-q', '--quiet', action='store_true', help='Only warnings and errors')

    return parser


def setup_configuration(argv=None) -> tuple[Optional[ConsoleConfig], bool]:
    """
    Setup configuration system with CLI integration

    Args:
        argv: Command line arguments (None for sys.argv)

    Returns:
        (config_object, should_exit)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    logger = logging.getLogger(__name__)

    manager = ConfigurationManager()

    if args.create_config:
        manager.create_sample_config(args.create_config)
        return None, True

    manager.load_config(args.config)
    config = manager.merge_cli_args(args)

    is_valid, errors = manager.validate_config()
    if not is_valid:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return config, True

    if args.save_config:
        manager.save_config(args.save_config)

    return config, False
