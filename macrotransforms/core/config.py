'''
Configuration management system for macro-transforms.

This module provides the configuration system for the package, allowing users
to customize solver selection, conventional smoothing parameters and logging
through a hierarchical configuration structure.

The configuration system follows a layered approach:
1. Default configurations built into the package
2. User-specific configuration file
3. Environment variables
4. Runtime modifications

Environment variables follow the pattern ``MACRO_<SECTION>_<OPTION>``, e.g.
``MACRO_NUMERICAL_HP_SOLVER=lu`` or ``MACRO_LOGGING_LOG_LEVEL=DEBUG``. The
directory holding the user configuration file can be moved with
``MACRO_CONFIG_DIR``.
'''

import os
import json
import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, get_type_hints

from .exceptions import ConfigurationError
from .types import LogLevel

# Set up module-level logger
logger = logging.getLogger("macrotransforms.core.config")

# Constants for configuration paths and environment variables
CONFIG_ENV_PREFIX = "MACRO_"
DEFAULT_CONFIG_FILENAME = "macro_config.json"
USER_CONFIG_DIR_ENV = "MACRO_CONFIG_DIR"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_HP_SOLVERS = ("cholesky", "lu")


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    CORE = "core"
    NUMERICAL = "numerical"
    FILTERS = "filters"
    LOGGING = "logging"


@dataclass
class CoreConfig:
    """
    Core configuration settings.

    Attributes:
        version: The version of the configuration format
        user_config_dir: Directory for user-specific configuration files
        enable_numba: Whether to assemble the HP penalty bands with the Numba kernel
    """
    version: str = "1.0.0"
    user_config_dir: Path = field(default_factory=lambda: Path.home() / ".macrotransforms")
    enable_numba: bool = True


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings.

    Attributes:
        hp_solver: Banded solver for the HP penalty system ("cholesky" or "lu")
        symmetry_tolerance: Tolerance used when checking penalty matrix symmetry
    """
    hp_solver: str = "cholesky"
    symmetry_tolerance: float = 1e-12


@dataclass
class FiltersConfig:
    """
    Filter configuration settings.

    The conventional smoothing parameters are looked up by
    ``lambda_for_frequency``; they are never applied implicitly.

    Attributes:
        annual_lambda: Conventional HP smoothing parameter for annual data
        quarterly_lambda: Conventional HP smoothing parameter for quarterly data
        monthly_lambda: Conventional HP smoothing parameter for monthly data
        warn_on_contamination: Whether interior missing values trigger a NumericWarning
    """
    annual_lambda: float = 100.0
    quarterly_lambda: float = 1600.0
    monthly_lambda: float = 14400.0
    warn_on_contamination: bool = True


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Default logging level
        log_file: Path to log file (None for no file logging)
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to log to console
        file_logging: Whether to log to file
    """
    log_level: LogLevel = "WARNING"
    log_file: Optional[Path] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True
    file_logging: bool = False


@dataclass
class MacroConfig:
    """
    Complete configuration, combining all sections.

    Attributes:
        core: Core configuration settings
        numerical: Numerical configuration settings
        filters: Filter configuration settings
        logging: Logging configuration settings
    """
    core: CoreConfig = field(default_factory=CoreConfig)
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    filters: FiltersConfig = field(default_factory=FiltersConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTION_DEFAULTS = {
    "core": CoreConfig,
    "numerical": NumericalConfig,
    "filters": FiltersConfig,
    "logging": LoggingConfig,
}


class ConfigManager:
    """
    Configuration manager for macro-transforms.

    This class manages the configuration settings, providing methods to get,
    set, and reset configuration options. It implements a hierarchical
    configuration system with support for environment variables, a
    user-specific configuration file, and runtime modifications.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _config_file: Path to the user configuration file
    """

    def __init__(self) -> None:
        """Initialize the configuration manager with default settings."""
        self._config = MacroConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None
        self._modified_keys: set = set()

    @property
    def initialized(self) -> bool:
        """Whether the configuration layers have been applied."""
        return self._initialized

    @property
    def config_file(self) -> Optional[Path]:
        """Path of the user configuration file, if resolved."""
        return self._config_file

    @property
    def config(self) -> MacroConfig:
        """The current configuration object."""
        return self._config

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        This method:
        1. Resolves the user configuration file location
        2. Loads user configuration from file if available
        3. Applies environment variable overrides
        4. Validates the configuration
        5. Sets up logging based on configuration
        """
        if self._initialized:
            return

        self._resolve_config_file()
        self._load_user_config()
        self._apply_env_overrides()
        self._validate_config()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _resolve_config_file(self) -> None:
        """Resolve the user configuration file, honoring ``MACRO_CONFIG_DIR``."""
        env_config_dir = os.environ.get(USER_CONFIG_DIR_ENV)
        if env_config_dir:
            self._config.core.user_config_dir = Path(env_config_dir)

        self._config_file = self._config.core.user_config_dir / DEFAULT_CONFIG_FILENAME

    def _load_user_config(self) -> None:
        """Load user configuration from file, if one exists."""
        if not self._config_file or not self._config_file.exists():
            logger.debug("No user configuration file found")
            return

        try:
            with open(self._config_file, 'r') as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load user configuration: {e}")
            return

        self._update_from_dict(user_config)
        logger.debug(f"Loaded user configuration from {self._config_file}")

    def _apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides to the configuration.

        Every environment variable with the ``MACRO_`` prefix whose remainder
        names a known section and option updates that option.
        """
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == USER_CONFIG_DIR_ENV:
                continue

            # Remove prefix and split into section and option
            key = env_var[len(CONFIG_ENV_PREFIX):]
            parts = key.lower().split('_', 1)

            if len(parts) != 2:
                continue

            section, option = parts

            try:
                ConfigSection(section)
            except ValueError:
                continue

            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                continue

            try:
                typed_value = self._coerce(getattr(section_obj, option), value)
            except (TypeError, ValueError) as e:
                logger.warning(f"Failed to apply environment override {env_var}: {e}")
                continue

            setattr(section_obj, option, typed_value)
            logger.debug(f"Applied environment override: {env_var}={value}")

    @staticmethod
    def _coerce(current_value: Any, value: Any) -> Any:
        """Convert ``value`` to the type of ``current_value``."""
        if isinstance(current_value, bool):
            if isinstance(value, str):
                return value.lower() in ('true', 'yes', '1', 'y')
            return bool(value)
        if isinstance(current_value, Path):
            return Path(value)
        if current_value is None:
            return Path(value) if isinstance(value, str) else value
        if isinstance(current_value, (int, float, str)):
            return type(current_value)(value)
        return value

    def _setup_logging(self) -> None:
        """
        Set up the package logger based on the logging configuration.

        Handlers installed by a previous call are replaced so repeated
        initialization does not duplicate output.
        """
        root_logger = logging.getLogger("macrotransforms")

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

        root_logger.setLevel(getattr(logging, self._config.logging.log_level))

        formatter = logging.Formatter(
            fmt=self._config.logging.log_format,
            datefmt=self._config.logging.log_date_format
        )

        if self._config.logging.console_logging:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if self._config.logging.file_logging and self._config.logging.log_file:
            try:
                log_dir = self._config.logging.log_file.parent
                log_dir.mkdir(parents=True, exist_ok=True)

                file_handler = logging.FileHandler(self._config.logging.log_file)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)
            except OSError as e:
                logger.warning(f"Failed to set up file logging: {e}")

    def _validate_config(self) -> None:
        """Validate every configuration section, resetting invalid values to defaults."""
        for section_name in _SECTION_DEFAULTS:
            self._validate_section(getattr(self._config, section_name), section_name)

    def _validate_section(self, section: Any, section_name: str) -> None:
        """
        Validate a configuration section.

        Args:
            section: The configuration section to validate
            section_name: The name of the section
        """
        hints = get_type_hints(type(section))

        for attr_name, attr_type in hints.items():
            value = getattr(section, attr_name)

            if value is None and "Optional" in str(attr_type):
                continue

            if isinstance(value, str) and (attr_type is Path or attr_type == Optional[Path]):
                setattr(section, attr_name, Path(value))
            elif attr_type is float and isinstance(value, int) and not isinstance(value, bool):
                setattr(section, attr_name, float(value))

            self._validate_constraint(section, attr_name, getattr(section, attr_name), section_name)

    def _validate_constraint(self, section: Any, attr_name: str, value: Any, section_name: str) -> None:
        """
        Validate a specific constraint on a configuration value.

        Args:
            section: The configuration section
            attr_name: The attribute name
            value: The attribute value
            section_name: The name of the section
        """
        default = getattr(_SECTION_DEFAULTS[section_name](), attr_name)

        if attr_name == "log_level" and value not in _LOG_LEVELS:
            logger.warning(f"Invalid log level: {value}, using {default}")
            setattr(section, attr_name, default)

        elif attr_name == "hp_solver" and value not in _HP_SOLVERS:
            logger.warning(f"Invalid hp_solver: {value}, using {default}")
            setattr(section, attr_name, default)

        elif attr_name.endswith("_lambda") and (
            not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0
        ):
            logger.warning(f"Invalid {section_name}.{attr_name}: {value}, must be non-negative")
            setattr(section, attr_name, default)

        elif attr_name == "symmetry_tolerance" and (
            not isinstance(value, (int, float)) or value < 0
        ):
            logger.warning(f"Invalid symmetry_tolerance: {value}, must be non-negative")
            setattr(section, attr_name, default)

        elif isinstance(default, bool) and not isinstance(value, bool):
            logger.warning(f"Invalid {section_name}.{attr_name}: {value}, using {default}")
            setattr(section, attr_name, default)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update the configuration from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values
        """
        for section_name, section_dict in config_dict.items():
            if section_name not in _SECTION_DEFAULTS or not isinstance(section_dict, dict):
                logger.warning(f"Unknown configuration section: {section_name}")
                continue

            section = getattr(self._config, section_name)

            for option_name, option_value in section_dict.items():
                if not hasattr(section, option_name):
                    logger.warning(f"Unknown configuration option: {section_name}.{option_name}")
                    continue

                # Convert Path strings to Path objects
                if isinstance(getattr(section, option_name), Path) and isinstance(option_value, str):
                    option_value = Path(option_value)

                setattr(section, option_name, option_value)

    def save_user_config(self) -> None:
        """
        Save the current configuration to the user configuration file.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        if not self._config_file:
            self._resolve_config_file()

        try:
            self._config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._config_file, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise ConfigurationError(
                "Failed to save user configuration",
                setting=str(self._config_file),
                issue=str(e)
            ) from e

        logger.debug(f"Saved user configuration to {self._config_file}")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        result = {}
        for section_name in _SECTION_DEFAULTS:
            section = getattr(self._config, section_name)
            section_dict = {}
            for section_field in fields(section):
                value = getattr(section, section_field.name)
                if isinstance(value, Path):
                    value = str(value)
                section_dict[section_field.name] = value
            result[section_name] = section_dict
        return result

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            default: Default value if the option is not found

        Returns:
            The configuration value, or the default if not found
        """
        if section not in _SECTION_DEFAULTS:
            return default

        section_obj = getattr(self._config, section)
        return getattr(section_obj, option, default)

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            value: The value to set

        Raises:
            ConfigurationError: If the section or option is not found, or the
                value cannot be converted to the option's type
        """
        if section not in _SECTION_DEFAULTS:
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=f"{section}.{option}",
                value=value,
                issue="Section not found"
            )

        section_obj = getattr(self._config, section)

        if not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue="Option not found"
            )

        try:
            typed_value = self._coerce(getattr(section_obj, option), value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to set configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue=str(e)
            ) from e

        previous = getattr(section_obj, option)
        setattr(section_obj, option, typed_value)
        self._validate_section(section_obj, section)
        if getattr(section_obj, option) != typed_value:
            setattr(section_obj, option, previous)
            raise ConfigurationError(
                f"Invalid value for configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue="Value rejected by validation"
            )

        self._modified_keys.add(f"{section}.{option}")
        if section == "logging":
            self._setup_logging()

        logger.debug(f"Set configuration option: {section}.{option}={value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The configuration option to reset, or None to reset the entire section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        if section is None:
            self._config = MacroConfig()
            self._modified_keys.clear()
            self._setup_logging()
            logger.debug("Reset all configuration to defaults")
            return

        if section not in _SECTION_DEFAULTS:
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=section,
                issue="Section not found"
            )

        defaults = _SECTION_DEFAULTS[section]()

        if option is None:
            setattr(self._config, section, defaults)
            self._modified_keys = {k for k in self._modified_keys if not k.startswith(f"{section}.")}
            if section == "logging":
                self._setup_logging()
            logger.debug(f"Reset configuration section {section} to defaults")
            return

        if not hasattr(defaults, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                issue="Option not found"
            )

        setattr(getattr(self._config, section), option, getattr(defaults, option))
        self._modified_keys.discard(f"{section}.{option}")
        if section == "logging":
            self._setup_logging()
        logger.debug(f"Reset configuration option {section}.{option} to default")

    def get_modified_options(self) -> List[str]:
        """Return the options changed at runtime through ``set``."""
        return sorted(self._modified_keys)


# Create a singleton instance of the configuration manager
_config_manager = ConfigManager()


def initialize_config() -> None:
    """
    Initialize the configuration system.

    This function initializes the configuration manager, loading user
    configuration and applying environment variable overrides.
    """
    _config_manager.initialize()


def get_config(section: str, option: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section
        option: The configuration option
        default: Default value if the option is not found

    Returns:
        The configuration value, or the default if not found
    """
    if not _config_manager.initialized:
        initialize_config()

    return _config_manager.get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    if not _config_manager.initialized:
        initialize_config()

    _config_manager.set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """
    Reset configuration to default values.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    if not _config_manager.initialized:
        initialize_config()

    _config_manager.reset(section, option)


def save_config() -> None:
    """Save the current configuration to the user configuration file."""
    if not _config_manager.initialized:
        initialize_config()

    _config_manager.save_user_config()


def get_config_manager() -> ConfigManager:
    """
    Get the configuration manager instance.

    Returns:
        The configuration manager instance
    """
    if not _config_manager.initialized:
        initialize_config()

    return _config_manager


def to_dict() -> Dict[str, Any]:
    """
    Get the full configuration as a dictionary.

    Returns:
        Dictionary representation of the configuration
    """
    return get_config_manager().to_dict()
