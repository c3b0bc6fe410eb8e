"""
Centralized logging configuration for Forge Tracker.
Provides component-specific loggers with separate log files.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

from ..config import config_manager, get_config

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - "
    "%(funcName)s() - %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def level_from_name(name: str) -> int:
    """Numeric level for a name such as ``"warning"``; unknown names mean INFO."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


class ComponentLogger:
    """Manages component-specific logging with separate files."""

    _loggers: Dict[str, logging.Logger] = {}
    _initialized = False
    _log_dir: Optional[Path] = None
    _log_to_file = True
    _debug = False
    _level = logging.INFO

    # Component definitions with their log levels
    COMPONENTS = {
        "progression": {"level": logging.INFO, "file": "progression.log"},
        "store": {"level": logging.INFO, "file": "store.log"},
        "session": {"level": logging.INFO, "file": "session.log"},
        "storage": {"level": logging.INFO, "file": "storage.log"},
        "database": {"level": logging.INFO, "file": "database.log"},
        "main": {"level": logging.INFO, "file": "main.log"},
        "error": {"level": logging.ERROR, "file": "errors.log"},  # Centralized error log
    }

    @classmethod
    def initialize(
        cls,
        log_dir: Optional[str] = None,
        debug: Optional[bool] = None,
        log_to_file: Optional[bool] = None,
        log_level: Optional[str] = None,
    ) -> None:
        """
        Initialize the logging system with component-specific loggers.

        Args:
            log_dir: Directory for log files. Defaults to the configured log dir
            debug: Enable debug logging for all components. Defaults to config
            log_to_file: Write rotating log files. Defaults to config
            log_level: Minimum level name for components. Defaults to config
        """
        if cls._initialized:
            return

        config = get_config()
        cls._level = level_from_name(config.app.log_level if log_level is None else log_level)
        cls._debug = (config.app.debug or cls._level <= logging.DEBUG) if debug is None else debug
        cls._log_to_file = config.app.log_to_file if log_to_file is None else log_to_file

        if cls._log_to_file:
            base_dir = Path(log_dir) if log_dir else config_manager.get_log_directory()
            # Each run writes into its own timestamped subdirectory
            cls._log_dir = base_dir / datetime.now().strftime("%Y%m%d_%H%M%S")
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_level = logging.DEBUG if cls._debug else cls._level

        for component_name in cls.COMPONENTS:
            cls._create_component_logger(component_name)

        if cls._log_to_file:
            unified_logger = logging.getLogger("forge.unified")
            unified_logger.handlers.clear()
            unified_logger.setLevel(root_level)
            unified_logger.propagate = False
            unified_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / "unified.log",
                maxBytes=20 * 1024 * 1024,  # 20MB
                backupCount=3,
                encoding="utf-8",
            )
            unified_handler.setLevel(root_level)
            unified_handler.setFormatter(
                logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            unified_logger.addHandler(unified_handler)
            cls._loggers["unified"] = unified_logger

            # Every component also writes to unified.log
            for name, logger in cls._loggers.items():
                if name != "unified":
                    logger.addHandler(unified_handler)

        # Mark as initialized before logging to avoid recursion
        cls._initialized = True

        main_logger = cls._loggers.get("main")
        if main_logger:
            main_logger.info("=" * 80)
            main_logger.info("Forge Tracker Logging System Initialized")
            main_logger.info(f"Log directory: {cls._log_dir}")
            main_logger.info(f"Debug mode: {cls._debug}")
            main_logger.info("=" * 80)

    @classmethod
    def _create_component_logger(cls, component: str) -> None:
        """Create a component logger with its file and console handlers."""
        if component in cls._loggers:
            return

        logger = logging.getLogger(f"forge.{component}")
        logger.handlers.clear()
        logger.propagate = False

        default_level = cls.COMPONENTS.get(component, {}).get("level", logging.INFO)
        level = logging.DEBUG if cls._debug else max(default_level, cls._level)
        logger.setLevel(level)

        if cls._log_to_file and cls._log_dir is not None:
            file_name = cls.COMPONENTS.get(component, {}).get("file", f"{component}.log")
            file_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / file_name,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            logger.addHandler(file_handler)

            if "unified" in cls._loggers:
                for handler in cls._loggers["unified"].handlers:
                    logger.addHandler(handler)

        # Errors always reach the console; without log files warnings do too
        if component in ("error", "main") or not cls._log_to_file:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(
                logging.ERROR if cls._log_to_file else logging.WARNING
            )
            console_handler.setFormatter(
                logging.Formatter(SIMPLE_FORMAT, datefmt="%H:%M:%S")
            )
            logger.addHandler(console_handler)

        cls._loggers[component] = logger

    @classmethod
    def get_logger(cls, component: str) -> logging.Logger:
        """
        Get a logger for a specific component.

        Args:
            component: Component name (store, session, storage, etc.)
                      Can also be a module path like 'forge_tracker.store.domain_store'

        Returns:
            Logger instance for the component
        """
        if not cls._initialized:
            cls.initialize()

        if component.startswith("forge_tracker."):
            parts = component.split(".")
            if parts[1] in ("repositories",):
                component = "storage"
            elif parts[1] == "db":
                component = "database"
            elif parts[1] == "domain":
                component = "progression"
            elif parts[1] in ("store", "session"):
                component = parts[1]
            else:
                component = "main"

        if component not in cls._loggers:
            cls._create_component_logger(component)

        return cls._loggers[component]

    @classmethod
    def log_exception(
        cls, component: str, exc: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an exception with context to both component and error logs.

        Args:
            component: Component where the exception occurred
            exc: The exception to log
            context: Additional context information
        """
        component_logger = cls.get_logger(component)
        error_logger = cls.get_logger("error")

        context_str = ""
        if context:
            context_str = " | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())

        component_logger.error(
            f"Exception in {component}: {type(exc).__name__}: {exc}{context_str}",
            exc_info=exc,
        )
        error_logger.error(
            f"[{component}] {type(exc).__name__}: {exc}{context_str}", exc_info=exc
        )

    @classmethod
    def get_log_directory(cls) -> Optional[Path]:
        """Get the current log directory path."""
        return cls._log_dir

    @classmethod
    def reset(cls) -> None:
        """Close all handlers and forget every logger."""
        for logger in cls._loggers.values():
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
        cls._loggers = {}
        cls._initialized = False
        cls._log_dir = None
        cls._level = logging.INFO


# Convenience functions
def get_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return ComponentLogger.get_logger(component)


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module using its __name__.
    This automatically maps module paths to appropriate components.

    Example:
        logger = get_module_logger(__name__)  # Works from any module
    """
    return ComponentLogger.get_logger(module_name)


def initialize_logging(
    log_dir: Optional[str] = None,
    debug: Optional[bool] = None,
    log_to_file: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """Initialize the logging system."""
    ComponentLogger.initialize(
        log_dir=log_dir, debug=debug, log_to_file=log_to_file, log_level=log_level
    )


def log_exception(
    component: str, exc: Exception, context: Optional[Dict[str, Any]] = None
) -> None:
    """Log an exception with context."""
    ComponentLogger.log_exception(component, exc, context)


def get_log_directory() -> Optional[Path]:
    """Get the current log directory path."""
    return ComponentLogger.get_log_directory()
