from dataclasses import dataclass, field
import logging
from logging.config import dictConfig
from typing import Dict, List, Optional, Union, Any

LEVEL_NAMES = {
    logging.DEBUG: 'DEBUG',
    logging.INFO: 'INFO',
    logging.WARNING: 'WARNING',
    logging.ERROR: 'ERROR',
    logging.CRITICAL: 'CRITICAL',
}
LEVEL_VALUES = {name: value for value, name in LEVEL_NAMES.items()}
LEVEL_VALUES['WARN'] = logging.WARNING


def level_name(level: Union[str, int]) -> str:
    """ Normalize a level given as a name or a logging constant to its upper case name """
    if isinstance(level, int):
        if level not in LEVEL_NAMES:
            raise ValueError(f"Invalid level: {level}. Valid levels: {list(LEVEL_NAMES.keys())}")
        return LEVEL_NAMES[level]
    upper = level.upper()
    if upper not in LEVEL_VALUES:
        raise ValueError(f"Invalid level: {level}. Valid levels: {list(LEVEL_VALUES.keys())}")
    return 'WARNING' if upper == 'WARN' else upper


@dataclass
class HandlerDef:
    """Definition of a logging handler configuration."""
    name: str
    description: str
    level: str = "DEBUG"
    formatter: str = "standard"
    stream: Optional[str] = None  # e.g., "ext://sys.stderr"
    handler_class: str = "logging.StreamHandler"
    extra_config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LoggerDef:
    """Definition of a logger configuration."""
    name: str
    description: str
    custom_level: Optional[str] = None
    propagate: bool = False
    handler_names: List[str] = field(default_factory=list, repr=False)


class LogController:
    """
    Keeps the table of loggers used by lrulog and turns it into a
    dictConfig dictionary. Loggers without a custom level follow the
    default level.
    """
    controller = None

    @classmethod
    def get_controller(cls):
        if cls.controller is None:
            raise Exception('you must call make_controller first, or initialize it directly')
        return cls.controller

    @classmethod
    def make_controller(cls, *args, **kwargs):
        if cls.controller is not None:
            raise Exception('you must call make_controller one time only, then call get_controller afterwards')
        cls.controller = cls(*args, **kwargs)
        return cls.controller

    def __init__(self, additional_loggers: Optional[List[tuple]] = None, default_level: str = "ERROR",
                 stream: str = "ext://sys.stderr", temporary=False):
        """
        Args:
            additional_loggers: Optional list of tuples (name, description) to add to known loggers
            default_level: Level for loggers without a custom level
            stream: Where the console handler writes, stderr keeps log lines out of command output
            temporary: Don't register as the process wide controller
        """
        if not temporary:
            if LogController.controller is not None:
                raise Exception('initializing LogController class twice causes issues')
            LogController.controller = self
        self.default_level = level_name(default_level)
        self.default_handlers: List[str] = ["console"]
        self.known_handlers = {
            "console": HandlerDef(name="console", description="Console handler", stream=stream),
        }
        self.known_loggers: Dict[str, LoggerDef] = {}
        for name, description in [('', 'root logger'),
                                  ('LogWriter', 'Appends entries to cache log files'),
                                  ('LogReader', 'Backward scan of cache log files'),
                                  ('LRUView', 'Most recent distinct records'),
                                  ('EntryLog', 'Single cache log file handle'),
                                  ('EntryCache', 'Named cache operations'),
                                  ('CacheNamespace', 'Cache name to file mapping'),
                                  ('PathRecords', 'Path canonicalization and classification'),
                                  ('lrulog.cli', 'Command line tool')]:
            self.known_loggers[name] = LoggerDef(name, description, handler_names=self.default_handlers.copy())
        if additional_loggers:
            for logger_name, description in additional_loggers:
                self.known_loggers[logger_name] = LoggerDef(
                    logger_name, description, handler_names=self.default_handlers.copy()
                )
        self._saved_levels: Dict[str, int] = {}
        self._saved_custom_levels: Dict[str, Optional[str]] = {}
        self.apply_config()

    def _check_known(self, logger_name: str) -> None:
        if logger_name not in self.known_loggers:
            raise ValueError(f"Unknown logger: {logger_name}. Known loggers: {list(self.known_loggers.keys())}")

    def set_logger_level(self, logger_name: str, level: Union[str, int]) -> None:
        """
        Set the logging level for a specific logger and mark it as custom, so
        later default level changes leave it alone.
        """
        self._check_known(logger_name)
        name = level_name(level)
        logging.getLogger(logger_name).setLevel(LEVEL_VALUES[name])
        self.known_loggers[logger_name].custom_level = name

    def set_default_level(self, level: Union[str, int]) -> None:
        """
        Set the default logging level for all known loggers that don't have a custom level.
        """
        self.default_level = level_name(level)
        for logger_name, logger_def in self.known_loggers.items():
            if logger_def.custom_level is None:
                logging.getLogger(logger_name).setLevel(LEVEL_VALUES[self.default_level])

    def get_logger_level(self, logger_name: str) -> int:
        self._check_known(logger_name)
        return logging.getLogger(logger_name).level

    def save_current_levels(self) -> None:
        self._saved_levels = {}
        self._saved_custom_levels = {}
        for logger_name, logger_def in self.known_loggers.items():
            self._saved_levels[logger_name] = logging.getLogger(logger_name).level
            self._saved_custom_levels[logger_name] = logger_def.custom_level

    def restore_saved_levels(self) -> None:
        if not self._saved_levels:
            raise RuntimeError("No saved levels to restore. Call save_current_levels() first.")
        for logger_name, saved_level in self._saved_levels.items():
            logging.getLogger(logger_name).setLevel(saved_level)
            self.known_loggers[logger_name].custom_level = self._saved_custom_levels[logger_name]
        self._saved_levels = {}
        self._saved_custom_levels = {}

    def add_logger(self, logger_name: str, description: str = "",
                   level: Optional[Union[str, int]] = None) -> logging.Logger:
        self.known_loggers[logger_name] = LoggerDef(logger_name, description,
                                                    handler_names=self.default_handlers.copy())
        self.apply_config()
        if level is not None:
            self.set_logger_level(logger_name, level)
        return logging.getLogger(logger_name)

    def get_known_loggers(self) -> Dict[str, LoggerDef]:
        return self.known_loggers.copy()

    def apply_config(self) -> None:
        dictConfig(self.to_dict_config())

    def to_dict_config(self) -> Dict[str, Any]:
        """
        Generate a dictConfig compatible dictionary from the current LogController state.
        """
        formatters = {
            "standard": {
                "format": "[%(asctime)s.%(msecs)03d %(levelname)-7s] %(name)-15s: %(message)s",
                'datefmt': "%H:%M:%S"
            }
        }
        handlers = {}
        for handler_name, handler_def in self.known_handlers.items():
            handler_config = {
                "level": handler_def.level,
                "formatter": handler_def.formatter,
                "class": handler_def.handler_class
            }
            if handler_def.stream:
                handler_config["stream"] = handler_def.stream
            handler_config.update(handler_def.extra_config)
            handlers[handler_name] = handler_config

        loggers = {}
        for logger_name, logger_def in self.known_loggers.items():
            loggers[logger_name] = {
                "handlers": logger_def.handler_names,
                "level": logger_def.custom_level or self.default_level,
                "propagate": logger_def.propagate
            }
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "handlers": handlers,
            "loggers": loggers
        }


class TemporaryLogControl:
    """
    Context manager for temporarily changing logging levels, for silencing
    noisy loggers around an operation and restoring them afterward.
    """

    def __init__(self, log_controller: LogController, keep_active: Optional[List[str]] = None,
                 silence_level: Optional[Union[str, int]] = None):
        self.log_controller = log_controller
        self.keep_active = keep_active or []
        self.silence_level = silence_level if silence_level is not None else log_controller.default_level

    def __enter__(self):
        self.log_controller.save_current_levels()
        for logger_name in self.log_controller.known_loggers:
            if logger_name not in self.keep_active:
                self.log_controller.set_logger_level(logger_name, self.silence_level)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.log_controller.restore_saved_levels()
