#!/usr/bin/env python
import logging

import pytest

from lrulog.log_control import LogController, TemporaryLogControl, level_name
from dev_tools.log_control import setup_logging

log_control = setup_logging()
logger = logging.getLogger("test_code")


def test_setup_is_shared():
    assert setup_logging() is log_control
    assert LogController.get_controller() is log_control
    with pytest.raises(Exception):
        LogController.make_controller()
    with pytest.raises(Exception):
        LogController()


def test_level_names():
    assert level_name('warn') == 'WARNING'
    assert level_name('debug') == 'DEBUG'
    assert level_name(logging.ERROR) == 'ERROR'
    with pytest.raises(ValueError):
        level_name('loud')
    with pytest.raises(ValueError):
        level_name(15)


def test_levels_and_temporary_control():
    """
    Default level changes skip loggers with a custom level, and the
    temporary control puts everything back the way it was.
    """
    controller = LogController(temporary=True, default_level="error")
    assert LogController.controller is log_control
    controller.set_logger_level('LogReader', 'debug')
    controller.set_default_level('warning')
    assert controller.get_logger_level('LogReader') == logging.DEBUG
    assert controller.get_logger_level('LogWriter') == logging.WARNING
    with pytest.raises(ValueError):
        controller.set_logger_level('NoSuchLogger', 'info')
    with pytest.raises(ValueError):
        controller.set_logger_level('LogReader', 15)
    assert controller.known_loggers['LogReader'].custom_level == 'DEBUG'
    controller.apply_config()

    with TemporaryLogControl(controller, keep_active=['LogWriter'], silence_level='critical'):
        assert controller.get_logger_level('LogReader') == logging.CRITICAL
        assert controller.get_logger_level('LogWriter') == logging.WARNING
    assert controller.get_logger_level('LogReader') == logging.DEBUG
    assert controller.known_loggers['LogWriter'].custom_level is None
    with pytest.raises(RuntimeError):
        controller.restore_saved_levels()
    log_control.apply_config()


def test_dict_config_and_add_logger():
    controller = LogController(temporary=True, default_level="info")
    new_logger = controller.add_logger('extra.child', 'added in test', level='debug')
    assert new_logger is logging.getLogger('extra.child')
    config = controller.to_dict_config()
    assert config['version'] == 1
    assert config['handlers']['console']['stream'] == "ext://sys.stderr"
    assert config['loggers']['extra.child']['level'] == 'DEBUG'
    assert config['loggers']['EntryCache']['level'] == 'INFO'
    assert not config['loggers']['EntryCache']['propagate']
    assert 'extra.child' in controller.get_known_loggers()
    # put the process wide settings back for the other tests
    log_control.apply_config()
