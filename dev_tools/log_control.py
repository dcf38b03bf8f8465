import os
import logging
from lrulog.log_control import LogController


def setup_logging():

    if LogController.controller:
        return LogController.controller
    test_loggers = [('MemoryCache', 'In memory reference cache'),
                    ('test_code', 'Test code logger')]
    log_control = LogController(additional_loggers=test_loggers)
    if "LRULOG_DEBUG_LOGGING" in os.environ:
        log_control.set_default_level('debug')
    elif "LRULOG_INFO_LOGGING" in os.environ:
        log_control.set_default_level('info')
    elif "LRULOG_WARN_LOGGING" in os.environ:
        log_control.set_default_level('warning')
    else:
        log_control.set_default_level('error')

    return log_control
