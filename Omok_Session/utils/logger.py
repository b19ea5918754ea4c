"""Game narration sinks: timestamped console output or the debug log."""

import datetime
import logging

NARRATION_LOGGER = logging.getLogger("Omok_Session.narration")


def log_event(message):
    timestamp = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}")


def log_debug(message):
    """Send narration to the logging tree instead of stdout (log_moves: false)."""
    NARRATION_LOGGER.debug(message)


def narration_sink(log_moves):
    return log_event if log_moves else log_debug
