from unittest.mock import MagicMock
from ffzap.infrastructure.event_bus import EventBus
from ffzap.domain.events import LogLineEmitted
from ffzap.domain.models import LogLevel
from ffzap.ui.console import ConsoleReporter

def test_console_reporter_prints_info_cyan():
    bus = EventBus()
    progress = MagicMock()
    ConsoleReporter(bus, progress)

    bus.publish(LogLineEmitted(level=LogLevel.INFO, worker_id=0, line="[INFO in THREAD 0] -- hi"))

    progress.println.assert_called_once_with("[INFO in THREAD 0] -- hi", style="cyan")

def test_console_reporter_prints_error_red():
    bus = EventBus()
    progress = MagicMock()
    ConsoleReporter(bus, progress)

    bus.publish(LogLineEmitted(level=LogLevel.ERROR, worker_id=1, line="[ERROR in THREAD 1] -- bad"))

    progress.println.assert_called_once_with("[ERROR in THREAD 1] -- bad", style="bright_red")

def test_console_reporter_through_run_logger(run_logger, event_bus):
    progress = MagicMock()
    ConsoleReporter(event_bus, progress)

    run_logger.log_info("quiet", 0, False)
    run_logger.log_info("loud", 0, True)

    assert progress.println.call_count == 1
    assert "loud" in progress.println.call_args[0][0]
