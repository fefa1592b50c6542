from ffzap.infrastructure.event_bus import EventBus
from ffzap.infrastructure.progress import ProgressTracker
from ffzap.domain.events import LogLineEmitted
from ffzap.domain.models import LogLevel

LEVEL_STYLES = {
    LogLevel.INFO: "cyan",
    LogLevel.ERROR: "bright_red",
}

class ConsoleReporter:
    """Subscribes to EventBus and mirrors display log lines above the progress bar."""

    def __init__(self, bus: EventBus, progress: ProgressTracker):
        self.bus = bus
        self.progress = progress
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(LogLineEmitted, self.on_log_line)

    def on_log_line(self, event: LogLineEmitted):
        self.progress.println(event.line, style=LEVEL_STYLES.get(event.level))
