"""Domain events for the batch processing pipeline.

Events flow through the EventBus and decouple the processor and the run
logger from whatever shows them to the user (terminal, UI event channel).

The job and run events (JobStarted, JobSkipped, JobCompleted, JobFailed,
ProgressUpdated, ProcessingFinished) are the notification interface for a
UI front-end; the console reporter itself only listens to LogLineEmitted.

See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from .models import LogLevel


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class JobEvent(Event):
    """Base class for events about one input path."""

    worker_id: int
    path: str


class JobStarted(JobEvent):
    """Emitted after the path passed validation, before the tool runs."""

    pass


class JobSkipped(JobEvent):
    """Emitted when the path is not a regular file."""

    pass


class JobCompleted(JobEvent):
    """Emitted when ffmpeg exited with code 0."""

    output_path: str
    source_deleted: bool = False


class JobFailed(JobEvent):
    """Emitted when a job was attempted but did not succeed."""

    reason: str
    output_path: Optional[str] = None


class ProgressUpdated(Event):
    """Emitted after every successful job."""

    done: int
    total: int


class LogLineEmitted(Event):
    """A log line that should also reach the live display."""

    level: LogLevel
    worker_id: int
    line: str


class ProcessingFinished(Event):
    """Emitted once all workers have been joined."""

    succeeded: int
    total: int
    failed_paths: List[str] = Field(default_factory=list)
    skipped: int = 0
