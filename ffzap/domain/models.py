from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field

class JobStatus(str, Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"

class LogLevel(str, Enum):
    INFO = "INFO"
    ERROR = "ERROR"

class ToolResult(BaseModel):
    """Outcome of one finished ffmpeg process."""
    returncode: int
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

class RunSummary(BaseModel):
    """What the caller reads after process_files() returns."""
    succeeded: int = 0
    total: int = 0
    failed_paths: List[str] = Field(default_factory=list)
    skipped_paths: List[str] = Field(default_factory=list)
    log_path: Optional[Path] = None

    @property
    def failed(self) -> int:
        return len(self.failed_paths)

    @property
    def skipped(self) -> int:
        return len(self.skipped_paths)
