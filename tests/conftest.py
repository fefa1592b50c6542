import threading
import pytest
import yaml
from pathlib import Path
from typing import List, Optional
from ffzap.config.models import AppConfig
from ffzap.domain.errors import ToolLaunchError
from ffzap.domain.models import ToolResult
from ffzap.infrastructure.event_bus import EventBus
from ffzap.infrastructure.logging import setup_logging, RunLogger
from ffzap.infrastructure.progress import ProgressTracker

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config():
    """Returns a sample AppConfig object for testing."""
    return AppConfig(
        processor={
            "thread_count": 4,
            "ffmpeg_options": "-c:v libx264 -crf 23",
            "output": "/out/{{name}}.{{ext}}",
            "overwrite": False,
            "verbose": True,
            "delete": False,
            "eta": False,
        },
        logging={
            "debug": False,
        }
    )

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "ffzap.yaml"

    content = {
        'processor': {
            'thread_count': 3,
            'ffmpeg_options': '-c:a libmp3lame',
            'output': 'out/{{parent}}/{{name}}.mp3',
            'overwrite': True,
            'verbose': False,
            'delete': False,
        },
        'logging': {
            'log_dir': str(tmp_path / "logs"),
            'debug': True,
        }
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

@pytest.fixture
def log_file(tmp_path):
    """Configures logging into a per-test file and returns its path."""
    path = tmp_path / "logs" / "run.log"
    setup_logging(log_path=path)
    return path

@pytest.fixture
def run_logger(event_bus, log_file):
    return RunLogger(event_bus, log_path=log_file)

@pytest.fixture
def make_progress():
    """Factory for progress trackers that never touch the terminal."""
    def _make(total: int, eta: bool = False) -> ProgressTracker:
        return ProgressTracker(total, eta=eta, disable=True)
    return _make


class FakeFFmpeg:
    """Stands in for FFmpegAdapter; records calls and writes the output file on success."""

    def __init__(self, returncode: int = 0, stderr: str = "", launch_error: bool = False,
                 fail_for: Optional[List[str]] = None):
        self.returncode = returncode
        self.stderr = stderr
        self.launch_error = launch_error
        self.fail_for = set(fail_for or [])
        self.calls = []
        self._lock = threading.Lock()

    def run(self, input_path, options, output_path, overwrite=False):
        with self._lock:
            self.calls.append({
                "input": input_path,
                "options": list(options),
                "output": output_path,
                "overwrite": overwrite,
            })
        if self.launch_error:
            raise ToolLaunchError("ffmpeg", FileNotFoundError(2, "No such file or directory"))
        if input_path in self.fail_for or self.returncode != 0:
            return ToolResult(returncode=self.returncode or 1, stderr=self.stderr or "Invalid data found")
        Path(output_path).write_bytes(b"transcoded")
        return ToolResult(returncode=0)

    @property
    def inputs(self):
        with self._lock:
            return [call["input"] for call in self.calls]


@pytest.fixture
def fake_ffmpeg():
    """Factory for FakeFFmpeg instances."""
    return FakeFFmpeg

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def test_input_dir(tmp_path):
    """Creates a test input directory."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir

@pytest.fixture
def test_output_dir(tmp_path):
    """Output directory (not created; the processor creates it)."""
    return tmp_path / "output"

@pytest.fixture
def dummy_media_files(test_input_dir):
    """Creates dummy media files in test input directory."""
    files = []

    for i in range(3):
        f = test_input_dir / f"clip{i}.mov"
        f.write_bytes(b"dummy media content " * 100)
        files.append(f)

    subdir = test_input_dir / "subdir"
    subdir.mkdir()
    f = subdir / "subclip.mov"
    f.write_bytes(b"dummy media content " * 100)
    files.append(f)

    return files

# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
