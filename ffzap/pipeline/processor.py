"""Concurrent job processor.

Owns the shared work queue, runs a fixed number of worker threads against it
and collects the failure list. Each worker pops one path at a time and runs
the whole per-file pipeline for it:

validate source → resolve output path → overwrite policy → create parent
directory → run ffmpeg → delete source (optional) → account for the result.

Per-item errors never stop the run. process_files() blocks until every
worker has been joined; afterwards the caller reads get_failed_paths(),
get_skipped_paths() or summary().
"""

import concurrent.futures
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ffzap.config.models import ProcessorConfig
from ffzap.domain.errors import ConfigError, OutputPathError, ToolLaunchError
from ffzap.domain.events import (
    JobCompleted,
    JobFailed,
    JobSkipped,
    JobStarted,
    ProcessingFinished,
    ProgressUpdated,
)
from ffzap.domain.models import JobStatus, RunSummary
from ffzap.infrastructure.event_bus import EventBus
from ffzap.infrastructure.ffmpeg import FFmpegAdapter
from ffzap.infrastructure.logging import RunLogger
from ffzap.infrastructure.progress import ProgressTracker
from ffzap.pipeline.job_queue import JobQueue
from ffzap.pipeline.output_path import build_output_path, split_options


class Processor:
    """Fixed-size worker pool that runs ffmpeg once per input path.

    The queue, the failure list and the progress counter are guarded
    independently; no lock is held while ffmpeg runs.

    Args:
        logger: RunLogger shared by all workers.
        progress: ProgressTracker whose total equals the number of inputs.
        ffmpeg_adapter: Runs the external tool (default: ``ffmpeg`` on PATH).
        event_bus: Receives job events (default: the logger's bus).
        queue_factory: Builds the JobQueue for a run.
    """

    def __init__(
        self,
        logger: RunLogger,
        progress: ProgressTracker,
        ffmpeg_adapter: Optional[FFmpegAdapter] = None,
        event_bus: Optional[EventBus] = None,
        queue_factory: Callable[[Iterable[str]], JobQueue] = JobQueue,
    ):
        self.logger = logger
        self.progress = progress
        self.ffmpeg_adapter = ffmpeg_adapter or FFmpegAdapter()
        self.event_bus = event_bus or logger.event_bus
        self.queue_factory = queue_factory
        self._log = logging.getLogger(__name__)

        self._failed_paths: List[str] = []
        self._failed_lock = threading.Lock()
        self._skipped_paths: List[str] = []
        self._skipped_lock = threading.Lock()

    def process_files(
        self,
        paths: List[str],
        thread_count: int,
        ffmpeg_options: Optional[str],
        output_pattern: str,
        overwrite: bool = False,
        verbose: bool = False,
        delete: bool = False,
    ):
        """Processes every path and returns once all workers have finished.

        Raises ConfigError before any worker starts if there is no output pattern.
        """
        if not output_pattern:
            raise ConfigError("An output pattern is required (--output)")
        config = ProcessorConfig(
            thread_count=max(1, int(thread_count)),
            ffmpeg_options=ffmpeg_options,
            output=output_pattern,
            overwrite=overwrite,
            verbose=verbose,
            delete=delete,
        )
        with self._failed_lock:
            self._failed_paths = []
        with self._skipped_lock:
            self._skipped_paths = []

        queue = self.queue_factory(paths)
        options = split_options(config.ffmpeg_options)

        self._log.info(
            f"Run started: files={len(paths)}, threads={config.thread_count}, "
            f"overwrite={overwrite}, delete={delete}"
        )
        self.progress.start()

        try:
            with concurrent.futures.ThreadPoolExecutor(
                max_workers=config.thread_count, thread_name_prefix="ffzap-worker"
            ) as executor:
                futures = [
                    executor.submit(self._worker_loop, worker_id, queue, options, config)
                    for worker_id in range(config.thread_count)
                ]
                for future in concurrent.futures.as_completed(futures):
                    try:
                        future.result()
                    except Exception as e:
                        self._log.error(f"Worker failed with exception: {e}")
        finally:
            self.progress.finish()

        self._log.info(
            f"Run finished: succeeded={self.progress.value()}, failed={len(self._failed_paths)}, "
            f"skipped={len(self._skipped_paths)}"
        )
        self._notify(ProcessingFinished(
            succeeded=self.progress.value(),
            total=self.progress.total(),
            failed_paths=self.get_failed_paths(),
            skipped=len(self._skipped_paths),
        ))

    def get_failed_paths(self) -> List[str]:
        with self._failed_lock:
            return list(self._failed_paths)

    def get_skipped_paths(self) -> List[str]:
        with self._skipped_lock:
            return list(self._skipped_paths)

    def summary(self) -> RunSummary:
        return RunSummary(
            succeeded=self.progress.value(),
            total=self.progress.total(),
            failed_paths=self.get_failed_paths(),
            skipped_paths=self.get_skipped_paths(),
            log_path=self.logger.log_path,
        )

    def _worker_loop(self, worker_id: int, queue: JobQueue, options: List[str], config: ProcessorConfig):
        while True:
            path = queue.pop()
            if path is None:
                break
            try:
                self._process_file(worker_id, path, options, config)
            except Exception as e:
                # Failure of this item only; recorded outcomes never raise past _notify
                self._add_failure(path)
                self._notify(JobFailed(worker_id=worker_id, path=path, reason=str(e)))
                self.logger.log_error(f"Unexpected error while processing {path}: {e}", worker_id, True)

    def _process_file(self, worker_id: int, path: str, options: List[str], config: ProcessorConfig) -> JobStatus:
        verbose = config.verbose
        source = Path(path)

        if not source.is_file():
            self.logger.log_error(
                f"{path} doesn't appear to be a file, ignoring. "
                "Continuing with next task if there's more to do...",
                worker_id,
                verbose,
            )
            with self._skipped_lock:
                self._skipped_paths.append(path)
            self._notify(JobSkipped(worker_id=worker_id, path=path))
            return JobStatus.SKIPPED

        self.logger.log_info(f"Processing {path}", worker_id, verbose)
        self._notify(JobStarted(worker_id=worker_id, path=path))

        try:
            output_path = build_output_path(path, config.output)
        except OutputPathError as e:
            self.logger.log_error(
                f"Could not build output path for {path}: {e}. "
                "Continuing with next task if there's more to do...",
                worker_id,
                verbose,
            )
            return self._fail(worker_id, path, str(e))

        output = Path(output_path)
        if output.exists() and not config.overwrite:
            self.logger.log_error(
                f"File {output_path} already exists and --overwrite is set to false. "
                "Continuing with next task if there's more to do...",
                worker_id,
                verbose,
            )
            return self._fail(
                worker_id, path, "Output already exists", output_path=output_path, failed_entry=output_path
            )

        self._ensure_parent_dir(worker_id, output, output_path, verbose)

        try:
            result = self.ffmpeg_adapter.run(path, options, output_path, overwrite=config.overwrite)
        except ToolLaunchError as e:
            self.logger.log_error(
                f"There was an error running {e.binary}. "
                f"Please check if it's correctly installed and working as intended. ({e.cause})",
                worker_id,
                True,
            )
            return self._fail(worker_id, path, str(e), output_path=output_path)

        if not result.success:
            self.logger.log_error(
                f"Error processing file {path}. Error is: {result.stderr}",
                worker_id,
                verbose,
            )
            if config.delete:
                self.logger.log_info("Keeping the file due to the error above", worker_id, verbose)
            self.logger.log_info("Continuing with next task if there's more to do...", worker_id, verbose)
            return self._fail(
                worker_id, path, f"ffmpeg exited with code {result.returncode}", output_path=output_path
            )

        self.logger.log_info(f"Success, saving to {output_path}", worker_id, verbose)
        deleted = self._delete_source(worker_id, source, verbose) if config.delete else False

        self.progress.increment(1)
        self._notify(JobCompleted(
            worker_id=worker_id, path=path, output_path=output_path, source_deleted=deleted
        ))
        self._notify(ProgressUpdated(done=self.progress.value(), total=self.progress.total()))
        return JobStatus.COMPLETED

    def _ensure_parent_dir(self, worker_id: int, output: Path, output_path: str, verbose: bool):
        parent = output.parent
        if parent.exists():
            return
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # Not fatal: ffmpeg will report the missing directory itself
            self.logger.log_error(
                f"Could not create directory structure for file {output_path}", worker_id, verbose
            )
            self.logger.log_error(str(e), worker_id, verbose)

    def _delete_source(self, worker_id: int, source: Path, verbose: bool) -> bool:
        try:
            source.unlink()
        except PermissionError:
            self.logger.log_error(
                f"Permission denied when trying to delete file {source}", worker_id, verbose
            )
            return False
        except OSError:
            self.logger.log_error(
                f"An unknown error occurred when trying to delete file {source}", worker_id, verbose
            )
            return False
        self.logger.log_info(f"Removed {source}", worker_id, verbose)
        return True

    def _notify(self, event):
        """Publishes an event. Subscriber errors are logged and never change the accounting."""
        try:
            self.event_bus.publish(event)
        except Exception as e:
            self._log.error(f"Subscriber failed on {type(event).__name__}: {e}")

    def _add_failure(self, entry: str):
        with self._failed_lock:
            self._failed_paths.append(entry)

    def _fail(
        self,
        worker_id: int,
        path: str,
        reason: str,
        output_path: Optional[str] = None,
        failed_entry: Optional[str] = None,
    ) -> JobStatus:
        self._add_failure(failed_entry or path)
        self._notify(JobFailed(worker_id=worker_id, path=path, reason=reason, output_path=output_path))
        return JobStatus.FAILED
