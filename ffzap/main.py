import typer
from pathlib import Path
from typing import Optional, List

from pydantic import ValidationError

from ffzap.config.loader import load_config
from ffzap.domain.errors import ConfigError
from ffzap.infrastructure.logging import setup_logging, RunLogger, FAILED_PATHS_HEADER
from ffzap.infrastructure.event_bus import EventBus
from ffzap.infrastructure.ffmpeg import FFmpegAdapter
from ffzap.infrastructure.path_loader import load_file_list, expand_inputs
from ffzap.infrastructure.progress import ProgressTracker, ETA_WARNING
from ffzap.pipeline.processor import Processor
from ffzap.ui.console import ConsoleReporter

app = typer.Typer(help="ffzap - run ffmpeg over many files in parallel")

OUTPUT_HELP = (
    "Output file pattern. Placeholders: {{dir}} (directory of the input as given), "
    "{{parent}} (name of the input's parent directory), {{name}} (file name without "
    "extension), {{ext}} (extension). Example: /destination/{{dir}}/{{name}}_transcoded.{{ext}}"
)


def _fail(message: str):
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def load_paths(inputs: Optional[List[str]], file_list: Optional[Path]) -> List[str]:
    """Builds the job list from either the positional inputs or --file-list."""
    if inputs and file_list is not None:
        raise ConfigError("Pass input paths or --file-list, not both.")
    if file_list is not None:
        return load_file_list(file_list)
    if not inputs:
        raise ConfigError("No input files given. Pass paths or use --file-list.")
    return expand_inputs(inputs)


@app.command()
def run(
    inputs: Optional[List[str]] = typer.Argument(
        None,
        help="Files or directories to process (directories are searched recursively)"
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help=OUTPUT_HELP),
    file_list: Optional[Path] = typer.Option(
        None, "--file-list", help="Path to a file containing paths to process. One path per line"
    ),
    thread_count: Optional[int] = typer.Option(
        None, "--thread-count", "-t", min=1, help="Number of parallel ffmpeg processes (default 2)"
    ),
    ffmpeg_options: Optional[str] = typer.Option(
        None, "--ffmpeg-options", "-f", help="Options passed to ffmpeg, split on single spaces"
    ),
    overwrite: Optional[bool] = typer.Option(
        None, "--overwrite/--no-overwrite", help="Let ffmpeg overwrite existing output files"
    ),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--no-verbose", help="Show log lines while ffzap is running"),
    delete: Optional[bool] = typer.Option(
        None, "--delete/--no-delete", help="Delete the source file after it was processed successfully"
    ),
    eta: Optional[bool] = typer.Option(None, "--eta/--no-eta", help="Display the current ETA in the progress bar"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Path to log file (overrides config)"),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Log ffmpeg command lines"),
):
    """Run ffmpeg on every input file using a pool of worker threads."""
    try:
        try:
            config = load_config(config_path)
        except (ConfigError, ValidationError) as exc:
            _fail(str(exc))

        # Apply CLI overrides
        proc = config.processor
        if output is not None: proc.output = output
        if thread_count is not None: proc.thread_count = thread_count
        if ffmpeg_options is not None: proc.ffmpeg_options = ffmpeg_options
        if overwrite is not None: proc.overwrite = overwrite
        if verbose is not None: proc.verbose = verbose
        if delete is not None: proc.delete = delete
        if eta is not None: proc.eta = eta
        if log_path is not None: config.logging.log_path = str(log_path)
        if debug is not None: config.logging.debug = debug

        if not proc.output:
            _fail("An output pattern is required (--output or processor.output in config).")

        try:
            paths = load_paths(inputs, file_list)
        except ConfigError as exc:
            _fail(str(exc))

        if proc.eta:
            typer.secho(ETA_WARNING, fg=typer.colors.YELLOW)

        setup_logging(
            log_path=Path(config.logging.log_path) if config.logging.log_path else None,
            debug=config.logging.debug,
            log_dir=Path(config.logging.log_dir) if config.logging.log_dir else None,
        )

        bus = EventBus()
        progress = ProgressTracker(len(paths), eta=proc.eta)
        logger = RunLogger(bus)
        ConsoleReporter(bus, progress)
        ffmpeg = FFmpegAdapter(binary=proc.ffmpeg_binary, debug=config.logging.debug)
        processor = Processor(logger, progress, ffmpeg_adapter=ffmpeg, event_bus=bus)

        processor.process_files(
            paths,
            proc.thread_count,
            proc.ffmpeg_options,
            proc.output,
            overwrite=proc.overwrite,
            verbose=proc.verbose,
            delete=proc.delete,
        )

        typer.echo(
            f"{progress.value()} out of {progress.total()} files have been successful. "
            f"A detailed log has been written to {logger.get_log_path()}"
        )

        failed_paths = processor.get_failed_paths()
        logger.append_failed_paths_to_log(failed_paths)

        if proc.verbose and failed_paths:
            typer.echo(f"\n{FAILED_PATHS_HEADER}")
            for failed in failed_paths:
                typer.echo(failed)

    except KeyboardInterrupt:
        typer.secho("\nStopped by user (Ctrl+C)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=130)

    except typer.Exit:
        raise

    except Exception as e:
        with open("error.log", "a") as f:
            import traceback
            traceback.print_exc(file=f)
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
