import subprocess
import logging
import time
from typing import List, Sequence
from ffzap.domain.errors import ToolLaunchError
from ffzap.domain.models import ToolResult

class FFmpegAdapter:
    """Runs ffmpeg once per job and reports exit status plus stderr.

    Output of the tool is never interpreted; stderr is handed back verbatim.
    """

    def __init__(self, binary: str = "ffmpeg", debug: bool = False):
        self.binary = binary
        self.debug = debug
        self.logger = logging.getLogger(__name__)

    def build_command(self, input_path: str, options: Sequence[str], output_path: str, overwrite: bool) -> List[str]:
        """Constructs the ffmpeg command line arguments.

        ``-y`` is placed right after the binary rather than after the output
        path. It is a global option, so ffmpeg treats both positions the same.
        """
        cmd = [self.binary]
        if overwrite:
            cmd.append("-y")  # Overwrite output files
        cmd.extend(["-i", input_path])
        cmd.extend(options)
        cmd.append(output_path)
        return cmd

    def run(self, input_path: str, options: Sequence[str], output_path: str, overwrite: bool = False) -> ToolResult:
        """Blocks until ffmpeg exits. Raises ToolLaunchError if it cannot start."""
        cmd = self.build_command(input_path, options, output_path, overwrite)
        start_time = time.monotonic() if self.debug else None

        if self.debug:
            self.logger.debug(f"FFMPEG_CMD: {' '.join(cmd)}")

        try:
            process = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise ToolLaunchError(self.binary, exc) from exc

        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""

        if self.debug and start_time is not None:
            elapsed = time.monotonic() - start_time
            self.logger.debug(f"FFMPEG_END: {input_path} code={process.returncode} elapsed={elapsed:.2f}s")

        return ToolResult(returncode=process.returncode, stderr=stderr)
