"""File pipeline: streams a log file through the line processor in one pass."""

import gzip
import logging
import os
from typing import IO, Callable, Iterable, Optional

from logscrubber.core.constants import PROGRESS_INTERVAL
from logscrubber.core.exceptions import PipelineIOError
from logscrubber.core.models import PipelineStats
from logscrubber.core.processor import LineProcessor

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

# Undecodable bytes survive the round trip instead of aborting the run.
# Input lines end at LF only; a stray CR stays inside its line.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def open_output(path: str, compress: bool = False) -> IO[str]:
    """Open ``path`` for text output, gzip-compressed when asked."""
    if compress:
        return gzip.open(path, "wt", encoding=_ENCODING, errors=_ERRORS, newline="")
    return open(path, "w", encoding=_ENCODING, errors=_ERRORS, newline="")


class FilePipeline:
    def __init__(
        self,
        processor: LineProcessor,
        verbose: bool = False,
        progress_interval: int = PROGRESS_INTERVAL,
    ):
        self.processor = processor
        self.verbose = verbose
        self.progress_interval = progress_interval

    def process_lines(
        self,
        lines: Iterable[str],
        sink: Optional[IO[str]],
        source: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PipelineStats:
        """
        Scrub ``lines`` in order, writing one output line per non-blank input.

        ``sink`` may be None for a dry run. Blank lines are counted but never
        written. A line that fails unexpectedly is written unchanged and
        counted as failed; write errors abort the run.
        """
        stats = PipelineStats()

        for raw in lines:
            stats.total_lines += 1
            line = raw.rstrip("\r\n")

            if not line.strip():
                stats.empty_lines += 1
                continue

            try:
                result = self.processor.process_line(line, source, stats.total_lines)
                scrubbed = result.text
                if result.reverted:
                    stats.failed_lines += 1
            except Exception as e:  # noqa: BLE001
                logger.warning("Failed to process line %d: %s", stats.total_lines, e)
                scrubbed = line
                stats.failed_lines += 1

            stats.processed_lines += 1

            if sink is not None:
                try:
                    sink.write(scrubbed + "\n")
                except OSError as e:
                    raise PipelineIOError(
                        f"failed to write to output file: {e}"
                    ) from e
            elif self.verbose:
                logger.info("Line %d would be scrubbed", stats.total_lines)

            if on_progress is not None and stats.total_lines % self.progress_interval == 0:
                on_progress(stats.total_lines)

        return stats

    def process_file(
        self,
        input_path: str,
        output_path: Optional[str] = None,
        compress: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PipelineStats:
        """
        Scrub ``input_path`` into ``output_path``.

        Passing no output path performs a dry run: every line is processed
        but nothing is written.
        """
        source = os.path.basename(input_path)

        try:
            infile = open(input_path, "r", encoding=_ENCODING, errors=_ERRORS, newline="\n")
        except OSError as e:
            raise PipelineIOError(f"failed to open input file: {e}", path=input_path) from e

        with infile:
            if output_path is None:
                return self._run(infile, None, source, on_progress)

            try:
                outfile = open_output(output_path, compress)
            except OSError as e:
                raise PipelineIOError(
                    f"failed to create output file: {e}", path=output_path
                ) from e

            with outfile:
                return self._run(infile, outfile, source, on_progress)

    def _run(self, infile, outfile, source, on_progress) -> PipelineStats:
        try:
            return self.process_lines(infile, outfile, source, on_progress)
        except OSError as e:
            raise PipelineIOError(f"error reading input file: {e}") from e
