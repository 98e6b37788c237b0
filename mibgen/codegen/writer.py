"""
Output routing for generated source.

A run writes either to one combined destination (a file or stdout) or
to one file per module plus a shared types file. Every unit goes through
the formatter first; the header is written once per physical file.
"""

import sys
from pathlib import Path
from typing import Callable, IO, List, Optional, Union

from ..logging_config import get_logger
from .core.config import STDOUT_SENTINEL
from .core.generator import CodeGenerator, FormatError, OutputError

logger = get_logger(__name__)

STDOUT_NAME = "<stdout>"


class OutputRouter:
    """Decides where each generated unit goes and writes it."""

    def __init__(
        self,
        formatter: Callable[[str], str],
        header: str,
        output: Optional[Union[str, Path]] = None,
        out_dir: Union[str, Path] = ".",
        module_filename: Callable[[str], str] = lambda name: name.lower() + ".go",
        types_filename: str = "types.go",
        stdout: Optional[IO[str]] = None,
    ):
        """
        Initialize the router.

        Args:
            formatter: Canonicalizes a unit, raising FormatError on failure
            header: Text written once at the top of each physical file
            output: Combined destination path, "-" for stdout, or None to
                split into one file per module
            out_dir: Directory for split output
            module_filename: Maps a module name to its file name in split mode
            types_filename: File name of the shared types file in split mode
            stdout: Stream used for "-" (defaults to sys.stdout)
        """
        self.formatter = formatter
        self.header = header
        self.output = str(output) if output else None
        self.out_dir = Path(out_dir)
        self.module_filename = module_filename
        self.types_filename = types_filename
        self._stdout = stdout
        self._combined: Optional[IO[str]] = None
        self._owns_combined = False
        self._header_written = False
        self.destinations: List[str] = []

    @classmethod
    def for_generator(
        cls,
        generator: CodeGenerator,
        output: Optional[Union[str, Path]] = None,
        out_dir: Union[str, Path] = ".",
        stdout: Optional[IO[str]] = None,
    ) -> "OutputRouter":
        """Build a router using the generator's formatter, header and file names."""
        return cls(
            formatter=generator.format_code,
            header=generator.render_header(),
            output=output,
            out_dir=out_dir,
            module_filename=generator.output_filename,
            types_filename=generator.types_filename,
            stdout=stdout,
        )

    @property
    def split(self) -> bool:
        return self.output is None

    def __enter__(self) -> "OutputRouter":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        """Release the combined destination if this router opened it."""
        if self._combined is not None and self._owns_combined:
            self._combined.close()
        self._combined = None
        self._owns_combined = False

    def write_module(self, module_name: str, body: str) -> Optional[str]:
        """
        Write one module's declarations.

        Returns:
            Destination name, or None if the body was empty and nothing was written

        Raises:
            FormatError: If the body cannot be formatted (the raw body is still written)
            OutputError: If the destination cannot be opened or written
        """
        if not body:
            return None

        if self.split:
            path = self.out_dir / self.module_filename(module_name)
            logger.info("Module %s: Outputting to %s", module_name, path)
            return self._write_file(path, body)

        return self._write_combined(body)

    def write_types(self, body: str) -> str:
        """
        Write the flushed type declarations, after every module.

        Returns:
            Destination name
        """
        if self.split:
            path = self.out_dir / self.types_filename
            logger.info("Types: Outputting to %s", path)
            return self._write_file(path, body)

        if not body and self._header_written:
            return self._combined_destination
        return self._write_combined(body)

    @property
    def _combined_destination(self) -> str:
        return STDOUT_NAME if self.output == STDOUT_SENTINEL else self.output

    def _write_file(self, path: Path, body: str) -> str:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            out = open(path, "w", encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Opening file {path}: {e}") from e

        with out:
            self._emit(out, body, prefix=self.header, destination=str(path))
        return str(path)

    def _write_combined(self, body: str) -> str:
        out = self._combined_stream()
        destination = self._combined_destination
        # Header once at the top, a blank line between later units
        prefix = "\n" if self._header_written else self.header
        self._header_written = True
        self._emit(out, body, prefix=prefix, destination=destination)
        return destination

    def _combined_stream(self) -> IO[str]:
        if self._combined is not None:
            return self._combined

        if self.output == STDOUT_SENTINEL:
            self._combined = self._stdout if self._stdout is not None else sys.stdout
            self._owns_combined = False
        else:
            try:
                self._combined = open(self.output, "w", encoding="utf-8")
            except OSError as e:
                raise OutputError(f"Opening file {self.output}: {e}") from e
            self._owns_combined = True
            logger.info("Outputting to %s", self.output)

        return self._combined

    def _emit(self, out: IO[str], body: str, prefix: str, destination: str):
        self.destinations.append(destination)
        try:
            formatted = self.formatter(body)
        except FormatError as e:
            # Keep the unformatted text so the failure can be inspected
            self._write(out, prefix + body, destination)
            raise FormatError(
                f"Generating formatted source for {destination}: {e}", source=body
            ) from e

        self._write(out, prefix + formatted, destination)

    def _write(self, out: IO[str], text: str, destination: str):
        try:
            out.write(text)
            if text and not text.endswith("\n"):
                out.write("\n")
            out.flush()
        except OSError as e:
            raise OutputError(f"Writing file {destination}: {e}") from e
