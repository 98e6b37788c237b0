"""
Canonical formatting for generated Go declarations.

Declarations are formatted as a declaration list, without a package
clause. ``gofmt`` needs a full file, so a placeholder clause is added
before piping the source through it and removed afterwards.
"""

import shutil
import subprocess
from typing import Optional

from ....logging_config import get_logger
from ...core.config import ConfigError
from ...core.generator import FormatError

logger = get_logger(__name__)

PLACEHOLDER_PACKAGE = "package mibgenformat\n\n"
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


def check_balanced(source: str):
    """
    Check delimiters and string literals of Go source.

    Raises:
        FormatError: On an unclosed or mismatched delimiter or string
    """
    stack = []
    line = 1
    i = 0
    length = len(source)

    while i < length:
        char = source[i]

        if char == "\n":
            line += 1
        elif char == "/" and source.startswith("//", i):
            end = source.find("\n", i)
            i = length if end == -1 else end
            continue
        elif char == '"':
            i += 1
            while i < length and source[i] != '"':
                if source[i] == "\n":
                    raise FormatError(f"line {line}: newline in string literal", source)
                if source[i] == "\\":
                    i += 1
                i += 1
            if i >= length:
                raise FormatError(f"line {line}: unterminated string literal", source)
        elif char == "`":
            end = source.find("`", i + 1)
            if end == -1:
                raise FormatError(f"line {line}: unterminated raw string", source)
            line += source.count("\n", i, end)
            i = end
        elif char in _OPENERS:
            stack.append((char, line))
        elif char in _CLOSERS:
            if not stack or stack[-1][0] != _CLOSERS[char]:
                raise FormatError(f"line {line}: unexpected {char!r}", source)
            stack.pop()

        i += 1

    if stack:
        opener, opened_at = stack[-1]
        raise FormatError(f"line {opened_at}: unclosed {opener!r}", source)


def normalize_whitespace(source: str) -> str:
    """Strip trailing whitespace and collapse runs of blank lines."""
    lines = []
    blank = False
    for line in source.split("\n"):
        line = line.rstrip()
        if not line:
            if blank or not lines:
                continue
            blank = True
        else:
            blank = False
        lines.append(line)

    while lines and not lines[-1]:
        lines.pop()

    return "\n".join(lines) + "\n" if lines else ""


class GoFormatter:
    """Canonicalizes Go declaration lists."""

    def __init__(self, mode: str = "auto", gofmt_path: str = "gofmt"):
        """
        Args:
            mode: ``gofmt``, ``builtin``, or ``auto`` (gofmt when installed)
            gofmt_path: gofmt executable name or path

        Raises:
            ConfigError: On an unknown mode, or mode ``gofmt`` without a gofmt binary
        """
        if mode not in ("auto", "gofmt", "builtin"):
            raise ConfigError(f"Unknown formatter mode: {mode}")

        self.gofmt: Optional[str] = None
        if mode != "builtin":
            self.gofmt = shutil.which(gofmt_path)
            if self.gofmt is None:
                if mode == "gofmt":
                    raise ConfigError(f"gofmt not found: {gofmt_path}")
                logger.info("gofmt not found, using builtin formatting")

    @property
    def mode(self) -> str:
        return "gofmt" if self.gofmt else "builtin"

    def format(self, source: str) -> str:
        """
        Format a declaration list.

        Raises:
            FormatError: If the source is not valid enough to format
        """
        if self.gofmt:
            return self._run_gofmt(source)

        check_balanced(source)
        return normalize_whitespace(source)

    __call__ = format

    def _run_gofmt(self, source: str) -> str:
        try:
            completed = subprocess.run(
                [self.gofmt],
                input=PLACEHOLDER_PACKAGE + source,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise FormatError(f"Running {self.gofmt}: {e}", source) from e

        if completed.returncode != 0:
            raise FormatError(completed.stderr.strip() or "gofmt failed", source)

        formatted = completed.stdout
        if formatted.startswith(PLACEHOLDER_PACKAGE.strip()):
            formatted = formatted[len(PLACEHOLDER_PACKAGE.strip()):]
        return formatted.lstrip("\n")
