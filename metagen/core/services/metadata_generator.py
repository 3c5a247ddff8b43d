"""
Metadata generator — run one external command, decode its JSON output,
and track whether the result changed since the last commit.

Fetching and committing are deliberately separate steps:

    value = generator.fetch()          # may raise ExecutionError / ParseError
    if generator.differs(value):
        upload(value)
        generator.save(value)          # value becomes the new baseline

The command's output is untrusted. Anything it prints is data, and every
way it can misbehave maps onto exactly one of the two error types below.
"""

from __future__ import annotations

import copy
import json
import logging
import math
from datetime import timedelta
from typing import Any

from metagen.adapters.base import ProcessRunner
from metagen.adapters.shell.command import ShellCommandRunner
from metagen.core.models.plugin import MetadataPlugin

logger = logging.getLogger(__name__)

# Any decoded JSON value: dict, list, str, int, float, bool or None
JSONValue = Any

DEFAULT_INTERVAL = timedelta(minutes=10)
MIN_INTERVAL = timedelta(minutes=1)

_EXCERPT_LEN = 80

# Deepest container nesting fetch accepts
MAX_DEPTH = 256

# Baseline marker; distinct from a saved JSON null
_UNSET = object()


class MetadataError(Exception):
    """Base class for a failed metadata fetch."""

    def __init__(self, message: str, command: str = ""):
        super().__init__(message)
        self.command = command


class ExecutionError(MetadataError):
    """The command could not be run or exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: str = "",
        exit_code: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message, command)
        self.exit_code = exit_code
        self.stderr = stderr


class ParseError(MetadataError):
    """The command succeeded but stdout was not exactly one JSON value."""

    def __init__(self, message: str, command: str = "", excerpt: str = ""):
        super().__init__(message, command)
        self.excerpt = excerpt


def _reject_constant(name: str) -> None:
    # json accepts NaN / Infinity / -Infinity, which are not JSON
    raise ValueError(f"non-standard JSON constant {name!r}")


def _parse_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ValueError(f"number {literal} is out of range")
    return value


def _check_depth(value: JSONValue) -> None:
    """Reject values nested deeper than MAX_DEPTH containers."""
    stack = [(value, 1)]
    while stack:
        item, depth = stack.pop()
        if isinstance(item, dict):
            children = item.values()
        elif isinstance(item, list):
            children = item
        else:
            continue
        if depth > MAX_DEPTH:
            raise ValueError(f"nesting exceeds {MAX_DEPTH} levels")
        stack.extend((child, depth + 1) for child in children)


def decode_metadata(raw: bytes) -> JSONValue:
    """Decode stdout bytes as a single JSON value.

    Surrounding whitespace is allowed; anything else after the first
    value is an error. Values nested deeper than MAX_DEPTH are refused
    so that whatever decodes can also be copied, compared and cached.

    Raises:
        ValueError: If the bytes are not UTF-8, not exactly one JSON value,
            hold an out-of-range number, or are nested too deeply.
        RecursionError: If the value is nested too deeply to decode at all.
    """
    text = raw.decode("utf-8")
    value = json.loads(text, parse_constant=_reject_constant, parse_float=_parse_float)
    _check_depth(value)
    return value


def _scalar_equal(a: JSONValue, b: JSONValue) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is None and b is None


def json_equal(a: JSONValue, b: JSONValue) -> bool:
    """Structural equality of two decoded JSON values.

    Unlike ``==``, booleans never equal numbers (``true`` != ``1``).
    Integers and floats compare by numeric value (``100`` == ``100.0``).
    """
    pending = [(a, b)]
    while pending:
        x, y = pending.pop()
        if isinstance(x, dict) or isinstance(y, dict):
            if not (isinstance(x, dict) and isinstance(y, dict)) or x.keys() != y.keys():
                return False
            pending.extend((x[k], y[k]) for k in x)
        elif isinstance(x, (list, tuple)) or isinstance(y, (list, tuple)):
            if not (isinstance(x, (list, tuple)) and isinstance(y, (list, tuple))):
                return False
            if len(x) != len(y):
                return False
            pending.extend(zip(x, y))
        elif not _scalar_equal(x, y):
            return False
    return True


def _excerpt(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace").strip()
    if len(text) > _EXCERPT_LEN:
        return text[:_EXCERPT_LEN] + "…"
    return text


class Generator:
    """Metadata generator for one configured command.

    Not thread-safe. One scheduling loop drives one generator; separate
    generators share nothing and may run concurrently.
    """

    def __init__(
        self,
        name: str,
        config: MetadataPlugin,
        runner: ProcessRunner | None = None,
    ):
        self.name = name
        self.config = config
        self.runner = runner or ShellCommandRunner(
            timeout=config.timeout_seconds,
            env=config.env,
        )
        self._previous: JSONValue = _UNSET

    def __repr__(self) -> str:
        return f"<Generator name={self.name!r} command={self.config.command!r}>"

    @property
    def has_baseline(self) -> bool:
        """Whether a baseline has been saved or restored."""
        return self._previous is not _UNSET

    def fetch(self) -> JSONValue:
        """Run the command once and decode its stdout.

        Returns:
            The decoded JSON value (object, array, scalar or None).

        Raises:
            ExecutionError: The command could not run or exited non-zero.
            ParseError: stdout was empty or not exactly one JSON value.
        """
        command = self.config.command
        result = self.runner.run(command)

        if result.stderr:
            logger.debug("[%s] stderr: %s", self.name, result.stderr)

        if result.error is not None:
            logger.warning("[%s] command failed to run: %s", self.name, result.error)
            raise ExecutionError(result.error, command=command)

        if result.exit_code != 0:
            logger.warning(
                "[%s] command exited with code %d", self.name, result.exit_code
            )
            raise ExecutionError(
                f"Command exited with code {result.exit_code}",
                command=command,
                exit_code=result.exit_code,
                stderr=result.stderr,
            )

        try:
            value = decode_metadata(result.stdout)
        except (ValueError, RecursionError) as e:
            logger.warning("[%s] output is not valid JSON: %s", self.name, e)
            raise ParseError(
                f"Invalid JSON output: {e}",
                command=command,
                excerpt=_excerpt(result.stdout),
            ) from e

        logger.debug(
            "[%s] fetched %s in %dms",
            self.name,
            type(value).__name__,
            result.duration_ms,
        )
        return value

    def save(self, metadata: JSONValue) -> None:
        """Commit metadata as the comparison baseline (stored as a deep copy)."""
        self._previous = copy.deepcopy(metadata)

    def restore(self, metadata: JSONValue) -> None:
        """Seed the baseline from a persisted copy, e.g. at agent startup."""
        self.save(metadata)
        logger.debug("[%s] baseline restored", self.name)

    def differs(self, metadata: JSONValue) -> bool:
        """Whether metadata differs from the baseline.

        Always True before the first save, even for None.
        """
        if self._previous is _UNSET:
            return True
        return not json_equal(self._previous, metadata)

    def interval(self) -> timedelta:
        """Fetch cadence: 10 minutes by default, never below 1 minute."""
        minutes = self.config.execution_interval
        if minutes is None:
            return DEFAULT_INTERVAL
        if minutes <= 1:
            return MIN_INTERVAL
        return timedelta(minutes=minutes)
