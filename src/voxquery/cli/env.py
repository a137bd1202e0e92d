"""Helpers for loading ``KEY=value`` env files passed with ``--env-file``.

Deployments usually keep ``DB_*`` and ``GEMINI_API_KEY`` in a ``.env`` file;
the CLI accepts the same file without requiring the values to be exported
first.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
import os
import re


# Relative values for these keys are resolved against the env file's folder.
_PATH_KEYS = {"VOXQUERY_DB_DIR", "VOXQUERY_SOUNDS_DIR", "VOXQUERY_LOG_DIR", "VOXQUERY_LOG_CONFIG"}


def extract_env_files(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split ``--env-file PATH`` / ``--env-file=PATH`` out of ``argv``.

    The flag may appear after subcommands; the rest of ``argv`` is returned
    in order for argparse.
    """

    env_files: list[str] = []
    remaining: list[str] = []

    tokens = iter(argv)
    for token in tokens:
        flag, sep, value = token.partition("=")
        if flag != "--env-file":
            remaining.append(token)
        elif sep:
            env_files.append(value)
        else:
            path = next(tokens, None)
            if path is None:
                raise SystemExit("--env-file requires a file path")
            env_files.append(path)

    return env_files, remaining


_ASSIGNMENT = re.compile(r"^(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)$")
_TRAILING_COMMENT = re.compile(r"(?:^|\s+)#.*$")


def _unquote(value: str) -> str | None:
    if len(value) >= 2 and value[0] in "'\"" and value[-1] == value[0]:
        return value[1:-1]
    return None


def _clean_value(raw: str) -> str:
    value = raw.strip()
    quoted = _unquote(value)
    if quoted is not None:
        return quoted
    value = _TRAILING_COMMENT.sub("", value)
    quoted = _unquote(value)
    return quoted if quoted is not None else value


def parse_env_file_text(text: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines; blank lines, comments and malformed lines are skipped."""

    parsed: dict[str, str] = {}
    for line in text.splitlines():
        match = _ASSIGNMENT.match(line.strip())
        if match is None:
            continue
        parsed[match.group("key")] = _clean_value(match.group("value"))
    return parsed


def _resolve_path_value(value: str, base_dir: Path) -> str:
    if not value:
        return value
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return str(candidate.resolve())


def load_env_file(path: str | Path, *, override: bool = True) -> dict[str, str]:
    """Load env vars from a file into ``os.environ``."""

    resolved = Path(path).expanduser()
    if not resolved.exists():
        raise SystemExit(f"--env-file does not exist: {resolved}")

    parsed = parse_env_file_text(resolved.read_text(encoding="utf-8"))
    base_dir = resolved.resolve().parent
    for key in _PATH_KEYS & parsed.keys():
        parsed[key] = _resolve_path_value(parsed[key], base_dir)

    for key, value in parsed.items():
        if override or key not in os.environ:
            os.environ[key] = value
    return parsed


def load_env_files(paths: Iterable[str | Path], *, override: bool = True) -> dict[str, str]:
    """Load multiple env files in order; later files override earlier ones."""

    merged: dict[str, str] = {}
    for path in paths:
        merged.update(load_env_file(path, override=override))
    return merged
