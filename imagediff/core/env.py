"""Environment configuration for imagediff.

Load order (first wins):
  1. Existing OS environment variables, never overwritten.
  2. .env file at --env-file path (if explicitly provided).
  3. .env file walking up from cwd, stopping at .git (file or dir).

Recognised variables (all optional, CLI flags override them):
  IMAGEDIFF_DIFF_MODE          bw | gray | color
  IMAGEDIFF_SCALE              scale factor for plain diffs
  IMAGEDIFF_NORMALIZED_SCALE   scale factor for normalized diffs
  IMAGEDIFF_WORKERS            parallelism hint (defaults to CPU count)
  IMAGEDIFF_OUTPUT_DIR         directory for temporary output files
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from imagediff.core.errors import ConfigError
from imagediff.core.types import DEFAULT_MODE, DEFAULT_NORMALIZED_SCALE, DEFAULT_SCALE

ENV_PREFIX = 'IMAGEDIFF_'


def find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return the first .env found. Stops at a .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # .git is a dir in a clone, a file in a worktree
        if (current / '.git').exists():
            return None
        if current.parent == current:
            return None
        current = current.parent


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=value lines, ignoring blanks, comments and lines without '='."""
    values: dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env(env_file: str | None = None) -> Path | None:
    """Copy .env values into os.environ for keys not already set.

    Returns the path that was loaded, or None if no .env was used.
    """
    if env_file:
        path: Path | None = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = find_dotenv(Path.cwd())
        if path is None:
            return None

    for key, value in parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


def _number(environ: Mapping[str, str], name: str, kind: type, default: Any) -> Any:
    raw = environ.get(ENV_PREFIX + name, '').strip()
    if not raw:
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f'{ENV_PREFIX}{name} must be a {kind.__name__}, got {raw!r}') from None


def env_defaults(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """CLI defaults taken from IMAGEDIFF_* variables."""
    if environ is None:
        environ = os.environ
    return {
        'diff_mode': environ.get(ENV_PREFIX + 'DIFF_MODE', '').strip() or DEFAULT_MODE,
        'scale': _number(environ, 'SCALE', float, DEFAULT_SCALE),
        'normalized_scale': _number(environ, 'NORMALIZED_SCALE', float, DEFAULT_NORMALIZED_SCALE),
        'workers': _number(environ, 'WORKERS', int, None),
        'output_dir': environ.get(ENV_PREFIX + 'OUTPUT_DIR', '').strip() or None,
    }
