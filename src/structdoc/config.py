"""Configuration loading with precedence resolution and atomic writes.

structdoc reads a single JSON file deserialised into
:class:`~structdoc.models.DocsConfig`.  :func:`resolve_config` picks the
file to use, highest precedence first:

1. An explicit path (the CLI ``--config`` option).
2. The ``STRUCTDOC_CONFIG`` environment variable.
3. ``./structdoc.json`` in the current working directory.
4. Built-in defaults.

:func:`save_config` writes through :func:`_atomic_write` (temp file, then
rename) so a crash never leaves a half-written config behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from structdoc.exceptions import ConfigError, InvalidUsageError
from structdoc.models import DocsConfig

CONFIG_ENV_VAR = "STRUCTDOC_CONFIG"
PROJECT_CONFIG_FILENAME = "structdoc.json"


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The temporary file lives in the target directory so ``os.replace`` is
    an atomic rename on POSIX systems.  On failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Load / save ---


def load_config(path: Path) -> DocsConfig:
    """Load and validate a config file.

    Args:
        path: Location of the JSON file.

    Returns:
        The deserialised :class:`~structdoc.models.DocsConfig`.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid JSON,
            or fails validation.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return DocsConfig.model_validate(data)
    except OSError as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: DocsConfig, path: Path) -> None:
    """Persist *config* atomically as pretty-printed JSON."""
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")


def init_config(path: Path, force: bool = False) -> DocsConfig:
    """Write a default config file to *path* and return it.

    Raises:
        InvalidUsageError: If *path* already exists and *force* is not set.
    """
    if path.exists() and not force:
        raise InvalidUsageError(f"{path} already exists (use --force to overwrite)")
    config = DocsConfig()
    save_config(config, path)
    return config


# --- Precedence resolution ---


def find_config_path(cli_path: Optional[str] = None) -> Optional[Path]:
    """Return the config file that applies, or ``None`` for defaults.

    An explicit path or ``STRUCTDOC_CONFIG`` is returned even when the file
    does not exist, so that loading reports the mistake.  The project file
    is only returned when present.
    """
    if cli_path is not None:
        return Path(cli_path).expanduser()

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    project = Path.cwd() / PROJECT_CONFIG_FILENAME
    if project.is_file():
        return project
    return None


def resolve_config(cli_path: Optional[str] = None) -> DocsConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. ``cli_path``
        2. Environment variable ``STRUCTDOC_CONFIG``
        3. Project config (``./structdoc.json``)
        4. Defaults

    Raises:
        ConfigError: If the chosen file cannot be loaded.
    """
    path = find_config_path(cli_path)
    if path is None:
        return DocsConfig()
    return load_config(path)
