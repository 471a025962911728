"""Reading delta files and writing rendered output."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, DELTA_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "DELTA_HTML_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the input size limit, preferring ``DELTA_HTML_MAX_FILE_SIZE``.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.

    Examples:
        get_max_file_size(default=1024)
    """
    raw = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw is None:
        return default

    try:
        limit = int(raw)
    except ValueError as error:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a number of bytes, got {raw!r}.") from error
    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {limit}.")
    return limit


def _is_symlink(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError:
        return False


def contains_symlink(path: Path) -> bool:
    """Tell whether `path` or one of its parents is a symbolic link."""
    return any(_is_symlink(candidate) for candidate in (path, *path.parents))


def resolve_delta_path(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied path into the absolute path of a delta file.

    The path may not go through a symbolic link, must name an existing
    regular file inside `base_dir`, and must carry one of the delta
    extensions (``.json``, ``.delta``).

    Args:
        raw_path: Path as typed by the user, relative or absolute.
        base_dir: Resolved directory the file has to live under.

    Returns:
        Path: The resolved path.

    Raises:
        ValueError: If any of the conditions above does not hold.

    Examples:
        resolve_delta_path("posts/welcome.json", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()
    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Cannot resolve {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in DELTA_EXTENSIONS:
        raise ValueError(
            f"{resolved.name} is not a delta file (expected one of: {', '.join(DELTA_EXTENSIONS)})."
        )
    return resolved


def read_delta_file(filepath: Path, max_size: int) -> str:
    """Read a delta file as UTF-8 text, refusing anything but a small regular file.

    The file is checked without following links, so a path swapped for a
    symlink after `resolve_delta_path` is still rejected.

    Args:
        filepath: Path returned by `resolve_delta_path`.
        max_size: Largest accepted size in bytes.

    Returns:
        str: The file contents.

    Raises:
        IOError: If the file cannot be opened, is not a regular file, or is
            larger than `max_size`.
        UnicodeDecodeError: If the contents are not valid UTF-8.
    """
    try:
        info = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Cannot access {filepath}: {error}") from error

    if stat.S_ISLNK(info.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}")
    if not stat.S_ISREG(info.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    if info.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        data = filepath.read_bytes()
    except OSError as error:
        raise IOError(f"Cannot read {filepath}: {error}") from error
    return data.decode("utf-8")


def write_output(filepath: Path, content: str) -> None:
    """Replace `filepath` with `content` in one step.

    The text is written to a sibling temporary file which is then renamed
    over the target, so readers never see a half-written document. An
    existing target keeps its permission bits.

    Raises:
        IOError: If the directory is missing, the target is a symlink, or
            writing fails.

    Examples:
        write_output(Path("welcome.html"), '<div id="line-1">Hello</div>')
    """
    directory = filepath.parent
    if not directory.is_dir():
        raise IOError(f"Output directory {directory} does not exist.")
    if filepath.is_symlink():
        raise IOError(f"Symlinks are not supported: {filepath}")

    mode = stat.S_IMODE(filepath.stat().st_mode) if filepath.exists() else None

    fd, temp_name = tempfile.mkstemp(dir=directory, prefix=f".{filepath.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="UTF-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if mode is not None:
            os.chmod(temp_name, mode)
        os.replace(temp_name, filepath)
    except OSError as error:
        Path(temp_name).unlink(missing_ok=True)
        raise IOError(f"Cannot write {filepath}: {error}") from error
