"""yt-dlp subprocess wrapper for metadata-only resolution.

Every invocation runs inside its own working directory under
``config.tmp_path``, named by a random integer. yt-dlp writes one
``<id>.info.json`` per entry there; the files are read back in
modification order (playlist order) and the directory is removed on
every exit path.
"""

from __future__ import annotations

import secrets
import shlex
import shutil
import subprocess
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from .errors import ExternalToolError, WorkingDirError
from .models import INFO_JSON_SUFFIX
from .schemas import InfoDocument

if TYPE_CHECKING:
    from .config import SearchConfig

log = logger.bind(stage="ytdlp")

# Directory names are drawn from [0, 2**63)
_NAME_SPACE = 1 << 63


def _run_tool(cmd: list[str], cwd: Path, timeout: float) -> subprocess.CompletedProcess:
    """Run the external tool in cwd, capturing its output."""
    return subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def build_command(
    ytdlp_bin: str,
    target: str,
    extra_args: Mapping[str, str] | None = None,
) -> list[str]:
    """Build the yt-dlp argv for an identify-only run.

    extra_args maps long option names to values; an empty value emits the
    bare flag (``{"yes-playlist": ""}`` -> ``--yes-playlist``). The target
    goes after ``--`` so it is never parsed as an option.
    """
    cmd = [
        ytdlp_bin,
        "--skip-download",
        "--write-info-json",
        "--output", "%(id)s.%(ext)s",
    ]
    for key, value in (extra_args or {}).items():
        cmd.append(f"--{key}")
        if value:
            cmd.append(value)
    cmd += ["--", target]
    return cmd


@contextmanager
def working_dir(root: Path) -> Iterator[Path]:
    """Create a fresh randomly named directory under root, remove it on exit.

    Raises WorkingDirError if the directory cannot be created, including
    the unlikely case where the name is already taken.
    """
    path = root / str(secrets.randbelow(_NAME_SPACE))
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WorkingDirError(root, str(e)) from e
    try:
        path.mkdir()
    except FileExistsError as e:
        raise WorkingDirError(path, "name collision") from e
    except OSError as e:
        raise WorkingDirError(path, str(e)) from e

    log.debug(f"Created working dir {path}")
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
            log.debug(f"Removed working dir {path}")
        except OSError as e:
            log.warning(f"Failed to remove working dir {path}: {e}")


def collect_documents(directory: Path) -> list[InfoDocument]:
    """Read every info document in directory, oldest first.

    Unreadable or malformed files are skipped. Playlist containers are
    dropped so only media entries come back.
    """
    files = [
        p for p in directory.iterdir()
        if p.is_file() and p.name.endswith(INFO_JSON_SUFFIX)
    ]
    files.sort(key=lambda p: (p.stat().st_mtime_ns, p.name))

    docs = []
    for f in files:
        try:
            doc = InfoDocument.model_validate_json(f.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            log.warning(f"Skipping malformed metadata file {f.name}: {e}")
            continue
        if doc.is_playlist:
            log.debug(f"Skipping playlist container {f.name}")
            continue
        docs.append(doc)

    log.debug(f"Collected {len(docs)} documents from {len(files)} files")
    return docs


class YtDlp:
    """Runs yt-dlp against one target and returns its info documents."""

    def __init__(self, config: SearchConfig) -> None:
        self.config = config

    def invoke(
        self,
        target: str,
        extra_args: Mapping[str, str] | None = None,
    ) -> list[InfoDocument]:
        """Resolve target (a URL or a "ytsearch5:..." style query).

        Raises WorkingDirError or ExternalToolError when the run cannot
        happen at all. A non-zero exit status is only logged: whatever
        yt-dlp managed to write is still returned.
        """
        tool = self.config.ytdlp_bin
        cmd = build_command(tool, target, extra_args)
        log.info(f"Searching for {target!r} using yt-dlp")
        log.debug(f"Running: {shlex.join(cmd)}")

        with working_dir(self.config.tmp_path) as wd:
            try:
                result = _run_tool(cmd, wd, self.config.tool_timeout)
            except subprocess.TimeoutExpired as e:
                raise ExternalToolError(
                    tool, -1, f"timed out after {self.config.tool_timeout}s",
                ) from e
            except OSError as e:
                raise ExternalToolError(tool, -1, str(e)) from e

            if result.stdout:
                log.debug(f"yt-dlp stdout:\n{result.stdout.rstrip()}")
            if result.returncode != 0:
                log.warning(
                    f"yt-dlp exited with code {result.returncode}: "
                    f"{(result.stderr or '').strip()}"
                )
            elif result.stderr:
                log.debug(f"yt-dlp stderr:\n{result.stderr.rstrip()}")

            return collect_documents(wd)
