"""
Atomic file writing for CLI exports.

Content lands in a sibling temp file first and is moved over the target with
``os.replace``, so a reader sees either the old export or the new one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

import structlog

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def atomic_write_text(target_path: PathLike, content: str, encoding: str = "utf-8") -> None:
    """
    Replace ``target_path`` with ``content``, creating parent directories.

    Raises:
        OSError: If the temp file cannot be written or moved into place
    """
    target = Path(target_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise OSError(f"Could not write {target}: {e}") from e

    logger.debug("Export written", target=str(target), size=len(content))


def atomic_write_json(target_path: PathLike, data: Dict[str, Any]) -> None:
    """
    Write ``data`` as indented JSON with CJK text left unescaped.

    Raises:
        ValueError: If ``data`` is not JSON serializable
        OSError: If writing fails
    """
    try:
        payload = json.dumps(data, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as e:
        logger.error("Export is not JSON serializable", error=str(e))
        raise ValueError(f"Cannot serialize data to JSON: {e}") from e
    atomic_write_text(target_path, payload + "\n")
