"""Writes generated files to disk."""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Union

from .generator import GeneratedFile

logger = logging.getLogger(__name__)


def ensure_dir(path: Union[str, Path]) -> Path:
    """Create a directory (and parents) if missing."""
    os.makedirs(path, exist_ok=True)
    return Path(path)


def remove_dir(path: Union[str, Path]) -> None:
    """Remove a directory tree; a missing directory is not an error."""
    shutil.rmtree(path, ignore_errors=True)


def write_files(files: Iterable[GeneratedFile], output_dir: Union[str, Path]) -> List[Path]:
    """Write generated files below ``output_dir``.

    Returns:
        Paths of the written files, in the order given
    """
    root = ensure_dir(output_dir)
    written = []
    for generated in files:
        file_path = root / generated.path
        os.makedirs(file_path.parent, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(generated.content)
        logger.debug("Wrote %s", file_path)
        written.append(file_path)
    return written
