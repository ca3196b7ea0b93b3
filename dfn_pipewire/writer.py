"""
Artifact Writer

The only step of config generation that touches the filesystem.
"""
from pathlib import Path
from typing import Iterable, List

from .errors import ArtifactWriteError
from .logging_config import get_logger
from .renderer import ConfigArtifact

_logger = get_logger(__name__)


def write_artifacts(artifacts: Iterable[ConfigArtifact]) -> List[Path]:
    """
    Write each artifact to its target, overwriting previous content.

    The target directory must already exist. The first failure stops the
    run; nothing is retried.

    Args:
        artifacts: Rendered artifacts

    Returns:
        Paths written, in order

    Raises:
        ArtifactWriteError: If a file cannot be written
    """
    written = []
    for artifact in artifacts:
        try:
            artifact.path.write_text(artifact.text, encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(artifact.path, e) from e
        _logger.info(f"Wrote {artifact.path}")
        written.append(artifact.path)
    return written


def remove_stale(paths: Iterable[Path]) -> List[Path]:
    """
    Delete previously generated files for sides that are now withheld.

    Returns:
        Paths that existed and were removed
    """
    removed = []
    for path in paths:
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            raise ArtifactWriteError(path, e) from e
        _logger.info(f"Removed stale {path}")
        removed.append(path)
    return removed
