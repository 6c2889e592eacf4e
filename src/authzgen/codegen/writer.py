"""Writes rendered modules to disk."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_sources(sources: dict[str, str], output_dir: str | Path) -> list[Path]:
    """Write {filename: source} into output_dir, creating it if needed.

    Callers render everything first, so a failed run never leaves a
    partial set of files behind.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for filename, source in sources.items():
        path = output_dir / filename
        path.write_text(source, encoding="utf-8")
        logger.debug("wrote %s", path)
        written.append(path)
    return written
