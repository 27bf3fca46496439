"""
Output Writer
=============

Persist rendered markup and style text.
"""

from pathlib import Path
from typing import Optional, Union

import aiofiles

from template_engine.config.logging import get_logger
from template_engine.core.errors import OutputWriteError
from template_engine.models.schemas import StyleOutputFormat

logger = get_logger(__name__)


STYLE_FILE_EXTENSIONS = {
    "css": ".css",
    "scss": ".scss",
}


def output_file_path(output_dir: Union[str, Path], filename: str, file_extension: str) -> Path:
    """Markup path: ``output_dir/filename + file_extension``."""
    return Path(output_dir) / f"{filename}{file_extension}"


def style_file_path(
    output_dir: Union[str, Path], filename: str, output_format: StyleOutputFormat
) -> Optional[Path]:
    """Style file path for the format, or None for inline styles."""
    extension = STYLE_FILE_EXTENSIONS.get(output_format)
    if extension is None:
        return None
    return Path(output_dir) / f"{filename}{extension}"


async def write_output_file(text: str, path: Union[str, Path]) -> Path:
    """
    Write UTF-8 text, creating parent directories.

    Args:
        text: File content
        path: Destination path

    Returns:
        The written path

    Raises:
        OutputWriteError: If the directory or file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(text)
    except OSError as e:
        logger.error("Failed to write output file", path=str(path), error=str(e))
        raise OutputWriteError(f"Failed to write {path}: {e}", {"path": str(path)}) from e

    logger.info("Wrote output file", path=str(path), size=len(text))
    return path
