"""
Media probing and transfer utilities.
"""

import asyncio
import subprocess
from pathlib import Path

import aiohttp

from shared.utils import is_positive_duration, setup_logging

logger = setup_logging("media-utils")


def probe_media_duration(file_path: str) -> float | None:
    """Read the playable duration of a media file with ffprobe.

    Returns None when ffprobe is unavailable, fails, or reports a value that
    is not a usable duration.
    """
    try:
        probe = subprocess.run(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                file_path,
            ],
            capture_output=True,
            text=True,
            check=True,
        )
        duration = float(probe.stdout.strip())
    except (OSError, subprocess.CalledProcessError, ValueError) as e:
        logger.debug(f"Unable to read duration of {file_path} via ffprobe: {e}")
        return None

    if not is_positive_duration(duration):
        logger.warning(f"ffprobe reported unusable duration {duration!r} for {file_path}")
        return None
    return duration


async def measure_media_duration(file_path: str) -> float | None:
    """Probe duration without blocking the event loop."""
    return await asyncio.to_thread(probe_media_duration, file_path)


async def download_media(url: str, destination: Path, timeout: int = 60) -> Path:
    """Download a media resource to destination and return the path."""
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.get(url) as response:
            if response.status != 200:
                raise RuntimeError(f"Failed to fetch media from {url}: {response.status}")
            data = await response.read()

    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)
    return destination


def remove_media_file(file_path: str | Path) -> bool:
    """Delete a media file we own; missing files are not an error."""
    try:
        Path(file_path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove media file {file_path}: {e}")
        return False
    return True
