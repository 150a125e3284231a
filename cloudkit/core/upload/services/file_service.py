"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
The source file is opened per read rather than held for the whole upload.
"""
import os
from pathlib import Path
from typing import Tuple, Union
import logging

import aiofiles

from ...exceptions import UploadFileNotExist


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence and readability
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            UploadFileNotExist: If the path is missing, not a regular file or unreadable
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.is_file() or not os.access(path, os.R_OK):
            raise UploadFileNotExist(path)

        try:
            file_size = path.stat().st_size
        except OSError as e:
            raise UploadFileNotExist(path) from e

        return path, file_size


class AsyncFileReader:
    """
    Asynchronous file reader for range reads.

    Uses aiofiles for non-blocking I/O operations.
    """

    def __init__(self):
        """Initialize file reader."""
        self._logger = logging.getLogger('cloudkit.upload.file')

    async def read_range(self, file_path: Path, offset: int, length: int) -> bytes:
        """
        Read exactly ``length`` bytes starting at ``offset``.

        Args:
            file_path: Path to the file
            offset: Start position in bytes
            length: Number of bytes to read

        Returns:
            The bytes read

        Raises:
            OSError: If the file cannot be read or ends before offset + length
        """
        if length == 0:
            return b''

        async with aiofiles.open(file_path, 'rb') as f:
            await f.seek(offset)
            data = await f.read(length)

        if len(data) != length:
            self._logger.error(
                f"Short read on {file_path}: wanted {length} bytes at {offset}, got {len(data)}"
            )
            raise IOError(
                f"Short read on {file_path}: expected {length} bytes at offset {offset}, got {len(data)}"
            )

        self._logger.debug(f"Read range: {offset}-{offset + length} ({length} bytes)")
        return data

    async def read_head(self, file_path: Path, length: int) -> bytes:
        """Read up to ``length`` bytes from the start of the file."""
        async with aiofiles.open(file_path, 'rb') as f:
            return await f.read(length)
