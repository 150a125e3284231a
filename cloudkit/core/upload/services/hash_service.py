"""
Local hashing for rapid upload.

Computes the three values the create endpoint uses to recognise content
it already holds:

- pre-hash: SHA1 of the first 1024 bytes, a cheap existence probe
- content hash: SHA1 of the whole file, uppercase hex
- proof code: an 8-byte slice of the file at an offset derived from the
  MD5 of the access token, base64 encoded

The proof code ties a rapid upload to both the file bytes and the
credential, so a bare hash cannot be replayed with another token.
"""
import base64
import logging
import time
from pathlib import Path
from typing import Optional

import aiofiles
from Crypto.Hash import MD5, SHA1

from .file_service import AsyncFileReader
from ..protocols import TokenProvider

PROOF_LENGTH = 8
PROOF_OFFSET_HEX_DIGITS = 16


def proof_offset(token: str, size: int) -> int:
    """
    Byte offset of the proof slice for a token and file size.

    The first 16 hex digits of MD5(token), read as an unsigned integer,
    reduced modulo the file size.
    """
    if size <= 0:
        return 0
    digest = MD5.new(token.encode('utf-8')).hexdigest()
    return int(digest[:PROOF_OFFSET_HEX_DIGITS], 16) % size


class ContentHasher:
    """
    Computes pre-hash, content hash and proof code for a local file.

    All reads open and close the file; nothing is cached between calls.
    """

    def __init__(
        self,
        token_provider: Optional[TokenProvider] = None,
        reader: Optional[AsyncFileReader] = None,
        pre_hash_size: int = 1024,
        buffer_size: int = 1024 * 1024
    ):
        """
        Initialize hasher.

        Args:
            token_provider: Returns the current access token (used by proof_code)
            reader: File reader for range reads
            pre_hash_size: Bytes covered by the pre-hash
            buffer_size: Read buffer for the full content hash
        """
        self._token_provider = token_provider
        self._reader = reader or AsyncFileReader()
        self._pre_hash_size = pre_hash_size
        self._buffer_size = buffer_size
        self._logger = logging.getLogger('cloudkit.upload.hash')

    async def pre_hash(self, file_path: Path) -> str:
        """
        SHA1 of the file head, lowercase hex.

        Raises:
            OSError: If the file cannot be read
        """
        head = await self._reader.read_head(file_path, self._pre_hash_size)
        return SHA1.new(head).hexdigest()

    async def content_hash(self, file_path: Path) -> str:
        """
        SHA1 of the whole file, uppercase hex.

        Raises:
            OSError: If the file cannot be read
        """
        started = time.time()
        sha1 = SHA1.new()
        total = 0
        async with aiofiles.open(file_path, 'rb') as f:
            while True:
                data = await f.read(self._buffer_size)
                if not data:
                    break
                sha1.update(data)
                total += len(data)

        elapsed = time.time() - started
        self._logger.debug(f"Content hash of {total} bytes computed in {elapsed:.2f}s")
        return sha1.hexdigest().upper()

    async def proof_code(self, file_path: Path, size: int, token: Optional[str] = None) -> str:
        """
        Base64 of the proof slice ``[start, min(start + 8, size))``.

        Args:
            file_path: Source file
            size: File size the upload announces
            token: Access token; read from the token provider when omitted

        Raises:
            OSError: If the file cannot be read or is shorter than size
        """
        if token is None:
            token = self._token_provider() if self._token_provider else ''

        start = proof_offset(token, size)
        end = min(start + PROOF_LENGTH, size)
        data = await self._reader.read_range(file_path, start, end - start)
        return base64.b64encode(data).decode('ascii')
