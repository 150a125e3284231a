"""
Upload facade.

Provides a simplified interface for file uploads.
Follows Facade Pattern - hides complexity of the upload subsystem.
"""
import tempfile
from pathlib import Path
from typing import Optional, Union
import logging

import aiofiles

from .coordinator import ItemDecoder, UploadCoordinator
from .models import UploadConfig, UploadResult, UploadTarget
from .protocols import ChunkingStrategy, ProgressCallback, TokenProvider, TransportProtocol, UploadApiProtocol
from .services import FileValidator


class UploadFacade:
    """
    Simplified interface for cloud drive uploads.

    This is the main entry point for uploading files.
    Hides the complexity of hashing, session negotiation and part uploads.

    Example:
        >>> from cloudkit.core.upload import UploadFacade
        >>> uploader = UploadFacade(provider, transport, lambda: token)
        >>> result = await uploader.upload_file("file.txt", "root")
        >>> print(f"Uploaded: {result.file_id}")
    """

    def __init__(
        self,
        api: UploadApiProtocol,
        transport: TransportProtocol,
        token_provider: Optional[TokenProvider] = None,
        config: Optional[UploadConfig] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        item_decoder: Optional[ItemDecoder] = None
    ):
        """
        Initialize upload facade.

        Args:
            api: Vendor upload endpoints
            transport: Transport for part uploads
            token_provider: Returns the current access token
            config: Pipeline configuration
            chunking_strategy: Optional custom chunking strategy
            item_decoder: Turns a vendor file record into a CloudItem
        """
        self._logger = logging.getLogger('cloudkit.upload')
        self._validator = FileValidator()
        self._coordinator = UploadCoordinator(
            api=api,
            transport=transport,
            token_provider=token_provider,
            config=config,
            chunking_strategy=chunking_strategy,
            item_decoder=item_decoder
        )

    async def upload_file(
        self,
        file_path: Union[str, Path],
        parent_id: str,
        progress_callback: Optional[ProgressCallback] = None,
        name: Optional[str] = None
    ) -> UploadResult:
        """
        Upload a local file.

        Args:
            file_path: Path to file to upload
            parent_id: Remote directory id
            progress_callback: Optional callback for progress updates
            name: Optional remote file name (defaults to the local name)

        Returns:
            UploadResult with the remote file id

        Raises:
            UploadFileNotExist: If the file is missing, unreadable or not a file
            ServiceError: If the vendor rejects a step

        Example:
            >>> result = await uploader.upload_file(
            ...     "document.pdf",
            ...     "root",
            ...     progress_callback=lambda p: print(f"{p.percentage:.0f}%")
            ... )
        """
        path, size = self._validator.validate(file_path)
        target = UploadTarget(
            parent_id=parent_id,
            filename=name or path.name,
            local_path=path,
            size=size
        )
        return await self._coordinator.upload(target, progress_callback)

    async def upload_data(
        self,
        data: bytes,
        filename: str,
        parent_id: str,
        progress_callback: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload in-memory bytes as a file named ``filename``.

        The bytes are written to a private temporary directory and uploaded
        from there; the temporary file is removed whether or not the
        upload succeeds.

        Args:
            data: File content
            filename: Remote file name
            parent_id: Remote directory id
            progress_callback: Optional callback for progress updates

        Returns:
            UploadResult with the remote file id

        Raises:
            ValueError: If filename is empty or contains a path
        """
        if not filename or filename in ('.', '..') or Path(filename).name != filename:
            raise ValueError(f"Invalid file name: {filename!r}")

        with tempfile.TemporaryDirectory(prefix='cloudkit-') as tmp_dir:
            temp_path = Path(tmp_dir) / filename
            async with aiofiles.open(temp_path, 'wb') as f:
                await f.write(data)
            self._logger.debug(f"Staged {len(data)} bytes at {temp_path}")
            return await self.upload_file(temp_path, parent_id, progress_callback, name=filename)
