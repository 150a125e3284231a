"""
Chunk upload service.

Uploads the parts of a negotiated session to their presigned URLs,
strictly one after another: part N+1 is read only after part N was
acknowledged.
"""
from enum import Enum
from typing import Dict, Optional, Sequence
import logging
import time

from ...exceptions import ServiceError
from ..models import ChunkInfo, PartInfo, UploadProgress, UploadSession, UploadTarget
from ..protocols import FileReaderProtocol, ProgressCallback, TransportProtocol
from .file_service import AsyncFileReader


class ChunkUploadState(Enum):
    IDLE = 'idle'
    UPLOADING = 'uploading'
    DONE = 'done'
    FAILED = 'failed'


class ChunkUploader:
    """
    Handles uploading the parts of one session.

    Responsibilities:
    - Read each part's byte range from the source
    - Send it to the part's upload URL
    - Report whole-file progress, never decreasing

    One instance serves one upload attempt. Failures are not retried;
    the caller starts a new attempt with a new session.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        reader: Optional[FileReaderProtocol] = None
    ):
        """
        Initialize chunk uploader.

        Args:
            transport: Transport used for the part PUTs
            reader: File reader for part ranges
        """
        self._transport = transport
        self._reader = reader or AsyncFileReader()
        self._progress_callback: Optional[ProgressCallback] = None
        self._state = ChunkUploadState.IDLE
        self._current_part: Optional[int] = None
        self._error: Optional[BaseException] = None
        self._progress: Optional[UploadProgress] = None
        self._logger = logging.getLogger('cloudkit.upload.chunk')

    @property
    def state(self) -> ChunkUploadState:
        return self._state

    @property
    def current_part(self) -> Optional[int]:
        """Part number being uploaded, or the one that failed."""
        return self._current_part

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def progress(self) -> Optional[UploadProgress]:
        return self._progress

    async def upload(
        self,
        target: UploadTarget,
        session: UploadSession,
        chunks: Sequence[ChunkInfo],
        progress_callback: Optional[ProgressCallback] = None
    ) -> None:
        """
        Upload every part of the session in order.

        Args:
            target: Upload source
            session: Negotiated session, one PartInfo per chunk
            chunks: Planned byte ranges, indexed by part number
            progress_callback: Called with whole-file progress, never decreasing

        Raises:
            RuntimeError: If this uploader was already used
            OSError: If a part cannot be read in full
            ServiceError: If a part upload is rejected
        """
        if self._state is not ChunkUploadState.IDLE:
            raise RuntimeError(f"Chunk uploader already used (state: {self._state.value})")

        self._progress_callback = progress_callback
        ranges: Dict[int, ChunkInfo] = {chunk.part_number: chunk for chunk in chunks}
        self._progress = UploadProgress(
            total_bytes=target.size,
            total_parts=session.part_count
        )

        total_mb = target.size / (1024 * 1024)
        self._logger.info(
            f"Uploading {session.part_count} parts of {target.filename} ({total_mb:.2f} MB)"
        )

        for part in session.part_info_list:
            self._state = ChunkUploadState.UPLOADING
            self._current_part = part.part_number
            try:
                await self._upload_part(target, part, ranges[part.part_number])
            except BaseException as e:
                self._state = ChunkUploadState.FAILED
                self._error = e
                self._logger.error(f"Part {part.part_number}/{session.part_count} failed: {e!r}")
                raise

        self._state = ChunkUploadState.DONE
        self._logger.info(f"All {session.part_count} parts uploaded")

    async def _upload_part(self, target: UploadTarget, part: PartInfo, chunk: ChunkInfo) -> None:
        data = await self._reader.read_range(target.local_path, chunk.offset, chunk.length)

        headers = {'Content-Type': part.content_type or ''}
        chunk_size_kb = chunk.length / 1024
        upload_start = time.time()
        self._logger.debug(
            f"Uploading part {part.part_number} at offset {chunk.offset} ({chunk_size_kb:.1f} KB)"
        )

        def on_fraction(fraction: float) -> None:
            fraction = min(max(fraction, 0.0), 1.0)
            self._report(chunk.offset + int(chunk.length * fraction))

        result = await self._transport.put(
            part.upload_url,
            data,
            headers=headers,
            progress_callback=on_fraction
        )
        if not result.ok:
            raise ServiceError(
                result.status_code,
                f"Part {part.part_number} upload rejected: HTTP {result.status_code} {result.text[:200]}",
                status_code=result.status_code
            )

        upload_time = time.time() - upload_start
        speed_kbps = (chunk_size_kb / upload_time) if upload_time > 0 else 0
        self._logger.debug(
            f"Part {part.part_number} uploaded in {upload_time:.2f}s ({speed_kbps:.1f} KB/s)"
        )
        self._progress.uploaded_parts += 1
        self._report(chunk.end, force=True)

    def _report(self, completed: int, force: bool = False) -> None:
        progress = self._progress
        completed = min(completed, progress.total_bytes)
        if completed < progress.uploaded_bytes:
            completed = progress.uploaded_bytes
        if completed == progress.uploaded_bytes and not force:
            return
        progress.uploaded_bytes = completed
        if self._progress_callback:
            self._progress_callback(
                UploadProgress(
                    total_bytes=progress.total_bytes,
                    uploaded_bytes=progress.uploaded_bytes,
                    total_parts=progress.total_parts,
                    uploaded_parts=progress.uploaded_parts
                )
            )
