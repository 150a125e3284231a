"""
Upload coordinator.

Orchestrates the upload process using injected dependencies.
Follows Dependency Inversion Principle - depends on abstractions, not concretions.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

from .models import (
    CreateFileResponse,
    UploadConfig,
    UploadProgress,
    UploadResult,
    UploadSession,
    UploadTarget,
)
from .protocols import (
    ChunkingStrategy,
    FileReaderProtocol,
    HasherProtocol,
    ProgressCallback,
    TokenProvider,
    TransportProtocol,
    UploadApiProtocol,
)
from .strategies import FixedSizeChunkingStrategy
from .services import (
    AsyncFileReader,
    ChunkUploader,
    CompletionNotifier,
    ContentHasher,
    SessionNegotiator,
)
from ..models import CloudItem

logger = logging.getLogger('cloudkit.upload.coordinator')

ItemDecoder = Callable[[Dict[str, Any]], CloudItem]


class UploadCoordinator:
    """
    Coordinates the file upload process.

    Uses dependency injection for all components, making it:
    - Testable (mock dependencies)
    - Extensible (swap strategies)
    - Maintainable (single responsibility)

    Every call to upload() is one independent attempt: it negotiates a
    fresh session, and nothing is carried over from earlier attempts.
    """

    def __init__(
        self,
        api: UploadApiProtocol,
        transport: TransportProtocol,
        token_provider: Optional[TokenProvider] = None,
        config: Optional[UploadConfig] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        file_reader: Optional[FileReaderProtocol] = None,
        hasher: Optional[HasherProtocol] = None,
        item_decoder: Optional[ItemDecoder] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            api: Vendor upload endpoints
            transport: Transport for part uploads
            token_provider: Returns the current access token (proof code input)
            config: Pipeline configuration
            chunking_strategy: Strategy for planning parts
            file_reader: File reader implementation
            hasher: Hasher implementation
            item_decoder: Turns a vendor file record into a CloudItem
        """
        self._api = api
        self._transport = transport
        self._config = config or UploadConfig()
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy(self._config.chunk_size)
        self._file_reader = file_reader or AsyncFileReader()
        self._hasher = hasher or ContentHasher(
            token_provider=token_provider,
            pre_hash_size=self._config.pre_hash_size,
            buffer_size=self._config.hash_buffer_size
        )
        self._item_decoder = item_decoder
        self._negotiator = SessionNegotiator(api, self._hasher, self._config)
        self._completion = CompletionNotifier(api)

    @property
    def config(self) -> UploadConfig:
        return self._config

    async def upload(
        self,
        target: UploadTarget,
        progress_callback: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Execute the complete upload process.

        Args:
            target: Validated upload source and destination
            progress_callback: Optional callback for progress updates

        Returns:
            Upload result with the remote file id

        Raises:
            OSError: If the source cannot be read
            ServiceError: If the vendor rejects a step
            ResponseDecodeError: If a vendor response is malformed
        """
        started = time.time()
        file_size_mb = target.size / (1024 * 1024)
        logger.info(f"Starting upload: {target.filename} ({file_size_mb:.2f} MB)")

        chunks = self._chunking.calculate_chunks(target.size)
        logger.debug(f"File split into {len(chunks)} parts")

        response = await self._negotiator.negotiate(target, chunks)
        if response.rapid_upload:
            result = self._rapid_result(target, response)
            if progress_callback:
                progress_callback(
                    UploadProgress(
                        total_bytes=target.size,
                        uploaded_bytes=target.size,
                        total_parts=len(chunks),
                        uploaded_parts=len(chunks)
                    )
                )
            logger.info(
                f"Rapid upload of {target.filename} finished in {time.time() - started:.2f}s"
            )
            return result

        session = response.require_session(chunks)
        logger.info(f"Upload session {session.upload_id} opened with {session.part_count} parts")

        uploader = ChunkUploader(self._transport, self._file_reader)
        await uploader.upload(target, session, chunks, progress_callback)

        completed = await self._completion.complete(session)
        elapsed = time.time() - started
        speed_mbps = (file_size_mb / elapsed) if elapsed > 0 else 0
        logger.info(
            f"Upload of {target.filename} finished in {elapsed:.2f}s ({speed_mbps:.2f} MB/s)"
        )
        return self._completed_result(target, session, completed)

    def _rapid_result(self, target: UploadTarget, response: CreateFileResponse) -> UploadResult:
        payload = response.payload
        return UploadResult(
            file_id=payload.get('file_id') or '',
            drive_id=payload.get('drive_id') or self._api.drive_id,
            file_size=target.size,
            rapid_upload=True,
            item=self._decode_item(payload),
            response=payload
        )

    def _completed_result(
        self,
        target: UploadTarget,
        session: UploadSession,
        completed: Dict[str, Any]
    ) -> UploadResult:
        return UploadResult(
            file_id=completed.get('file_id') or session.file_id,
            drive_id=completed.get('drive_id') or session.drive_id,
            file_size=target.size,
            rapid_upload=False,
            item=self._decode_item(completed),
            response=completed
        )

    def _decode_item(self, payload: Dict[str, Any]) -> Optional[CloudItem]:
        if not self._item_decoder or not payload.get('file_id'):
            return None
        return self._item_decoder(payload)
