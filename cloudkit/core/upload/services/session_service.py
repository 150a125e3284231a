"""
Upload session negotiation.

Two-phase create protocol:

Phase A (probe) sends only the pre-hash. When the server answers
``PreHashMatched`` it probably holds the content already, and Phase B
(precreate) follows with the full content hash and proof code so the
server can confirm and complete the upload without a transfer. Any
other Phase A answer is the upload session itself.

The full-file hash pass only runs in Phase B, so files the server has
never seen are hashed once (their head) rather than twice.
"""
import logging
import time
from typing import Sequence

from ..models import (
    ChunkInfo,
    CreateFileRequest,
    CreateFileResponse,
    UploadConfig,
    UploadTarget,
)
from ..protocols import HasherProtocol, UploadApiProtocol


class SessionNegotiator:
    """
    Negotiates the server-side upload session.

    Responsibilities:
    - Build create requests from the target and planned parts
    - Run the pre-hash probe and the precreate call
    - Hand back the decoded create response
    """

    def __init__(
        self,
        api: UploadApiProtocol,
        hasher: HasherProtocol,
        config: UploadConfig
    ):
        """
        Initialize negotiator.

        Args:
            api: Vendor upload endpoints
            hasher: Local hasher
            config: Pipeline configuration
        """
        self._api = api
        self._hasher = hasher
        self._config = config
        self._logger = logging.getLogger('cloudkit.upload.session')

    async def negotiate(
        self,
        target: UploadTarget,
        chunks: Sequence[ChunkInfo]
    ) -> CreateFileResponse:
        """
        Run the create protocol for one upload attempt.

        Args:
            target: Upload destination and source
            chunks: Planned parts

        Returns:
            The response to act on: rapid (no transfer needed) or a session

        Raises:
            ResponseDecodeError: If a response is not a JSON object
            ServiceError: If the vendor rejects the request
            OSError: If the source cannot be hashed
        """
        if not self._config.rapid_upload:
            self._logger.debug("Rapid upload disabled, creating session without hashes")
            return await self.precreate(target, chunks, with_hashes=False)

        if not self._config.use_pre_hash:
            return await self.precreate(target, chunks)

        response = await self.probe(target, chunks)
        if response.pre_hash_matched:
            self._logger.info(f"Pre-hash matched for {target.filename}, verifying full content hash")
            return await self.precreate(target, chunks)
        return response

    async def probe(
        self,
        target: UploadTarget,
        chunks: Sequence[ChunkInfo]
    ) -> CreateFileResponse:
        """Phase A: create with the pre-hash only."""
        request = self._base_request(target, chunks)
        request.pre_hash = await self._hasher.pre_hash(target.local_path)
        self._logger.debug(f"Probing with pre-hash {request.pre_hash}")
        return await self._api.create_file(request)

    async def precreate(
        self,
        target: UploadTarget,
        chunks: Sequence[ChunkInfo],
        with_hashes: bool = True
    ) -> CreateFileResponse:
        """Phase B: create with the full content hash and proof code."""
        request = self._base_request(target, chunks)
        if with_hashes:
            started = time.time()
            request.content_hash = await self._hasher.content_hash(target.local_path)
            request.proof_code = await self._hasher.proof_code(target.local_path, target.size)
            request.content_hash_name = self._config.content_hash_name
            request.proof_version = self._config.proof_version
            self._logger.debug(
                f"Content hash {request.content_hash} and proof code ready "
                f"in {time.time() - started:.2f}s"
            )

        response = await self._api.create_file(request)
        if response.rapid_upload:
            self._logger.info(f"Rapid upload accepted for {target.filename}")
        return response

    def _base_request(
        self,
        target: UploadTarget,
        chunks: Sequence[ChunkInfo]
    ) -> CreateFileRequest:
        return CreateFileRequest(
            name=target.filename,
            size=target.size,
            parent_file_id=target.parent_id,
            part_numbers=[chunk.part_number for chunk in chunks],
            drive_id=self._api.drive_id,
            check_name_mode=self._config.check_name_mode
        )
