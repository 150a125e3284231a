"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
Providers implement UploadApiProtocol; everything else has a default
implementation in services/ and strategies/.
"""
from typing import Protocol, Dict, Any, List, Optional, Callable
from pathlib import Path

from .models import ChunkInfo, CreateFileRequest, CreateFileResponse, UploadSession, UploadProgress

ProgressCallback = Callable[[UploadProgress], None]
TokenProvider = Callable[[], str]


class ChunkingStrategy(Protocol):
    """
    Protocol for file chunking strategies.

    Allows different part layouts to be plugged in.
    """

    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        """
        Plan the parts of a file.

        Args:
            file_size: Total file size in bytes

        Returns:
            Parts numbered 1..n covering the whole file
        """
        ...

    def chunk_for(self, part_number: int, file_size: int) -> ChunkInfo:
        """Byte range of one part."""
        ...


class FileReaderProtocol(Protocol):
    """Protocol for file reading operations."""

    async def read_range(self, file_path: Path, offset: int, length: int) -> bytes:
        """
        Read exactly ``length`` bytes at ``offset``.

        Raises:
            OSError: If the file is unreadable or shorter than expected
        """
        ...


class HasherProtocol(Protocol):
    """Protocol for the local hashing step."""

    async def pre_hash(self, file_path: Path) -> str:
        ...

    async def content_hash(self, file_path: Path) -> str:
        ...

    async def proof_code(self, file_path: Path, size: int, token: Optional[str] = None) -> str:
        ...


class TransportProtocol(Protocol):
    """The part of AsyncTransport the chunk uploader needs."""

    async def put(
        self,
        url: str,
        body: bytes,
        headers: Optional[Dict[str, str]] = None,
        progress_callback: Optional[Callable[[float], None]] = None
    ) -> Any:
        ...


class UploadApiProtocol(Protocol):
    """
    Vendor endpoints used by the upload pipeline.

    Implementations adapt the generic request/response models to the
    vendor's URLs and raise ServiceError for application-level failures.
    """

    @property
    def drive_id(self) -> str:
        ...

    async def create_file(self, request: CreateFileRequest) -> CreateFileResponse:
        """Call the create/precreate endpoint."""
        ...

    async def complete_file(self, session: UploadSession) -> Dict[str, Any]:
        """Finalize the remote file once every part is uploaded."""
        ...

