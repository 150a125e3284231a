"""
Upload module for cloud drive uploads.

Chunked uploads with content-addressed rapid upload: the file is hashed
locally, the vendor is asked whether it already holds the content, and
only when it does not are the parts transferred.
"""
from .facade import UploadFacade
from .coordinator import UploadCoordinator
from .models import (
    UploadConfig,
    UploadTarget,
    ChunkInfo,
    PartInfo,
    UploadSession,
    CreateFileRequest,
    CreateFileResponse,
    UploadProgress,
    UploadResult,
)
from .protocols import (
    ChunkingStrategy,
    FileReaderProtocol,
    HasherProtocol,
    TransportProtocol,
    UploadApiProtocol,
    ProgressCallback,
)

__all__ = [
    # Main classes
    'UploadFacade',
    'UploadCoordinator',

    # Models
    'UploadConfig',
    'UploadTarget',
    'ChunkInfo',
    'PartInfo',
    'UploadSession',
    'CreateFileRequest',
    'CreateFileResponse',
    'UploadProgress',
    'UploadResult',

    # Protocols
    'ChunkingStrategy',
    'FileReaderProtocol',
    'HasherProtocol',
    'TransportProtocol',
    'UploadApiProtocol',
    'ProgressCallback',
]
