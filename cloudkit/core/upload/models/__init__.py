"""Upload models."""
from .upload_models import (
    UploadConfig,
    UploadTarget,
    ChunkInfo,
    PartInfo,
    UploadSession,
    CreateFileRequest,
    CreateFileResponse,
    UploadProgress,
    UploadResult,
    PRE_HASH_MATCHED,
)

__all__ = [
    'UploadConfig',
    'UploadTarget',
    'ChunkInfo',
    'PartInfo',
    'UploadSession',
    'CreateFileRequest',
    'CreateFileResponse',
    'UploadProgress',
    'UploadResult',
    'PRE_HASH_MATCHED',
]
