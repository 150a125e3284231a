"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader
from .hash_service import ContentHasher, proof_offset
from .session_service import SessionNegotiator
from .chunk_service import ChunkUploader, ChunkUploadState
from .completion_service import CompletionNotifier

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'ContentHasher',
    'proof_offset',
    'SessionNegotiator',
    'ChunkUploader',
    'ChunkUploadState',
    'CompletionNotifier',
]
