"""
Chunking strategies for file uploads.

Implements Strategy Pattern for different part layouts.
Open for extension (new strategies), closed for modification.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models import ChunkInfo


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""

    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        """Calculate part boundaries."""
        pass

    def chunk_for(self, part_number: int, file_size: int) -> ChunkInfo:
        """Byte range of one part."""
        chunks = self.calculate_chunks(file_size)
        if not 1 <= part_number <= len(chunks):
            raise ValueError(f"Part {part_number} out of range 1..{len(chunks)}")
        return chunks[part_number - 1]


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Fixed-size parts: every part is ``chunk_size`` bytes except the last.

    A 0-byte file still gets exactly one part of length 0, so the upload
    goes through the usual session and completion steps.
    """

    DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024  # 10MB

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.

        Args:
            chunk_size: Size of each part in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size

    def part_count(self, file_size: int) -> int:
        """Number of parts for a file, never less than one."""
        if file_size < 0:
            raise ValueError("File size cannot be negative")
        return max(1, -(-file_size // self.chunk_size))

    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        """
        Calculate fixed-size part boundaries.

        Args:
            file_size: Total file size in bytes

        Returns:
            List of ChunkInfo numbered from 1
        """
        return [
            self.chunk_for(part_number, file_size)
            for part_number in range(1, self.part_count(file_size) + 1)
        ]

    def chunk_for(self, part_number: int, file_size: int) -> ChunkInfo:
        count = self.part_count(file_size)
        if not 1 <= part_number <= count:
            raise ValueError(f"Part {part_number} out of range 1..{count}")
        offset = (part_number - 1) * self.chunk_size
        length = min(self.chunk_size, file_size - offset)
        return ChunkInfo(part_number=part_number, offset=offset, length=length)
