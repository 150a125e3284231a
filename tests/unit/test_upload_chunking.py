"""Tests for chunking strategies."""
import pytest
from cloudkit.core.upload.models import ChunkInfo
from cloudkit.core.upload.strategies.chunking import (
    BaseChunkingStrategy,
    FixedSizeChunkingStrategy
)

MiB = 1024 * 1024


class TestFixedSizeChunkingStrategy:
    """Test suite for FixedSizeChunkingStrategy."""

    @pytest.fixture
    def strategy(self):
        """Create strategy with the default 10 MiB parts."""
        return FixedSizeChunkingStrategy()

    def test_default_chunk_size(self, strategy):
        """Test default chunk size is 10 MiB."""
        assert strategy.chunk_size == 10 * MiB

    def test_empty_file_has_one_empty_part(self, strategy):
        """Test a 0-byte file is planned as a single part of length 0."""
        chunks = strategy.calculate_chunks(0)

        assert chunks == [ChunkInfo(part_number=1, offset=0, length=0)]

    def test_small_file(self, strategy):
        """Test file smaller than one part."""
        chunks = strategy.calculate_chunks(100)

        assert chunks == [ChunkInfo(part_number=1, offset=0, length=100)]

    def test_exact_multiple(self, strategy):
        """Test file size that is an exact multiple of the part size."""
        chunks = strategy.calculate_chunks(20 * MiB)

        assert [c.length for c in chunks] == [10 * MiB, 10 * MiB]

    def test_one_byte_over_boundary(self, strategy):
        """Test one byte past a boundary opens a new part."""
        chunks = strategy.calculate_chunks(10 * MiB + 1)

        assert len(chunks) == 2
        assert chunks[1] == ChunkInfo(part_number=2, offset=10 * MiB, length=1)

    def test_25_mib_file(self, strategy):
        """Test a 25 MiB file splits into 10, 10 and 5 MiB."""
        chunks = strategy.calculate_chunks(25 * MiB)

        assert [c.part_number for c in chunks] == [1, 2, 3]
        assert [c.offset for c in chunks] == [0, 10 * MiB, 20 * MiB]
        assert [c.length for c in chunks] == [10 * MiB, 10 * MiB, 5 * MiB]

    @pytest.mark.parametrize("size", [1, 7, 99, 100, 101, 1000, 4097])
    def test_part_list_shape(self, size):
        """Test numbering, coverage and last part length for many sizes."""
        chunk_size = 100
        strategy = FixedSizeChunkingStrategy(chunk_size)
        chunks = strategy.calculate_chunks(size)
        n = len(chunks)

        assert n == -(-size // chunk_size)
        assert [c.part_number for c in chunks] == list(range(1, n + 1))
        assert sum(c.length for c in chunks) == size
        assert chunks[-1].length == size - (n - 1) * chunk_size
        for i in range(n - 1):
            assert chunks[i].end == chunks[i + 1].offset

    def test_chunk_for(self):
        """Test single part lookup."""
        strategy = FixedSizeChunkingStrategy(10)

        assert strategy.chunk_for(3, 25) == ChunkInfo(part_number=3, offset=20, length=5)

    def test_chunk_for_out_of_range(self):
        """Test part numbers outside 1..n raise."""
        strategy = FixedSizeChunkingStrategy(10)

        with pytest.raises(ValueError):
            strategy.chunk_for(0, 25)
        with pytest.raises(ValueError):
            strategy.chunk_for(4, 25)

    def test_invalid_chunk_size(self):
        """Test non-positive chunk size raises error."""
        with pytest.raises(ValueError):
            FixedSizeChunkingStrategy(0)

    def test_negative_file_size(self, strategy):
        """Test negative size raises error."""
        with pytest.raises(ValueError):
            strategy.calculate_chunks(-1)


class TestBaseChunkingStrategy:
    """Test suite for BaseChunkingStrategy."""

    def test_cannot_instantiate(self):
        """Test abstract class cannot be instantiated."""
        with pytest.raises(TypeError):
            BaseChunkingStrategy()

    def test_default_chunk_for(self):
        """Test chunk_for falls back to calculate_chunks."""
        class SinglePart(BaseChunkingStrategy):
            def calculate_chunks(self, file_size):
                return [ChunkInfo(part_number=1, offset=0, length=file_size)]

        strategy = SinglePart()

        assert strategy.chunk_for(1, 42).length == 42
        with pytest.raises(ValueError):
            strategy.chunk_for(2, 42)
