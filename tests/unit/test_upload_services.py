"""Tests for upload services."""
import os
import pytest
from pathlib import Path
from unittest.mock import AsyncMock

from cloudkit.core.exceptions import ServiceError, UploadFileNotExist
from cloudkit.core.upload.models import UploadSession, UploadTarget
from cloudkit.core.upload.services import (
    FileValidator,
    AsyncFileReader,
    ChunkUploader,
    ChunkUploadState,
    CompletionNotifier,
)
from cloudkit.core.upload.strategies import FixedSizeChunkingStrategy
from conftest import FakeTransport, session_body


class TestFileValidator:
    """Test suite for FileValidator."""

    @pytest.fixture
    def validator(self):
        """Create validator instance."""
        return FileValidator()

    def test_validate_existing_file(self, validator, make_file):
        """Test validating existing file."""
        temp_file = make_file(b"test content")
        path, size = validator.validate(temp_file)

        assert path == temp_file
        assert size == 12  # "test content"

    def test_validate_string_path(self, validator, make_file):
        """Test validating string path."""
        temp_file = make_file(b"x")
        path, size = validator.validate(str(temp_file))

        assert path == temp_file

    def test_validate_empty_file(self, validator, make_file):
        """Test empty files are valid uploads."""
        path, size = validator.validate(make_file(b""))

        assert size == 0

    def test_validate_nonexistent_file(self, validator, tmp_path):
        """Test validating non-existent file."""
        with pytest.raises(UploadFileNotExist):
            validator.validate(tmp_path / "missing.txt")

    def test_validate_directory(self, validator, tmp_path):
        """Test validating directory raises error."""
        with pytest.raises(UploadFileNotExist):
            validator.validate(tmp_path)

    @pytest.mark.skipif(os.name != 'posix' or os.geteuid() == 0, reason="needs a non-root POSIX user")
    def test_validate_unreadable_file(self, validator, make_file):
        """Test unreadable file raises error."""
        temp_file = make_file(b"secret")
        temp_file.chmod(0)
        try:
            with pytest.raises(UploadFileNotExist):
                validator.validate(temp_file)
        finally:
            temp_file.chmod(0o600)


class TestAsyncFileReader:
    """Test suite for AsyncFileReader."""

    @pytest.fixture
    def reader(self):
        """Create reader instance."""
        return AsyncFileReader()

    @pytest.fixture
    def temp_file(self, make_file):
        """Create temporary file with known content."""
        return make_file(b"0123456789ABCDEFGHIJ")  # 20 bytes

    @pytest.mark.asyncio
    async def test_read_range(self, reader, temp_file):
        """Test reading a range."""
        chunk = await reader.read_range(temp_file, 0, 10)

        assert chunk == b"0123456789"

    @pytest.mark.asyncio
    async def test_read_range_middle(self, reader, temp_file):
        """Test reading range from middle."""
        chunk = await reader.read_range(temp_file, 5, 10)

        assert chunk == b"56789ABCDE"

    @pytest.mark.asyncio
    async def test_read_zero_length(self, reader, temp_file):
        """Test zero-length read."""
        assert await reader.read_range(temp_file, 20, 0) == b""

    @pytest.mark.asyncio
    async def test_short_read(self, reader, temp_file):
        """Test reading past the end raises IOError."""
        with pytest.raises(IOError):
            await reader.read_range(temp_file, 15, 10)

    @pytest.mark.asyncio
    async def test_read_nonexistent_file(self, reader, tmp_path):
        """Test reading non-existent file raises OSError."""
        with pytest.raises(OSError):
            await reader.read_range(tmp_path / "missing.txt", 0, 100)

    @pytest.mark.asyncio
    async def test_read_head(self, reader, temp_file):
        """Test head read is capped by file length."""
        assert await reader.read_head(temp_file, 5) == b"01234"
        assert await reader.read_head(temp_file, 100) == b"0123456789ABCDEFGHIJ"


class TestChunkUploader:
    """Test suite for ChunkUploader."""

    @pytest.fixture
    def content(self, random_content):
        return random_content(25)

    @pytest.fixture
    def target(self, make_file, content):
        path = make_file(content)
        return UploadTarget(parent_id='root', filename='file.bin', local_path=path, size=len(content))

    @pytest.fixture
    def chunks(self):
        return FixedSizeChunkingStrategy(10).calculate_chunks(25)

    @pytest.fixture
    def session(self):
        return UploadSession.from_dict(session_body(3))

    @pytest.mark.asyncio
    async def test_uploads_parts_in_order(self, target, chunks, session, content):
        """Test each part is PUT to its URL with its own bytes."""
        transport = FakeTransport()
        uploader = ChunkUploader(transport)

        await uploader.upload(target, session, chunks)

        assert [call['url'] for call in transport.calls] == [
            part.upload_url for part in session.part_info_list
        ]
        assert [call['body'] for call in transport.calls] == [content[:10], content[10:20], content[20:]]
        assert uploader.state is ChunkUploadState.DONE

    @pytest.mark.asyncio
    async def test_default_content_type_is_empty(self, target, chunks, session):
        """Test parts without a content type are sent with an empty one."""
        transport = FakeTransport()

        await ChunkUploader(transport).upload(target, session, chunks)

        assert all(call['headers'] == {'Content-Type': ''} for call in transport.calls)

    @pytest.mark.asyncio
    async def test_progress_is_monotonic(self, target, chunks, session):
        """Test progress never decreases and ends at the file size."""
        reports = []
        transport = FakeTransport(steps=3)

        await ChunkUploader(transport).upload(target, session, chunks, reports.append)

        values = [p.uploaded_bytes for p in reports]
        assert values == sorted(values)
        assert values[-1] == 25
        assert all(0 <= v <= 25 for v in values)
        assert reports[-1].uploaded_parts == 3
        assert reports[-1].is_complete

    @pytest.mark.asyncio
    async def test_progress_ignores_backwards_fractions(self, target, chunks, session):
        """Test a fraction callback going backwards does not lower progress."""
        class WobblyTransport(FakeTransport):
            async def put(self, url, body, headers=None, progress_callback=None):
                progress_callback(0.8)
                progress_callback(0.3)
                progress_callback(1.5)
                return await super().put(url, body, headers)

        reports = []
        await ChunkUploader(WobblyTransport()).upload(target, session, chunks, reports.append)

        values = [p.uploaded_bytes for p in reports]
        assert values == sorted(values)
        assert max(values) == 25

    @pytest.mark.asyncio
    async def test_failure_stops_upload(self, target, chunks, session):
        """Test failure on part 2 leaves exactly one successful PUT and raises."""
        transport = FakeTransport(statuses=[200, 403, 200])
        uploader = ChunkUploader(transport)

        with pytest.raises(ServiceError) as exc_info:
            await uploader.upload(target, session, chunks)

        assert exc_info.value.status_code == 403
        assert len(transport.calls) == 2
        assert uploader.state is ChunkUploadState.FAILED
        assert uploader.current_part == 2
        assert uploader.error is exc_info.value

    @pytest.mark.asyncio
    async def test_short_file_raises_oserror(self, make_file, chunks, session):
        """Test a file shorter than announced fails with OSError before its PUT."""
        path = make_file(b'x' * 15)
        target = UploadTarget(parent_id='root', filename='file.bin', local_path=path, size=25)
        transport = FakeTransport()
        uploader = ChunkUploader(transport)

        with pytest.raises(OSError):
            await uploader.upload(target, session, chunks)

        assert len(transport.calls) == 1
        assert uploader.state is ChunkUploadState.FAILED

    @pytest.mark.asyncio
    async def test_single_use(self, target, chunks, session):
        """Test an uploader cannot be reused."""
        uploader = ChunkUploader(FakeTransport())
        await uploader.upload(target, session, chunks)

        with pytest.raises(RuntimeError):
            await uploader.upload(target, session, chunks)

    @pytest.mark.asyncio
    async def test_empty_part(self, make_file):
        """Test a 0-byte part is PUT once with an empty body."""
        path = make_file(b'')
        target = UploadTarget(parent_id='root', filename='empty', local_path=path, size=0)
        chunks = FixedSizeChunkingStrategy(10).calculate_chunks(0)
        session = UploadSession.from_dict(session_body(1))
        transport = FakeTransport()
        reports = []

        await ChunkUploader(transport).upload(target, session, chunks, reports.append)

        assert transport.calls[0]['body'] == b''
        assert reports[-1].uploaded_bytes == 0
        assert reports[-1].percentage == 100.0


class TestCompletionNotifier:
    """Test suite for CompletionNotifier."""

    @pytest.mark.asyncio
    async def test_complete(self):
        """Test completion forwards the session once."""
        api = AsyncMock()
        api.complete_file.return_value = {'file_id': 'file-1'}
        session = UploadSession.from_dict(session_body(1))

        result = await CompletionNotifier(api).complete(session)

        assert result == {'file_id': 'file-1'}
        api.complete_file.assert_awaited_once_with(session)

    @pytest.mark.asyncio
    async def test_errors_pass_through(self):
        """Test endpoint errors are not wrapped or retried."""
        api = AsyncMock()
        api.complete_file.side_effect = ServiceError('InvalidParameter', 'bad upload id', 400)
        session = UploadSession.from_dict(session_body(1))

        with pytest.raises(ServiceError, match='bad upload id'):
            await CompletionNotifier(api).complete(session)

        assert api.complete_file.await_count == 1
