"""Pytest fixtures for cloudkit tests."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from Crypto.Random import get_random_bytes

from cloudkit.core.api import HTTPResult
from cloudkit.core.upload.models import CreateFileResponse, UploadSession


def make_result(status_code: int = 200, body: Any = None, url: str = '') -> HTTPResult:
    """Build an HTTPResult with a JSON body."""
    content = b'' if body is None else json.dumps(body).encode('utf-8')
    return HTTPResult(status_code=status_code, content=content, url=url)


class FakeTransport:
    """Records part PUTs and answers them from a list of status codes."""

    def __init__(self, statuses: Optional[List[int]] = None, steps: int = 4):
        self.statuses = list(statuses or [])
        self.steps = steps
        self.calls: List[Dict[str, Any]] = []

    async def put(self, url, body, headers=None, progress_callback=None):
        self.calls.append({'url': url, 'body': body, 'headers': dict(headers or {})})
        if progress_callback:
            for step in range(1, self.steps + 1):
                progress_callback(step / self.steps)
        status = self.statuses.pop(0) if self.statuses else 200
        return HTTPResult(status_code=status, content=b'' if status < 300 else b'denied', url=url)


class FakeUploadApi:
    """
    In-memory upload endpoints.

    ``responses`` is consumed in order by create_file; each entry is a
    (status, body) pair.
    """

    def __init__(self, responses=None, drive_id: str = 'drive-1', complete_body=None):
        self.responses = list(responses or [])
        self._drive_id = drive_id
        self.complete_body = complete_body
        self.create_requests = []
        self.completed: List[UploadSession] = []
        self.events: List[str] = []

    @property
    def drive_id(self) -> str:
        return self._drive_id

    async def create_file(self, request):
        self.create_requests.append(request)
        self.events.append('create')
        status, body = self.responses.pop(0)
        return CreateFileResponse.from_result(make_result(status, body))

    async def complete_file(self, session):
        self.completed.append(session)
        self.events.append('complete')
        if self.complete_body is not None:
            return self.complete_body
        return {
            'drive_id': session.drive_id,
            'file_id': session.file_id,
            'name': session.file_name or 'file.bin',
            'type': 'file',
        }


def session_body(part_count: int, file_id: str = 'file-1', upload_id: str = 'upload-1',
                 drive_id: str = 'drive-1') -> Dict[str, Any]:
    """Create-file response body carrying an upload session."""
    return {
        'drive_id': drive_id,
        'file_id': file_id,
        'upload_id': upload_id,
        'file_name': 'file.bin',
        'parent_file_id': 'root',
        'rapid_upload': False,
        'part_info_list': [
            {'part_number': n, 'upload_url': f'https://upload.example/{file_id}/{n}'}
            for n in range(1, part_count + 1)
        ],
    }


@pytest.fixture
def make_file(tmp_path):
    """Factory writing a file of the given content."""
    def _make(content: bytes, name: str = 'file.bin') -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def random_content():
    """Factory for random bytes."""
    return get_random_bytes


@pytest.fixture
def sample_item_data():
    """Returns a sample AliyunDrive file record."""
    return {
        'drive_id': 'drive-1',
        'file_id': '64de0e3d',
        'parent_file_id': 'root',
        'name': 'report.pdf',
        'type': 'file',
        'size': 2048,
        'content_hash': 'A9993E364706816ABA3E25717850C26C9CD0D89D',
        'created_at': '2023-08-17T12:00:00.000Z',
        'updated_at': '2023-08-18T08:30:00.000Z',
    }


@pytest.fixture
def sample_folder_data():
    """Returns a sample AliyunDrive folder record."""
    return {
        'drive_id': 'drive-1',
        'file_id': '64de0e3e',
        'parent_file_id': 'root',
        'name': 'photos',
        'type': 'folder',
        'created_at': '2023-08-17T12:00:00.000Z',
        'updated_at': '2023-08-17T12:00:00.000Z',
    }
