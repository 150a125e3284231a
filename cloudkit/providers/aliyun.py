"""
AliyunDrive open API client.

Endpoints live under ``https://openapi.alipan.com/adrive/v1.0``. Failures
come back as a ``{"code": ..., "message": ...}`` object, sometimes with
HTTP 200, so every response goes through _check_response. HTTP 409 is
the exception: the create endpoint answers ``PreHashMatched`` with it,
and the upload pipeline decides what to do next.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.api import APIConfig, AsyncTransport, HTTPResult
from ..core.exceptions import ResponseDecodeError, ServiceError
from ..core.models import CloudItem, Credential, parse_timestamp
from ..core.pagination import Page, PagedIterator
from ..core.upload import (
    CreateFileRequest,
    CreateFileResponse,
    UploadConfig,
    UploadSession,
)
from .base import CloudServiceProvider

CREATE_FILE = '/adrive/v1.0/openFile/create'
COMPLETE_FILE = '/adrive/v1.0/openFile/complete'
GET_FILE = '/adrive/v1.0/openFile/get'
LIST_FILES = '/adrive/v1.0/openFile/list'
DRIVE_INFO = '/adrive/v1.0/user/getDriveInfo'

LIST_PAGE_SIZE = 100


@dataclass(frozen=True)
class AliyunDriveInfo:
    """Account and drive ids returned by getDriveInfo."""
    user_id: str
    name: str
    avatar: str
    default_drive_id: str
    resource_drive_id: Optional[str] = None
    backup_drive_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], response: Any = None) -> 'AliyunDriveInfo':
        """
        Create from a getDriveInfo response body.

        Raises:
            ResponseDecodeError: If user_id, name, avatar or default_drive_id is missing
        """
        required = ('user_id', 'name', 'avatar', 'default_drive_id')
        if not isinstance(data, dict) or not all(isinstance(data.get(key), str) for key in required):
            raise ResponseDecodeError("Malformed drive info response", response=response)
        return cls(
            user_id=data['user_id'],
            name=data['name'],
            avatar=data['avatar'],
            default_drive_id=data['default_drive_id'],
            resource_drive_id=data.get('resource_drive_id'),
            backup_drive_id=data.get('backup_drive_id')
        )


class AliyunDriveProvider(CloudServiceProvider):
    """
    AliyunDrive client.

    Example:
        >>> async with AliyunDriveProvider(Credential(access_token)) as drive:
        ...     info = await drive.get_drive_info()
        ...     async for item in drive.list_directory():
        ...         print(item.path, item.size)
        ...     await drive.upload_file("report.pdf")
    """

    vendor_name = 'aliyundrive'

    def __init__(
        self,
        credential: Credential,
        drive_id: str = '',
        config: Optional[APIConfig] = None,
        upload_config: Optional[UploadConfig] = None,
        transport: Optional[AsyncTransport] = None
    ):
        """
        Initialize provider.

        Args:
            credential: Access credential
            drive_id: Drive to operate on; fetched with get_drive_info when empty
            config: Transport configuration
            upload_config: Upload pipeline configuration
            transport: Optional shared transport
        """
        super().__init__(credential, config, upload_config, transport)
        self._drive_id = drive_id
        self._drive_info: Optional[AliyunDriveInfo] = None

    @property
    def drive_id(self) -> str:
        return self._drive_id

    @drive_id.setter
    def drive_id(self, value: str):
        self._drive_id = value

    @property
    def drive_info(self) -> Optional[AliyunDriveInfo]:
        return self._drive_info

    async def _post(self, path: str, json: Optional[Dict[str, Any]] = None) -> HTTPResult:
        result = await self._transport.post(self.url(path), json=json)
        self._check_response(result)
        return result

    def _check_response(self, result: HTTPResult) -> None:
        """
        Raise ServiceError for failed responses.

        Raises:
            ServiceError: For a code/message envelope or a non-2xx status other than 409
        """
        if result.status_code == 409:
            return
        data = result.json
        if isinstance(data, dict):
            code = data.get('code')
            message = data.get('message')
            if isinstance(code, str) and isinstance(message, str):
                self._logger.warning(f"AliyunDrive error {code}: {message} (HTTP {result.status_code})")
                raise ServiceError(code, message, status_code=result.status_code)
        if not result.ok:
            self._logger.warning(f"AliyunDrive HTTP {result.status_code} for {result.url}")
            raise ServiceError(result.status_code, result.text[:200] or None, status_code=result.status_code)

    @staticmethod
    def _require_object(result: HTTPResult) -> Dict[str, Any]:
        data = result.json
        if not isinstance(data, dict):
            raise ResponseDecodeError("Response is not a JSON object", response=result)
        return data

    async def get_drive_info(self) -> AliyunDriveInfo:
        """
        Fetch the user's drive ids.

        Fills ``drive_id`` with the default drive when it is not set.

        Raises:
            ServiceError: If the request is rejected
            ResponseDecodeError: If the response misses required fields
        """
        result = await self._post(DRIVE_INFO)
        info = AliyunDriveInfo.from_dict(result.json, response=result)
        self._drive_info = info
        if not self._drive_id:
            self._drive_id = info.default_drive_id
            self._logger.debug(f"Using default drive {info.default_drive_id}")
        return info

    async def prepare_upload(self) -> None:
        if not self._drive_id:
            await self.get_drive_info()

    async def create_file(self, request: CreateFileRequest) -> CreateFileResponse:
        """
        Create (or precreate) a file.

        Raises:
            ServiceError: If the request is rejected
            ResponseDecodeError: If the response is not a JSON object
        """
        if not request.drive_id:
            request.drive_id = self._drive_id
        result = await self._post(CREATE_FILE, request.to_dict())
        response = CreateFileResponse.from_result(result)
        if result.status_code == 409 and not response.pre_hash_matched:
            raise ServiceError(response.code or 409, response.message, status_code=409)
        return response

    async def complete_file(self, session: UploadSession) -> Dict[str, Any]:
        result = await self._post(COMPLETE_FILE, {
            'drive_id': session.drive_id,
            'file_id': session.file_id,
            'upload_id': session.upload_id,
        })
        if not result.ok:
            raise ServiceError(result.status_code, result.text[:200] or None, status_code=result.status_code)
        return self._require_object(result)

    async def attributes_of_item(self, file_id: str) -> CloudItem:
        """
        Fetch one file or folder record.

        Raises:
            ServiceError: If the request is rejected
            ResponseDecodeError: If the record cannot be decoded
        """
        result = await self._post(GET_FILE, {'drive_id': self._drive_id, 'file_id': file_id})
        if not result.ok:
            raise ServiceError(result.status_code, result.text[:200] or None, status_code=result.status_code)
        item = self.item_from_json(self._require_object(result))
        if item is None:
            raise ResponseDecodeError("File record misses file_id or name", response=result)
        return item

    def list_directory(
        self,
        directory: Optional[CloudItem] = None,
        cursor: Optional[str] = None
    ) -> PagedIterator[CloudItem]:
        """
        List a directory page by page.

        Args:
            directory: Directory to list (the root when omitted)
            cursor: ``next_marker`` of a previous listing to resume from

        Returns:
            Lazy iterator over the directory's items, newest first
        """
        directory = directory or self.root_item

        async def fetch_page(marker: Optional[str]) -> Page[CloudItem]:
            json: Dict[str, Any] = {
                'all': False,
                'drive_id': self._drive_id,
                'fields': '*',
                'limit': LIST_PAGE_SIZE,
                'order_by': 'updated_at',
                'order_direction': 'DESC',
                'parent_file_id': directory.id,
            }
            if marker:
                json['marker'] = marker
            result = await self._post(LIST_FILES, json)
            if not result.ok:
                raise ServiceError(result.status_code, result.text[:200] or None, status_code=result.status_code)
            data = self._require_object(result)
            entries = data.get('items')
            if not isinstance(entries, list):
                raise ResponseDecodeError("Listing has no items", response=result)

            items = []
            for entry in entries:
                item = self.item_from_json(entry) if isinstance(entry, dict) else None
                if item is not None:
                    items.append(item.fix_path(directory))
            next_marker = data.get('next_marker')
            self._logger.debug(f"Listed {len(items)} items in {directory.path}")
            return Page(items=items, next_cursor=next_marker if isinstance(next_marker, str) and next_marker else None)

        return PagedIterator(fetch_page, cursor=cursor)

    @staticmethod
    def item_from_json(data: Dict[str, Any]) -> Optional[CloudItem]:
        """
        Decode a file record.

        Returns:
            The item, or None when file_id or name is missing
        """
        file_id = data.get('file_id')
        name = data.get('name') or data.get('file_name')
        if not isinstance(file_id, str) or not isinstance(name, str):
            return None

        size = data.get('size')
        return CloudItem(
            id=file_id,
            name=name,
            path=name,
            is_directory=data.get('type') == 'folder',
            size=size if isinstance(size, int) and not isinstance(size, bool) else -1,
            created_at=parse_timestamp(data.get('created_at')),
            modified_at=parse_timestamp(data.get('updated_at')),
            file_hash=data.get('content_hash'),
            json=data
        )
