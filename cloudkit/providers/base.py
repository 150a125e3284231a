"""
Provider base class.

Holds what every vendor client shares: the credential, the HTTP
transport, the vendor profile and the upload entry points. Vendor
subclasses implement the endpoints.
"""
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.api import APIConfig, AsyncTransport
from ..core.exceptions import UnsupportedError
from ..core.logging import get_logger
from ..core.models import CloudItem, Credential
from ..core.pagination import PagedIterator
from ..core.upload import (
    CreateFileRequest,
    CreateFileResponse,
    UploadConfig,
    UploadFacade,
    UploadResult,
    UploadSession,
)
from ..core.upload.protocols import ProgressCallback
from ..core.upload.services import FileValidator
from .vendors import VendorProfile, get_vendor


class CloudServiceProvider:
    """
    Base class of vendor clients.

    Example:
        >>> async with AliyunDriveProvider(Credential(token)) as drive:
        ...     result = await drive.upload_file("notes.txt", drive.root_item)
        ...     print(result.file_id)
    """

    vendor_name = ''

    def __init__(
        self,
        credential: Credential,
        config: Optional[APIConfig] = None,
        upload_config: Optional[UploadConfig] = None,
        transport: Optional[AsyncTransport] = None
    ):
        """
        Initialize provider.

        Args:
            credential: Access credential; refreshing it is up to the caller
            config: Transport configuration (api_url defaults to the vendor's)
            upload_config: Upload pipeline configuration
            transport: Optional shared transport
        """
        self.vendor: VendorProfile = get_vendor(self.vendor_name)
        config = config or APIConfig()
        if not config.api_url:
            config = replace(config, api_url=self.vendor.api_url)
        self._config = config
        self._credential = credential
        self._transport = transport or AsyncTransport(self._config, credential)
        self._transport.credential = credential
        self._upload_config = upload_config or self._default_upload_config()
        self._uploader: Optional[UploadFacade] = None
        self._validator = FileValidator()
        self._logger = get_logger(f'cloudkit.provider.{self.vendor_name}')

    def _default_upload_config(self) -> UploadConfig:
        if self.vendor.chunk_size:
            return UploadConfig(
                chunk_size=self.vendor.chunk_size,
                rapid_upload=self.vendor.supports_rapid_upload
            )
        return UploadConfig(rapid_upload=self.vendor.supports_rapid_upload)

    @property
    def credential(self) -> Credential:
        return self._credential

    @credential.setter
    def credential(self, value: Credential):
        self._credential = value
        self._transport.credential = value

    @property
    def api_url(self) -> str:
        return self._config.api_url.rstrip('/')

    @property
    def transport(self) -> AsyncTransport:
        return self._transport

    @property
    def upload_config(self) -> UploadConfig:
        return self._upload_config

    @property
    def root_item(self) -> CloudItem:
        """The root directory of the drive."""
        return CloudItem(id='root', name='', path='/', is_directory=True)

    def url(self, path: str) -> str:
        """Absolute URL of an API path."""
        return self._config.endpoint(path)

    def _access_token(self) -> str:
        return self._credential.access_token

    @property
    def uploader(self) -> UploadFacade:
        """Upload facade bound to this provider."""
        if self._uploader is None:
            self._uploader = UploadFacade(
                api=self,
                transport=self._transport,
                token_provider=self._access_token,
                config=self._upload_config,
                item_decoder=self.item_from_json
            )
        return self._uploader

    # Upload endpoints, implemented by vendors that support uploads

    @property
    def drive_id(self) -> str:
        return ''

    async def create_file(self, request: CreateFileRequest) -> CreateFileResponse:
        raise UnsupportedError(f"{self.vendor.display_name} does not support uploads")

    async def complete_file(self, session: UploadSession) -> Dict[str, Any]:
        raise UnsupportedError(f"{self.vendor.display_name} does not support uploads")

    async def prepare_upload(self) -> None:
        """Fetch whatever the upload endpoints need before the first upload."""

    @staticmethod
    def item_from_json(data: Dict[str, Any]) -> Optional[CloudItem]:
        return None

    def list_directory(
        self,
        directory: Optional[CloudItem] = None,
        cursor: Optional[str] = None
    ) -> PagedIterator[CloudItem]:
        raise UnsupportedError(f"{self.vendor.display_name} does not support listing")

    async def upload_file(
        self,
        file_path: Union[str, Path],
        directory: Optional[CloudItem] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload a local file into a directory.

        Args:
            file_path: Local file
            directory: Target directory (the root when omitted)
            progress_callback: Optional callback for progress updates

        Returns:
            UploadResult with the remote file id

        Raises:
            UploadFileNotExist: If the file is missing, unreadable or not a file
            ServiceError: If the vendor rejects a step
        """
        self._validator.validate(file_path)
        directory = directory or self.root_item
        await self.prepare_upload()
        return await self.uploader.upload_file(file_path, directory.id, progress_callback)

    async def upload_data(
        self,
        data: bytes,
        filename: str,
        directory: Optional[CloudItem] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload in-memory bytes as ``filename`` into a directory.

        A temporary file is written and removed again whatever the outcome.
        """
        directory = directory or self.root_item
        await self.prepare_upload()
        return await self.uploader.upload_data(data, filename, directory.id, progress_callback)

    async def close(self):
        """Close the underlying transport."""
        await self._transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
