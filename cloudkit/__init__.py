"""
cloudkit - Async Python client for cloud drive APIs.

Usage:
    >>> from cloudkit import AliyunDriveProvider, Credential
    >>>
    >>> async with AliyunDriveProvider(Credential(access_token)) as drive:
    ...     result = await drive.upload_file("video.mp4")
    ...     print(result.file_id, result.rapid_upload)
"""
from .core.logging import get_logger, setup_logging
from .core.models import CloudItem, Credential
from .core.exceptions import (
    CloudServiceError,
    UnsupportedError,
    ResponseDecodeError,
    ServiceError,
    UploadFileNotExist,
)

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    TimeoutConfig,
    AsyncTransport,
    HTTPResult,
)
from .core.upload import UploadConfig, UploadProgress, UploadResult
from .core.pagination import PagedIterator

# Providers
from .providers import (
    CloudServiceProvider,
    AliyunDriveProvider,
    AliyunDriveInfo,
    VendorProfile,
    VENDORS,
    get_vendor,
)

__version__ = '1.0.0'


__all__ = [
    'CloudItem',
    'Credential',
    'CloudServiceError',
    'UnsupportedError',
    'ResponseDecodeError',
    'ServiceError',
    'UploadFileNotExist',
    'APIConfig',
    'ProxyConfig',
    'TimeoutConfig',
    'AsyncTransport',
    'HTTPResult',
    'UploadConfig',
    'UploadProgress',
    'UploadResult',
    'PagedIterator',
    'CloudServiceProvider',
    'AliyunDriveProvider',
    'AliyunDriveInfo',
    'VendorProfile',
    'VENDORS',
    'get_vendor',
    'get_logger',
    'setup_logging',
    '__version__',
]
