"""Vendor clients and the vendor profile table."""
from .base import CloudServiceProvider
from .aliyun import AliyunDriveProvider, AliyunDriveInfo
from .vendors import VENDORS, VendorProfile, get_vendor

__all__ = [
    'CloudServiceProvider',
    'AliyunDriveProvider',
    'AliyunDriveInfo',
    'VENDORS',
    'VendorProfile',
    'get_vendor',
]
