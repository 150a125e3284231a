"""
Vendor profiles.

One record per supported cloud drive: API and OAuth endpoints plus the
capabilities the client needs to know about. Vendors differ in data
here, not in code.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from ..core.exceptions import UnsupportedError

MiB = 1024 * 1024


@dataclass(frozen=True)
class VendorProfile:
    """
    Static description of a cloud drive vendor.

    Attributes:
        name: Lookup key
        display_name: Human readable name
        api_url: Base URL of the vendor API
        authorize_url: OAuth2 authorization URL (None when the vendor has no OAuth2 web flow)
        token_url: OAuth2 token URL
        scope: Default OAuth2 scope
        supports_refresh_token: Token endpoint issues refresh tokens
        supports_device_code: Vendor authorizes through a device/QR code flow
        supports_rapid_upload: Create endpoint accepts content hash and proof code
        chunk_size: Upload part size, None when uploads are not implemented
    """
    name: str
    display_name: str
    api_url: str
    authorize_url: Optional[str] = None
    token_url: Optional[str] = None
    scope: str = ''
    supports_refresh_token: bool = True
    supports_device_code: bool = False
    supports_rapid_upload: bool = False
    chunk_size: Optional[int] = None


VENDORS: Dict[str, VendorProfile] = {
    profile.name: profile for profile in (
        VendorProfile(
            name='aliyundrive',
            display_name='AliyunDrive',
            api_url='https://openapi.alipan.com',
            authorize_url='https://open.aliyundrive.com/oauth/authorize',
            token_url='https://open.aliyundrive.com/oauth/access_token',
            scope='user:base,file:all:read,file:all:write',
            supports_rapid_upload=True,
            chunk_size=10 * MiB,
        ),
        VendorProfile(
            name='baidupan',
            display_name='BaiduPan',
            api_url='https://pan.baidu.com',
            authorize_url='https://openapi.baidu.com/oauth/2.0/authorize?display=mobile&force_login=1',
            token_url='https://openapi.baidu.com/oauth/2.0/token',
            scope='basic,netdisk',
        ),
        VendorProfile(
            name='box',
            display_name='Box',
            api_url='https://api.box.com/2.0',
            authorize_url='https://account.box.com/api/oauth2/authorize',
            token_url='https://api.box.com/oauth2/token',
            scope='root_readwrite',
        ),
        VendorProfile(
            name='dropbox',
            display_name='Dropbox',
            api_url='https://api.dropboxapi.com/2',
            authorize_url='https://www.dropbox.com/oauth2/authorize?token_access_type=offline',
            token_url='https://api.dropbox.com/oauth2/token',
        ),
        VendorProfile(
            name='googledrive',
            display_name='Google Drive',
            api_url='https://www.googleapis.com/drive/v3',
            authorize_url='https://accounts.google.com/o/oauth2/auth',
            token_url='https://accounts.google.com/o/oauth2/token',
            scope=(
                'https://www.googleapis.com/auth/drive.readonly '
                'https://www.googleapis.com/auth/userinfo.profile'
            ),
        ),
        VendorProfile(
            name='onedrive',
            display_name='OneDrive',
            api_url='https://graph.microsoft.com/v1.0',
            authorize_url='https://login.microsoftonline.com/common/oauth2/v2.0/authorize',
            token_url='https://login.microsoftonline.com/common/oauth2/v2.0/token',
            scope='offline_access User.Read Files.ReadWrite.All',
        ),
        VendorProfile(
            name='pcloud',
            display_name='pCloud',
            api_url='https://api.pcloud.com',
            authorize_url='https://my.pcloud.com/oauth2/authorize',
            token_url='https://api.pcloud.com/oauth2_token',
            supports_refresh_token=False,
        ),
        VendorProfile(
            name='premiumize',
            display_name='Premiumize',
            api_url='https://www.premiumize.me/api',
            authorize_url='https://www.premiumize.me/authorize',
            token_url='https://www.premiumize.me/token',
            supports_refresh_token=False,
        ),
        VendorProfile(
            name='drive115',
            display_name='115',
            api_url='https://proapi.115.com',
            supports_device_code=True,
        ),
        VendorProfile(
            name='drive123',
            display_name='123Pan',
            api_url='https://open-api.123pan.com',
            chunk_size=10 * MiB,
        ),
    )
}


def get_vendor(name: str) -> VendorProfile:
    """
    Look up a vendor profile by name (case insensitive).

    Raises:
        UnsupportedError: If the vendor is unknown
    """
    profile = VENDORS.get(name.lower())
    if profile is None:
        raise UnsupportedError(f"Unsupported vendor: {name}", error_code=name)
    return profile
