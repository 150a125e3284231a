"""
Provider-independent models.

Contains the file/folder representation returned by providers and the
credential the transport and the upload hasher read from.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional


@dataclass
class Credential:
    """
    OAuth credential for a provider account.

    Obtaining and storing tokens is left to the caller; cloudkit only
    reads ``access_token`` when it signs requests or computes proof codes.
    """
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = 'Bearer'

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"{self.token_type} {self.access_token}"


@dataclass
class CloudItem:
    """
    A file or folder stored on a cloud drive.

    Attributes:
        id: Vendor file id
        name: File name
        path: Display path (vendors that do not return one get it from fix_path)
        is_directory: True for folders
        size: Size in bytes, -1 for folders or when unknown
        created_at: Creation date
        modified_at: Last modification date
        file_hash: Content hash reported by the vendor
        json: Raw vendor payload
    """
    id: str
    name: str
    path: str
    is_directory: bool = True
    size: int = -1
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    file_hash: Optional[str] = None
    json: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def fix_path(self, directory: 'CloudItem') -> 'CloudItem':
        """Prefix the item path with the directory it was listed from."""
        if directory.path == '/':
            self.path = '/' + self.path
        else:
            self.path = '/'.join([directory.path, self.path])
        return self

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.path, self.is_directory))


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp as sent by vendor APIs."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
