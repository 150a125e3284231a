"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures. Every vendor
response the pipeline depends on is decoded here once, so the services
never look fields up by name.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Sequence
from pathlib import Path

from ...exceptions import ResponseDecodeError
from ...models import CloudItem

MiB = 1024 * 1024

PRE_HASH_MATCHED = 'PreHashMatched'


@dataclass
class UploadConfig:
    """
    Configuration of the upload pipeline.

    Attributes:
        chunk_size: Size of every part but the last
        pre_hash_size: Bytes hashed for the pre-hash probe
        hash_buffer_size: Read buffer used while hashing the whole file
        check_name_mode: Vendor name conflict policy
        use_pre_hash: Probe with the pre-hash before hashing the whole file
        rapid_upload: Send content hash and proof code so the server may skip the transfer
        content_hash_name: Algorithm identifier sent with the content hash
        proof_version: Proof code scheme identifier
    """
    chunk_size: int = 10 * MiB
    pre_hash_size: int = 1024
    hash_buffer_size: int = MiB
    check_name_mode: str = 'auto_rename'
    use_pre_hash: bool = True
    rapid_upload: bool = True
    content_hash_name: str = 'sha1'
    proof_version: str = 'v1'

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        if self.pre_hash_size <= 0:
            raise ValueError("Pre-hash size must be positive")
        if self.hash_buffer_size <= 0:
            raise ValueError("Hash buffer size must be positive")


@dataclass(frozen=True)
class UploadTarget:
    """
    Destination and source of one upload.

    ``size`` must match the byte length of ``local_path``; it is read once
    before the pipeline starts.
    """
    parent_id: str
    filename: str
    local_path: Path
    size: int


@dataclass(frozen=True)
class ChunkInfo:
    """
    Byte range of one planned part.

    Attributes:
        part_number: 1-based part number
        offset: Start position in bytes
        length: Number of bytes
    """
    part_number: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        """Returns the exclusive end position."""
        return self.offset + self.length


@dataclass(frozen=True)
class PartInfo:
    """Upload target of one part, as issued by the server."""
    part_number: int
    upload_url: str
    content_type: Optional[str] = None
    internal_upload_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PartInfo':
        """
        Create from a ``part_info_list`` entry.

        Raises:
            ResponseDecodeError: If part_number or upload_url is missing
        """
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"Part entry is not an object: {data!r}")
        part_number = data.get('part_number')
        upload_url = data.get('upload_url')
        if not isinstance(part_number, int) or isinstance(part_number, bool):
            raise ResponseDecodeError(f"Part entry has no part_number: {data!r}")
        if not isinstance(upload_url, str) or not upload_url:
            raise ResponseDecodeError(f"Part {part_number} has no upload_url")
        return cls(
            part_number=part_number,
            upload_url=upload_url,
            content_type=data.get('content_type'),
            internal_upload_url=data.get('internal_upload_url')
        )


@dataclass(frozen=True)
class UploadSession:
    """
    Server-issued descriptor of one upload attempt.

    Lives only for the attempt that negotiated it; a retry negotiates a
    new session.
    """
    drive_id: str
    file_id: str
    upload_id: str
    file_name: str = ''
    parent_file_id: str = ''
    part_info_list: List[PartInfo] = field(default_factory=list)
    rapid_upload: bool = False

    REQUIRED_FIELDS = ('drive_id', 'file_id', 'upload_id')

    @classmethod
    def from_dict(cls, data: Dict[str, Any], response: Any = None) -> 'UploadSession':
        """
        Create from a create-file response body.

        Args:
            data: Decoded response object
            response: Raw HTTPResult attached to decode errors

        Raises:
            ResponseDecodeError: If a required field is missing
        """
        missing = [
            name for name in cls.REQUIRED_FIELDS
            if not isinstance(data.get(name), str) or not data.get(name)
        ]
        if missing:
            raise ResponseDecodeError(
                f"Upload session is missing {', '.join(missing)}",
                response=response
            )

        raw_parts = data.get('part_info_list') or []
        if not isinstance(raw_parts, list):
            raise ResponseDecodeError("part_info_list is not a list", response=response)
        try:
            parts = [PartInfo.from_dict(entry) for entry in raw_parts]
        except ResponseDecodeError as e:
            raise ResponseDecodeError(str(e), response=response) from e

        return cls(
            drive_id=data['drive_id'],
            file_id=data['file_id'],
            upload_id=data['upload_id'],
            file_name=data.get('file_name') or data.get('name') or '',
            parent_file_id=data.get('parent_file_id') or '',
            part_info_list=sorted(parts, key=lambda part: part.part_number),
            rapid_upload=bool(data.get('rapid_upload', False))
        )

    @property
    def part_count(self) -> int:
        return len(self.part_info_list)

    def is_last(self, part: PartInfo) -> bool:
        return part.part_number == self.part_count


@dataclass
class CreateFileRequest:
    """
    Request body of the vendor "create file" endpoint.

    Hash fields are only sent when set: ``pre_hash`` by the probe,
    the content hash and proof code by the precreate phase.
    """
    name: str
    size: int
    parent_file_id: str
    part_numbers: Sequence[int]
    drive_id: str = ''
    check_name_mode: str = 'auto_rename'
    pre_hash: Optional[str] = None
    content_hash: Optional[str] = None
    content_hash_name: Optional[str] = None
    proof_version: Optional[str] = None
    proof_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire payload."""
        result: Dict[str, Any] = {
            'drive_id': self.drive_id,
            'parent_file_id': self.parent_file_id,
            'name': self.name,
            'type': 'file',
            'size': self.size,
            'check_name_mode': self.check_name_mode,
            'part_info_list': [{'part_number': n} for n in self.part_numbers],
        }
        if self.pre_hash is not None:
            result['pre_hash'] = self.pre_hash
        if self.content_hash is not None:
            result['content_hash'] = self.content_hash
            result['content_hash_name'] = self.content_hash_name
            result['proof_version'] = self.proof_version
            result['proof_code'] = self.proof_code
        return result

    @property
    def has_content_hash(self) -> bool:
        return self.content_hash is not None


@dataclass
class CreateFileResponse:
    """
    Decoded response of the vendor "create file" endpoint.

    Attributes:
        payload: Response JSON object
        code: Status marker (e.g. 'PreHashMatched'), if any
        message: Message paired with code
        rapid_upload: Server already holds the content
        result: Raw HTTPResult
    """
    payload: Dict[str, Any]
    code: Optional[str] = None
    message: Optional[str] = None
    rapid_upload: bool = False
    result: Any = None

    @classmethod
    def from_result(cls, result: Any) -> 'CreateFileResponse':
        """
        Decode an HTTPResult.

        Raises:
            ResponseDecodeError: If the body is not a JSON object
        """
        data = result.json
        if not isinstance(data, dict):
            raise ResponseDecodeError("Create file response is not a JSON object", response=result)
        code = data.get('code')
        return cls(
            payload=data,
            code=code if isinstance(code, str) else None,
            message=data.get('message'),
            rapid_upload=data.get('rapid_upload') is True,
            result=result
        )

    @property
    def pre_hash_matched(self) -> bool:
        return self.code == PRE_HASH_MATCHED

    def require_session(self, chunks: Sequence[ChunkInfo]) -> UploadSession:
        """
        Decode the upload session and check it against the planned parts.

        Args:
            chunks: Planned parts the request announced

        Returns:
            Session with exactly one PartInfo per planned chunk

        Raises:
            ResponseDecodeError: If fields are missing or the part list does not match
        """
        session = UploadSession.from_dict(self.payload, response=self.result)
        if not session.part_info_list:
            raise ResponseDecodeError("Upload session has no parts", response=self.result)

        numbers = [part.part_number for part in session.part_info_list]
        expected = [chunk.part_number for chunk in chunks]
        if numbers != expected:
            raise ResponseDecodeError(
                f"Upload session parts {numbers[:5]}... do not match the "
                f"{len(expected)} planned parts",
                response=self.result
            )
        return session


@dataclass
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        total_bytes: Total file size
        uploaded_bytes: Bytes uploaded so far
        total_parts: Total number of parts
        uploaded_parts: Number of fully uploaded parts
    """
    total_bytes: int
    uploaded_bytes: int = 0
    total_parts: int = 0
    uploaded_parts: int = 0

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.total_bytes == 0:
            return 100.0 if self.is_complete else 0.0
        return (self.uploaded_bytes / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True if every part was uploaded."""
        return self.total_parts > 0 and self.uploaded_parts >= self.total_parts


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        file_id: Id of the remote file
        drive_id: Drive holding the file
        file_size: Size of uploaded file
        rapid_upload: True when no content was transferred
        item: Remote file record, when the response carried one
        response: Raw final response (complete call, or create call for rapid uploads)
    """
    file_id: str
    drive_id: str
    file_size: int
    rapid_upload: bool = False
    item: Optional[CloudItem] = None
    response: Dict[str, Any] = field(default_factory=dict)
