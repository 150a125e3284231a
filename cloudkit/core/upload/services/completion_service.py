"""
Completion service.

Finalizes the remote file once every part has been uploaded.
"""
from typing import Dict, Any
import logging

from ..models import UploadSession
from ..protocols import UploadApiProtocol


class CompletionNotifier:
    """
    Tells the vendor that all parts of a session are in place.

    Sends one request per session. Errors from the endpoint are passed
    through unchanged; the session is not retried.
    """

    def __init__(self, api: UploadApiProtocol):
        """
        Initialize completion notifier.

        Args:
            api: Vendor upload endpoints
        """
        self._api = api
        self._logger = logging.getLogger('cloudkit.upload.session')

    async def complete(self, session: UploadSession) -> Dict[str, Any]:
        """
        Finalize the remote file.

        Args:
            session: The session whose parts were all uploaded

        Returns:
            The vendor's record of the finished file

        Raises:
            ServiceError: If the vendor rejects the completion
        """
        self._logger.debug(f"Completing upload {session.upload_id} of file {session.file_id}")
        response = await self._api.complete_file(session)
        self._logger.debug(f"Upload {session.upload_id} completed")
        return response
