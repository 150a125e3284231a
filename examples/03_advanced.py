"""
Custom transport and upload configuration
"""
import asyncio
import logging
import os

import cloudkit
from cloudkit import (
    AliyunDriveProvider,
    APIConfig,
    Credential,
    ServiceError,
    TimeoutConfig,
    UploadConfig,
    get_vendor,
)


async def main():
    cloudkit.setup_logging(logging.DEBUG)
    logging.basicConfig(level=logging.DEBUG)

    # Route through a proxy and allow 20 minutes per part
    config = APIConfig.with_proxy(
        "http://127.0.0.1:8080",
        timeout=TimeoutConfig(chunk_total=1200)
    )

    # Skip the pre-hash probe and always send the full content hash
    upload_config = UploadConfig(use_pre_hash=False, check_name_mode="refuse")

    credential = Credential(access_token=os.environ["CLOUDKIT_ACCESS_TOKEN"])
    async with AliyunDriveProvider(
        credential,
        drive_id=os.environ.get("CLOUDKIT_DRIVE_ID", ""),
        config=config,
        upload_config=upload_config
    ) as drive:
        try:
            result = await drive.upload_file("backup.tar.gz")
            print(f"Uploaded: {result.file_id}")
        except ServiceError as e:
            print(f"Rejected: {e.code} {e.message} (HTTP {e.status_code})")

    # Vendor capabilities
    profile = get_vendor("pcloud")
    print(f"{profile.display_name}: refresh tokens {profile.supports_refresh_token}")


if __name__ == "__main__":
    asyncio.run(main())
