"""
Upload files to AliyunDrive
"""
import asyncio
import os

from cloudkit import AliyunDriveProvider, CloudItem, Credential


async def main():
    credential = Credential(access_token=os.environ["CLOUDKIT_ACCESS_TOKEN"])

    async with AliyunDriveProvider(credential) as drive:

        # Simple upload to root
        result = await drive.upload_file("document.pdf")
        print(f"Uploaded: {result.file_id}")

        # Files the drive already holds complete without a transfer
        if result.rapid_upload:
            print("Rapid upload, no bytes sent")

        # Upload into a folder
        docs = CloudItem(id="64de0e3e", name="Documents", path="/Documents")
        result = await drive.upload_file("report.pdf", docs)
        print(f"Uploaded to Documents: {result.item.path if result.item else result.file_id}")

        # Upload with progress callback
        def on_progress(progress):
            print(f"Progress: {progress.percentage:.1f}% ({progress.uploaded_parts}/{progress.total_parts} parts)")

        result = await drive.upload_file("large_file.zip", progress_callback=on_progress)
        print(f"Uploaded: {result.file_id}")

        # Upload bytes from memory
        result = await drive.upload_data(b"hello world", "hello.txt")
        print(f"Uploaded hello.txt: {result.file_id}")


if __name__ == "__main__":
    asyncio.run(main())
