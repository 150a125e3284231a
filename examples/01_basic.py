"""
Drive info and directory listing
"""
import asyncio
import os

from cloudkit import AliyunDriveProvider, Credential


async def main():
    credential = Credential(access_token=os.environ["CLOUDKIT_ACCESS_TOKEN"])

    async with AliyunDriveProvider(credential) as drive:

        # Account info, also selects the default drive
        info = await drive.get_drive_info()
        print(f"User: {info.name}")
        print(f"Default drive: {info.default_drive_id}")

        # List the root folder
        async for item in drive.list_directory():
            kind = "D" if item.is_directory else "F"
            print(f"{kind} {item.path} ({item.size} bytes)")

        # One page at a time, keeping the cursor to resume later
        listing = drive.list_directory()
        first_page = await listing.next_page()
        print(f"First page: {len(first_page)} items, resume with {listing.cursor}")

        if listing.cursor:
            rest = await drive.list_directory(cursor=listing.cursor).collect()
            print(f"Remaining: {len(rest)} items")


if __name__ == "__main__":
    asyncio.run(main())
