#!/usr/bin/env python3
"""Upload a photo for a slipway through the sign-then-PUT hand-off and record it on the slipway."""
import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

import httpx

BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from slipway_core.editor import EntityEditor  # noqa: E402
from slipway_core.record_store import FirebaseRecordStore  # noqa: E402
from slipway_core.upload_handshake import UploadError, UploadHandshake  # noqa: E402
from utils.config import FIREBASE_AUTH_TOKEN, FIREBASE_DATABASE_URL, SIGNING_BASE_URL  # noqa: E402


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("slipway_id", help="Id of the slipway the photo belongs to")
    parser.add_argument("path", type=Path, help="Image file (JPEG, PNG or WebP, under 10MB)")
    parser.add_argument("--signing-url", default=SIGNING_BASE_URL, help="Base URL of the sign_s3 endpoint")
    parser.add_argument("--database-url", default=FIREBASE_DATABASE_URL, help="Realtime database base URL")
    parser.add_argument("--content-type", default=None, help="Override the guessed content type")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    content = args.path.read_bytes()
    content_type = args.content_type or mimetypes.guess_type(args.path.name)[0] or "application/octet-stream"

    def on_progress(percent: int) -> None:
        print(f"\rUploading... {percent}%", end="", flush=True)

    async with httpx.AsyncClient(timeout=60.0) as http:
        store = FirebaseRecordStore(args.database_url, http, FIREBASE_AUTH_TOKEN)
        handshake = UploadHandshake(http, args.signing_url)
        try:
            result = await handshake.upload_photo(
                EntityEditor(store), args.slipway_id, content, content_type, on_progress
            )
        except UploadError as e:
            print(f"\n{e}", file=sys.stderr)
            return 1
    print("\nImage successfully uploaded")
    print(result.display_url)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if not args.path.is_file():
        print(f"No such file: {args.path}", file=sys.stderr)
        return 2
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
