from __future__ import annotations

import argparse
import os
import sys

import requests

from vidshare.client.upload_client import ApiError, UploadForm, VideoShareClient, describe_upload_error
from vidshare.domain.entities.video import VideoRecord
from vidshare.domain.errors import ValidationError

DEFAULT_API_URL = os.getenv("VIDSHARE_API_URL", "http://localhost:8000")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload and browse videos on a vidshare server")
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help="Base URL of the vidshare API")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds to wait for the server")
    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Upload a video with its thumbnail")
    upload.add_argument("--title", required=True)
    upload.add_argument("--description", required=True)
    upload.add_argument("--video", required=True, help="Path to an MP4, AVI, MPEG or MOV file")
    upload.add_argument("--thumbnail", required=True, help="Path to a JPG or PNG image")

    sub.add_parser("list", help="List videos, newest first")

    show = sub.add_parser("show", help="Show one video")
    show.add_argument("video_id")
    return parser


def _print_record(video: VideoRecord) -> None:
    created = video.created_at.isoformat() if video.created_at else "-"
    print(f"{video.id}  {created}  {video.title}")


def _print_progress(percent: int) -> None:
    print(f"\rUploading... {percent}%", end="", flush=True)


def _describe_request_error(exc: Exception) -> str:
    if isinstance(exc, ApiError):
        return exc.message or f"Request failed with status {exc.status_code}"
    if isinstance(exc, requests.exceptions.Timeout):
        return "The server took too long to respond. Please try again."
    return "Network error. Please check your connection."


def _upload(client: VideoShareClient, args) -> int:
    try:
        form = UploadForm.from_paths(args.title, args.description, args.video, args.thumbnail)
        video = client.upload(form, on_progress=_print_progress)
    except (ValidationError, ApiError, OSError) as e:
        print()
        print(describe_upload_error(e, client.policy), file=sys.stderr)
        return 1
    print(f"\n✅ Uploaded {video.title} ({video.id})\n")

    # Same as the web form: land on the listing after a successful upload
    try:
        videos = client.list_videos()
    except (ApiError, OSError) as e:
        # the upload already succeeded
        print(f"Could not load the video list. {_describe_request_error(e)}", file=sys.stderr)
        return 0
    for item in videos:
        _print_record(item)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    client = VideoShareClient(args.api_url, timeout=args.timeout)

    if args.command == "upload":
        return _upload(client, args)

    try:
        if args.command == "list":
            for item in client.list_videos():
                _print_record(item)
        else:
            video = client.get_video(args.video_id)
            _print_record(video)
            print(f"  {video.description}")
            print(f"  video:     {video.video_url}")
            print(f"  thumbnail: {video.thumbnail_url}")
    except (ApiError, OSError) as e:
        print(_describe_request_error(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
