#!/usr/bin/env python3
"""
Seed script to populate the catalog through the HTTP API.

Every image file in ``--images-dir`` is sent in one batch request to
``POST /api/upload/multiple``; a partial failure (207) exits non-zero.

Run:
    python seed/seed_images.py \
      --base-url http://localhost:5003 \
      --images-dir ./sample-images
"""

import argparse
import mimetypes
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import requests
from aws_lambda_powertools import Logger

logger = Logger(service="seed")

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg"}
UPLOAD_TIMEOUT_SECONDS = 300


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via the Image Catalog API")
    parser.add_argument(
        "--base-url",
        default="http://localhost:5003",
        help="API base URL (listener or API Gateway stage URL)",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        required=True,
        help="Directory containing the images to upload",
    )
    parser.add_argument(
        "--folder",
        default=None,
        help="Media store folder (defaults to the server's configured folder)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of images to seed",
    )
    return parser.parse_args()


def collect_images(images_dir: Path, limit: int) -> list[Path]:
    paths = sorted(p for p in images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
    return paths[:limit]


def upload_batch(upload_url: str, paths: list[Path], folder: str | None) -> requests.Response:
    with ExitStack() as stack:
        files = [
            (
                "images",
                (
                    path.name,
                    stack.enter_context(path.open("rb")),
                    mimetypes.guess_type(path.name)[0] or "image/jpeg",
                ),
            )
            for path in paths
        ]
        data = {"folder": folder} if folder else None
        return requests.post(upload_url, files=files, data=data, timeout=UPLOAD_TIMEOUT_SECONDS)


def report(body: dict[str, Any]) -> None:
    for record in body.get("data", []):
        logger.info(
            "Seeded image",
            extra={"file_name": record.get("originalFilename"), "image_id": record.get("_id")},
        )

    for failure in body.get("failed", []):
        logger.error(
            "Failed to seed image",
            extra={
                "file_name": failure.get("filename"),
                "error": failure.get("error"),
                "reason": failure.get("message"),
            },
        )


def main() -> int:
    args = parse_args()
    paths = collect_images(args.images_dir, args.limit)

    if not paths:
        logger.warning("No image files found", extra={"images_dir": str(args.images_dir)})
        return 0

    upload_url = f"{args.base_url.rstrip('/')}/api/upload/multiple"
    logger.info("Starting seeding process", extra={"upload_url": upload_url, "count": len(paths)})

    try:
        response = upload_batch(upload_url, paths, args.folder)
        body = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Seeding request failed", extra={"upload_url": upload_url, "error": str(exc)})
        return 1

    report(body)

    if response.status_code != 200:
        logger.error(
            "Seeding finished with errors",
            extra={"status": response.status_code, "reason": body.get("message")},
        )
        return 1

    logger.info("Seeding completed", extra={"count": body.get("count")})
    return 0


if __name__ == "__main__":
    sys.exit(main())
