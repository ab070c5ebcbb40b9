#!/usr/bin/env python3
"""
Remove every catalog image (remote object and record) through the HTTP API.

Run:
    python seed/cleanup_images.py --base-url http://localhost:5003 [--dry-run]
"""

import argparse
import sys
from typing import Any

import requests
from aws_lambda_powertools import Logger

logger = Logger(service="cleanup")

LIST_TIMEOUT_SECONDS = 30
DELETE_TIMEOUT_SECONDS = 60


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete all images via the Image Catalog API")
    parser.add_argument(
        "--base-url",
        default="http://localhost:5003",
        help="API base URL (listener or API Gateway stage URL)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List what would be deleted without deleting it",
    )
    return parser.parse_args()


def fetch_catalog(session: requests.Session, api_url: str) -> list[dict[str, Any]]:
    response = session.get(f"{api_url}/images", timeout=LIST_TIMEOUT_SECONDS)
    response.raise_for_status()
    return response.json().get("data", [])


def delete_one(session: requests.Session, api_url: str, image: dict[str, Any]) -> bool:
    response = session.delete(f"{api_url}/{image['_id']}", timeout=DELETE_TIMEOUT_SECONDS)

    # 404 means someone else removed it first.
    if response.ok or response.status_code == 404:
        logger.info(
            "Deleted image",
            extra={"image_id": image["_id"], "file_name": image.get("originalFilename")},
        )
        return True

    logger.error(
        "Failed to delete image",
        extra={"image_id": image["_id"], "status": response.status_code, "response": response.text},
    )
    return False


def main() -> int:
    args = parse_args()
    api_url = f"{args.base_url.rstrip('/')}/api"

    with requests.Session() as session:
        try:
            catalog = fetch_catalog(session, api_url)
        except requests.RequestException as exc:
            logger.error("Failed to list images", extra={"api_url": api_url, "error": str(exc)})
            return 1

        logger.info("Catalog fetched", extra={"count": len(catalog), "dry_run": args.dry_run})

        if args.dry_run:
            for image in catalog:
                logger.info("Would delete image", extra={"image_id": image["_id"]})
            return 0

        failures = sum(not delete_one(session, api_url, image) for image in catalog)

    if failures:
        logger.error("Cleanup finished with errors", extra={"failed": failures})
        return 1

    logger.info("Cleanup completed successfully", extra={"count": len(catalog)})
    return 0


if __name__ == "__main__":
    sys.exit(main())
