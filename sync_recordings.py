#!/usr/bin/env python3
"""Upload finished recordings from a watch folder to S3 and update the recordings index."""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

from config_module import AppConfig, ConfigCreated, ConfigError, load_config
from index_module import (
    IndexFormatError,
    LocalIndexStore,
    S3IndexStore,
    add_recording,
    known_files,
)
from key_module import build_base_url
from s3_module import make_s3_client, upload_recording
from scanner_module import ScanError, list_new_files


@dataclass
class SyncResult:
    uploaded: int = 0
    failed: int = 0
    saved: bool = False


def open_index_store(cfg: AppConfig, client):
    """Local JSON file when jsonPath is configured, otherwise an object in the bucket."""
    if cfg.json_path is not None:
        return LocalIndexStore(cfg.json_path)
    return S3IndexStore(client, cfg.bucket, cfg.index_key)


def run_sync(cfg: AppConfig, client, store, now: float | None = None) -> SyncResult:
    result = SyncResult()

    items = store.load()
    known = known_files(items)
    files = list_new_files(cfg.watch_dir, known, now)

    if not files:
        if items:
            print("no new recordings in", cfg.watch_dir)
            return result
        # Nothing uploaded yet; still write an empty index so readers find one.
        store.save(items)
        result.saved = True
        print("no recordings found in", cfg.watch_dir, "created empty index at", store.location)
        return result

    base_url = build_base_url(cfg.bucket, cfg.region, cfg.base_url)

    for path in files:
        print("uploading", path)
        try:
            link = upload_recording(client, path, cfg.bucket, cfg.video_prefix, base_url)
        except (OSError, BotoCoreError, ClientError) as e:
            print("[WARN] upload failed:", path, e)
            result.failed += 1
            continue
        items = add_recording(items, path, link, cfg.topic_prefix)
        result.uploaded += 1

    store.save(items)
    result.saved = True
    print("updated", store.location)
    return result


def list_index(store, limit: int | None = None) -> None:
    items = store.load()
    if limit is not None:
        items = items[:limit]
    if not items:
        print("index is empty:", store.location)
        return
    for r in items:
        print(f"{r.start}  {r.topic:<24}  {r.file}  {r.link}")


def non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return n


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Upload finished .mp4 recordings to S3 and keep recordings.json up to date."
    )
    ap.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.json (default: $CONFIG_PATH or config.json next to this script).",
    )
    ap.add_argument("--list", action="store_true", help="Print the current index and exit.")
    ap.add_argument("--limit", type=non_negative_int, default=None, help="Max entries shown by --list.")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ConfigCreated as e:
        print("config.json created at", e.path)
        print("Fill in your values and run this program again.")
        return 0
    except ConfigError as e:
        print("[ERROR]", e, file=sys.stderr)
        return 1

    try:
        client = make_s3_client(cfg.region, cfg.aws_access_key_id, cfg.aws_secret_access_key)
        store = open_index_store(cfg, client)
        if args.list:
            list_index(store, args.limit)
            return 0
        result = run_sync(cfg, client, store)
    except (IndexFormatError, ScanError, OSError, BotoCoreError, ClientError) as e:
        print("[ERROR]", e, file=sys.stderr)
        return 1

    print(f"DONE: {result.uploaded} uploaded, {result.failed} failed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
