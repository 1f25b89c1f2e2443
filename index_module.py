# index_module.py
import json
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path

from botocore.exceptions import ClientError


INDEX_CONTENT_TYPE = "application/json"


class IndexFormatError(Exception):
    pass


@dataclass
class Recording:
    # Field order here is the order written to the index document.
    id: str
    level: str
    topic: str
    start: str
    duration: str
    link: str
    file: str

    @classmethod
    def from_dict(cls, data: dict) -> "Recording":
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is None:
                value = ""
            elif not isinstance(value, str):
                raise IndexFormatError(f"index field {f.name!r} must be a string, got {value!r}")
            values[f.name] = value
        return cls(**values)


def parse_index(text: str | bytes) -> list[Recording]:
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except ValueError as e:
        raise IndexFormatError(f"index is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise IndexFormatError("index must be a JSON array")

    items = []
    for pos, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise IndexFormatError(f"index entry {pos} is not an object")
        items.append(Recording.from_dict(entry))
    return items


def dumps_index(items: list[Recording]) -> str:
    return json.dumps([asdict(r) for r in items], indent=2)


def known_files(items: list[Recording]) -> set[str]:
    return {r.file for r in items if r.file}


def sort_recordings(items: list[Recording]) -> list[Recording]:
    return sorted(items, key=lambda r: r.start, reverse=True)


def add_recording(items: list[Recording], file_path: Path, link: str, topic_prefix: str) -> list[Recording]:
    """
    Append a record for an uploaded file and return the list, newest first.

    The file is stat'ed again here; if that fails the list is returned as-is.
    """
    try:
        info = file_path.stat()
    except OSError as e:
        print("[WARN] stat error after upload:", e)
        return items

    modified = datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)
    local_date = datetime.fromtimestamp(info.st_mtime).strftime("%Y-%m-%d")

    record = Recording(
        id=file_path.name,
        level=topic_prefix,
        topic=f"{topic_prefix} {local_date}",
        start=modified.strftime("%Y-%m-%dT%H:%M:%SZ"),
        duration="",
        link=link,
        file=file_path.name,
    )
    return sort_recordings(items + [record])


class LocalIndexStore:
    """Index kept in a local JSON file, replaced atomically on save."""

    def __init__(self, path: Path):
        self.path = path

    @property
    def location(self) -> str:
        return str(self.path)

    def load(self) -> list[Recording]:
        if not self.path.exists():
            return []
        return parse_index(self.path.read_bytes())

    def save(self, items: list[Recording]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(dumps_index(items))
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class S3IndexStore:
    """Index kept as a single object in the bucket, overwritten on save."""

    def __init__(self, client, bucket: str, key: str):
        self.client = client
        self.bucket = bucket
        self.key = key

    @property
    def location(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def load(self) -> list[Recording]:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=self.key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("NoSuchKey", "404", "NotFound"):
                print("no existing index at", self.key, "starting with empty list")
                return []
            raise
        body = resp["Body"].read()
        return parse_index(body)

    def save(self, items: list[Recording]) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=self.key,
            Body=dumps_index(items).encode("utf-8"),
            ContentType=INDEX_CONTENT_TYPE,
        )
