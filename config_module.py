# config_module.py
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path


CONFIG_ENV = "CONFIG_PATH"
CONFIG_NAME = "config.json"
DEFAULT_INDEX_KEY = "recordings.json"
DEFAULT_VIDEO_PREFIX = "level1"
DEFAULT_TOPIC_PREFIX = "Class"

# Written on first run; the operator fills it in and runs again.
CONFIG_TEMPLATE = {
    "watchDir": "/path/to/zoom/recordings",
    "bucket": "codex-recordings-yourname",
    "region": "us-east-1",
    "videoPrefix": "level1",
    "baseUrl": "",
    "topicPrefix": "Level 1",
    "awsAccessKeyId": "YOUR_ACCESS_KEY_ID",
    "awsSecretAccessKey": "YOUR_SECRET_ACCESS_KEY",
}


class ConfigError(Exception):
    pass


class ConfigCreated(Exception):
    """Raised after a fresh config template was written to `path`."""

    def __init__(self, path: Path):
        super().__init__(f"config template created at {path}")
        self.path = path


@dataclass
class AppConfig:
    watch_dir: Path
    bucket: str
    region: str
    video_prefix: str = DEFAULT_VIDEO_PREFIX
    base_url: str = ""
    topic_prefix: str = DEFAULT_TOPIC_PREFIX
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    json_path: Path | None = None
    index_key: str = DEFAULT_INDEX_KEY

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        if not isinstance(data, dict):
            raise ConfigError("config must be a JSON object")

        watch_dir = _text(data, "watchDir")
        bucket = _text(data, "bucket")
        region = _text(data, "region")
        if not watch_dir or not bucket or not region:
            raise ConfigError("watchDir, bucket, and region are required in config")

        # videoPrefix wins over the older "prefix" key; an explicit "" means no prefix.
        if "videoPrefix" in data:
            video_prefix = _text(data, "videoPrefix")
        elif "prefix" in data:
            video_prefix = _text(data, "prefix")
        else:
            video_prefix = DEFAULT_VIDEO_PREFIX

        access_key_id = _text(data, "awsAccessKeyId")
        secret_access_key = _text(data, "awsSecretAccessKey")
        if bool(access_key_id) != bool(secret_access_key):
            raise ConfigError("awsAccessKeyId and awsSecretAccessKey must be set together")

        json_path = _text(data, "jsonPath")

        return cls(
            watch_dir=Path(watch_dir).expanduser(),
            bucket=bucket,
            region=region,
            video_prefix=video_prefix,
            base_url=_text(data, "baseUrl"),
            topic_prefix=_text(data, "topicPrefix") or DEFAULT_TOPIC_PREFIX,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            json_path=Path(json_path).expanduser() if json_path else None,
            index_key=_text(data, "indexKey") or DEFAULT_INDEX_KEY,
        )


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value.strip()


def default_config_path() -> Path:
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    # Next to the program being run (the console script or sync_recordings.py).
    return Path(sys.argv[0]).resolve().parent / CONFIG_NAME


def write_template(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps(CONFIG_TEMPLATE, indent=2)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as handle:
        handle.write(data)


def load_config(path: Path | None = None) -> AppConfig:
    """
    Read the JSON config at `path` (or the default location).

    A missing file is replaced by a template and ConfigCreated is raised
    so the caller can tell the operator to fill it in.
    """
    path = path or default_config_path()

    if not path.exists():
        try:
            write_template(path)
        except OSError as e:
            raise ConfigError(f"cannot write config template {path}: {e}") from e
        raise ConfigCreated(path)

    try:
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"config {path} is not valid JSON: {e}") from e

    return AppConfig.from_dict(data)
