import contextlib
import os
import os.path
import sys
import threading
from typing import Optional

import requests
from cachecontrol import CacheControl  # type: ignore
from cachecontrol.caches import FileCache  # type: ignore

LIBRARY_DIR = "${LIBRARY_DIR}"
PACKAGE_DIR = "${PACKAGE_DIR}"
DISTRIBUTOR_URL = "${DISTRIBUTOR_URL}"

DEFAULT_CHANNEL = "development"


def eprint(*args, **kwargs):
    print(*args, file=sys.stderr, **kwargs)


def warn(message: str):
    eprint(f"Warning: {message}")


def cache_path():
    if "MCDEV_CACHE_DIR" in os.environ:
        return os.environ["MCDEV_CACHE_DIR"]
    return "cache"


def output_path():
    if "MCDEV_OUTPUT_DIR" in os.environ:
        return os.environ["MCDEV_OUTPUT_DIR"]
    return "build"


def project_file_name():
    if "MCDEV_PROJECT_FILE" in os.environ:
        return os.environ["MCDEV_PROJECT_FILE"]
    return "mcdev.json"


def is_offline() -> bool:
    return os.environ.get("MCDEV_OFFLINE", "").lower() in ("1", "true", "yes")


def distributor_channel() -> Optional[str]:
    return os.environ.get("MCDEV_DISTRIBUTOR_CHANNEL") or None


def ensure_dir(path):
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)
    return path


def default_session():
    forever_cache = FileCache(os.path.join(cache_path(), "http_cache"), forever=True)
    sess = CacheControl(requests.Session(), forever_cache)

    sess.headers.update({"User-Agent": "mcdev/1.0"})

    return sess


def filehash(filename, hashtype, blocksize=65536):
    hashtype = hashtype()
    with open(filename, "rb") as f:
        for block in iter(lambda: f.read(blocksize), b""):
            hashtype.update(block)
    return hashtype.hexdigest()


@contextlib.contextmanager
def atomic_target(destination):
    """
    Yields a temporary '.part' path next to destination. The part file replaces
    destination only if the block completes, so readers never observe a partial file.
    """
    parent = os.path.dirname(destination)
    if parent:
        ensure_dir(parent)
    part_path = f"{destination}.{os.getpid()}-{threading.get_ident()}.part"
    try:
        yield part_path
        os.replace(part_path, destination)
    finally:
        if os.path.exists(part_path):
            os.remove(part_path)
