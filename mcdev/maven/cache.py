import os
import threading
from typing import Dict, Optional

from filelock import FileLock
from pydantic import ValidationError

from ..common import ensure_dir
from ..common.errors import ConfigurationError, OfflineError
from ..model import ArtifactCoordinate
from ..model.cache import ArtifactURLIndex


def read_url_index(cache_file) -> Dict[ArtifactCoordinate, str]:
    """
    Reads a persisted URL index. A missing file is empty; an unreadable one is a
    configuration error since silently dropping it would hide verified resolutions.
    """
    if not os.path.isfile(cache_file):
        return {}

    try:
        index = ArtifactURLIndex.parse_file(cache_file)
        return {
            ArtifactCoordinate.from_string(key): url
            for key, url in index.artifacts.items()
        }
    except (ValidationError, ValueError, OSError) as e:
        raise ConfigurationError(f"Corrupt maven artifact URL cache {cache_file}: {e}") from e


def write_url_index(cache_file, urls: Dict[ArtifactCoordinate, str]):
    index = ArtifactURLIndex(artifacts={str(k): v for k, v in sorted(urls.items())})
    index.write(cache_file)


class MavenArtifactURLCache:
    """
    Remembers which repository served each coordinate.

    One instance is shared by every project of a build. Entries never expire: the
    content at a fixed coordinate is assumed immutable.
    """

    def __init__(self, cache_file, offline: bool = False):
        self.cache_file = cache_file
        if os.path.dirname(cache_file):
            ensure_dir(os.path.dirname(cache_file))
        self.offline = offline
        self._lock = threading.RLock()
        self._urls: Dict[ArtifactCoordinate, str] = {}

    def setup(self):
        self.load()

    def load(self):
        urls = read_url_index(self.cache_file)
        with self._lock:
            self._urls = urls

    def get(self, coordinate: ArtifactCoordinate) -> Optional[str]:
        with self._lock:
            return self._urls.get(coordinate)

    def put(self, coordinate: ArtifactCoordinate, url: str):
        with self._lock:
            self._urls[coordinate] = url

    def __contains__(self, coordinate):
        with self._lock:
            return coordinate in self._urls

    def __len__(self):
        with self._lock:
            return len(self._urls)

    def resolve(self, coordinate: ArtifactCoordinate, downloader, record: bool = True) -> str:
        cached = self.get(coordinate)
        if cached is not None:
            return cached

        if self.offline:
            raise OfflineError(
                f"No cached repository URL for {coordinate} in {self.cache_file} and running offline"
            )

        url = downloader.resolve(coordinate)
        if record:
            self.put(coordinate, url)
        return url

    def clear(self):
        with self._lock:
            self._urls = {}
        with FileLock(self.cache_file + ".lock"):
            if os.path.exists(self.cache_file):
                os.remove(self.cache_file)

    def save(self):
        with self._lock, FileLock(self.cache_file + ".lock"):
            # another process may have saved since we loaded
            merged = read_url_index(self.cache_file)
            merged.update(self._urls)
            write_url_index(self.cache_file, merged)
            self._urls = merged
