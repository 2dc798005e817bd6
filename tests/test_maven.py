import os
import threading

import pytest

from conftest import FakeSession
from mcdev.common.errors import (
    ArtifactNotFoundError,
    ConfigurationError,
    OfflineError,
    ResolutionError,
)
from mcdev.maven import MavenArtifactDownloader, MavenArtifactURLCache, SimpleMavenRepository
from mcdev.maven.cache import read_url_index
from mcdev.model import ArtifactCoordinate

FIRST = "https://first.test/maven/"
SECOND = "https://second.test/maven/"
GSON = ArtifactCoordinate("com.google.code.gson", "gson", "2.8.6")


@pytest.fixture
def cache_file(tmp_path):
    return str(tmp_path / "cache" / "maven-artifact-urls.json")


def test_resolution_falls_back_to_later_sources(cache_file):
    sess = FakeSession({SECOND + GSON.path(): b"jar"})
    downloader = MavenArtifactDownloader(sess, [FIRST, SECOND])
    cache = MavenArtifactURLCache(cache_file)

    assert cache.resolve(GSON, downloader) == SECOND
    assert cache.get(GSON) == SECOND
    assert sess.calls == [("HEAD", FIRST + GSON.path()), ("HEAD", SECOND + GSON.path())]


def test_cached_resolution_skips_network(cache_file):
    sess = FakeSession()
    cache = MavenArtifactURLCache(cache_file)
    cache.put(GSON, SECOND)

    assert cache.resolve(GSON, MavenArtifactDownloader(sess, [FIRST])) == SECOND
    assert sess.calls == []


def test_not_found_anywhere(cache_file):
    downloader = MavenArtifactDownloader(FakeSession(), [FIRST, SECOND])
    cache = MavenArtifactURLCache(cache_file)

    with pytest.raises(ArtifactNotFoundError) as excinfo:
        cache.resolve(GSON, downloader)
    assert excinfo.value.coordinate == GSON
    assert str(GSON) in str(excinfo.value)
    assert GSON not in cache


def test_server_errors_are_resolution_errors():
    class BrokenSession(FakeSession):
        def head(self, url, allow_redirects=False):
            response = super().head(url, allow_redirects)
            response.status_code = 500
            return response

    downloader = MavenArtifactDownloader(BrokenSession(), [FIRST])
    with pytest.raises(ResolutionError):
        downloader.resolve(GSON)


def test_offline_resolution_fails_fast(cache_file):
    downloader = MavenArtifactDownloader(None, [FIRST])
    cache = MavenArtifactURLCache(cache_file, offline=True)
    cache.setup()

    assert downloader.sources == []
    with pytest.raises(ConfigurationError):
        cache.resolve(GSON, downloader)
    with pytest.raises(OfflineError):
        downloader.resolve(GSON)


def test_missing_cache_file_is_empty(cache_file):
    cache = MavenArtifactURLCache(cache_file)
    cache.setup()
    assert len(cache) == 0


def test_corrupt_cache_file_is_fatal(cache_file):
    MavenArtifactURLCache(cache_file)
    with open(cache_file, "w") as f:
        f.write("{not json")

    with pytest.raises(ConfigurationError) as excinfo:
        MavenArtifactURLCache(cache_file).setup()
    assert cache_file in str(excinfo.value)


def test_save_merges_with_other_writers(cache_file):
    first = MavenArtifactURLCache(cache_file)
    second = MavenArtifactURLCache(cache_file)
    first.setup()
    second.setup()

    first.put(GSON, FIRST)
    second.put(GSON.with_classifier("sources"), SECOND)
    first.save()
    second.save()

    assert read_url_index(cache_file) == {GSON: FIRST, GSON.with_classifier("sources"): SECOND}


def test_concurrent_puts_and_saves_keep_every_entry(cache_file):
    cache = MavenArtifactURLCache(cache_file)
    coordinates = [ArtifactCoordinate("org.example", f"lib{i}", "1.0") for i in range(50)]

    def worker(chunk):
        for coordinate in chunk:
            cache.put(coordinate, FIRST)
            cache.save()

    threads = [threading.Thread(target=worker, args=(coordinates[i::5],)) for i in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert set(read_url_index(cache_file)) == set(coordinates)
    assert not [name for name in os.listdir(os.path.dirname(cache_file)) if name.endswith(".part")]


def test_clear(cache_file):
    cache = MavenArtifactURLCache(cache_file)
    cache.put(GSON, FIRST)
    cache.save()
    cache.clear()

    assert not os.path.exists(cache_file)
    assert GSON not in cache


def test_store_is_atomic_and_never_rewrites(tmp_path):
    repository = SimpleMavenRepository(str(tmp_path))
    assert not repository.is_installed(GSON)

    path = repository.store(GSON, b"first")
    assert repository.is_installed(GSON)
    repository.store(GSON, b"second")

    with open(path, "rb") as f:
        assert f.read() == b"first"
    assert os.listdir(os.path.dirname(path)) == [GSON.filename()]


def test_failed_write_leaves_nothing_installed(tmp_path):
    repository = SimpleMavenRepository(str(tmp_path))
    with pytest.raises(RuntimeError):
        with repository.target(GSON) as part_path:
            with open(part_path, "wb") as f:
                f.write(b"partial")
            raise RuntimeError("interrupted")

    assert not repository.is_installed(GSON)
    assert os.listdir(os.path.dirname(repository.path_for(GSON))) == []


def test_install_records_location_after_download(tmp_path, cache_file):
    sess = FakeSession({SECOND + GSON.path(): b"jar"})
    downloader = MavenArtifactDownloader(sess, [FIRST, SECOND])
    cache = MavenArtifactURLCache(cache_file)
    repository = SimpleMavenRepository(str(tmp_path / "repo"))

    path = downloader.install(GSON, repository, cache)
    with open(path, "rb") as f:
        assert f.read() == b"jar"
    assert cache.get(GSON) == SECOND

    calls = len(sess.calls)
    assert downloader.install(GSON, repository, cache) == path
    assert len(sess.calls) == calls


def test_failed_download_records_nothing(tmp_path, cache_file):
    class FlakySession(FakeSession):
        def get(self, url, stream=False):
            self.calls.append(("GET", url))
            return self._respond("https://nowhere.test/")

    downloader = MavenArtifactDownloader(FlakySession({FIRST + GSON.path(): b"jar"}), [FIRST])
    cache = MavenArtifactURLCache(cache_file)
    repository = SimpleMavenRepository(str(tmp_path / "repo"))

    with pytest.raises(ResolutionError):
        downloader.install(GSON, repository, cache)
    assert GSON not in cache
    assert not repository.is_installed(GSON)
