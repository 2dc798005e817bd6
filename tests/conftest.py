import hashlib
import json
import shutil
import zipfile

import pytest
import requests

from mcdev.common.maven import MAVEN_CENTRAL
from mcdev.common.minecraft import MOJANG_VERSION_MANIFEST_URL
from mcdev.environment.functions import REMAPPER_TOOL


class FakeResponse:
    def __init__(self, url, status_code=200, content=b""):
        self.url = url
        self.status_code = status_code
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error for url: {self.url}", response=self)

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def json(self):
        return json.loads(self.content)


class FakeSession:
    """Serves a fixed set of URLs from memory and records every request."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.calls = []

    def _respond(self, url):
        if url not in self.files:
            return FakeResponse(url, 404)
        content = self.files[url]
        if isinstance(content, str):
            content = content.encode("utf-8")
        return FakeResponse(url, 200, content)

    def head(self, url, allow_redirects=False):
        self.calls.append(("HEAD", url))
        return self._respond(url)

    def get(self, url, stream=False):
        self.calls.append(("GET", url))
        return self._respond(url)


class FakeJava:
    """Stands in for the remapper: copies --in-jar to --out-jar."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def execute(self, jar, args, function=None, cwd=None):
        from mcdev.common.errors import DeobfuscationError

        self.calls.append((jar, list(args)))
        if self.fail:
            raise DeobfuscationError("java exited with code 1", function=function, path=jar)
        shutil.copyfile(args[args.index("--in-jar") + 1], args[args.index("--out-jar") + 1])
        return ""


def make_jar(path, entries):
    with zipfile.ZipFile(path, "w") as jar:
        for name, data in entries.items():
            jar.writestr(name, data)
    return path


def jar_bytes(tmp_path, name, entries):
    return make_jar(tmp_path / name, entries).read_bytes()


def jar_entries(path):
    with zipfile.ZipFile(path) as jar:
        return set(jar.namelist())


CLIENT_MAPPINGS = """\
# client mappings
net.minecraft.client.Minecraft -> a:
    java.lang.String VERSION -> a
    1:1:net.minecraft.client.Minecraft getInstance():100:100 -> b
net.minecraft.world.Block -> b:
    int id -> a
"""

SERVER_MAPPINGS = """\
net.minecraft.server.MinecraftServer -> a:
    boolean running -> a
    5:6:void tick(int[]) -> b
"""


@pytest.fixture
def minecraft_version_files(tmp_path):
    """A fake Mojang backend for version 1.16.5, keyed by URL."""
    client = jar_bytes(tmp_path, "client.jar", {
        "a.class": b"client-a",
        "b.class": b"client-b",
        "c.class": b"unmapped",
        "assets/minecraft/lang/en_us.json": b"{}",
        "assets/": b"",
    })
    server = jar_bytes(tmp_path, "server.jar", {
        "a.class": b"server-a",
        "d.class": b"unmapped",
    })
    downloads = {
        "client": ("https://launcher.test/client.jar", client),
        "server": ("https://launcher.test/server.jar", server),
        "client_mappings": ("https://launcher.test/client.txt", CLIENT_MAPPINGS.encode("utf-8")),
        "server_mappings": ("https://launcher.test/server.txt", SERVER_MAPPINGS.encode("utf-8")),
    }

    version_url = "https://meta.test/1.16.5.json"
    version = {
        "id": "1.16.5",
        "type": "release",
        "downloads": {
            key: {"url": url, "sha1": hashlib.sha1(data).hexdigest(), "size": len(data)}
            for key, (url, data) in downloads.items()
        },
    }
    index = {
        "latest": {"release": "1.16.5", "snapshot": "1.16.5"},
        "versions": [
            {
                "id": "1.16.5",
                "type": "release",
                "url": version_url,
                "time": "2021-01-14T16:05:32+00:00",
                "releaseTime": "2021-01-14T16:05:32+00:00",
            }
        ],
    }

    files = {url: data for url, data in downloads.values()}
    files[version_url] = json.dumps(version)
    files[MOJANG_VERSION_MANIFEST_URL] = json.dumps(index)
    files[MAVEN_CENTRAL + REMAPPER_TOOL.path()] = b"special source"
    return files


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("MCDEV_CACHE_DIR", "MCDEV_OUTPUT_DIR", "MCDEV_PROJECT_FILE", "MCDEV_OFFLINE",
                 "MCDEV_DISTRIBUTOR_CHANNEL"):
        monkeypatch.delenv(name, raising=False)
