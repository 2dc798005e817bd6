import os
from typing import Dict, List, Tuple

import requests
from pydantic import ValidationError

from ..common import eprint, ensure_dir
from ..common.errors import (
    ConfigurationError,
    DeobfuscationError,
    InstallationError,
    OfflineError,
    ResolutionError,
)
from ..common.http import download_binary_file
from ..common.minecraft import (
    MINECRAFT_GROUP,
    MOJANG_VERSION_MANIFEST_URL,
    VERSION_MANIFEST_FILE,
    version_file,
)
from ..maven.local import SimpleMavenRepository
from ..model import ArtifactCoordinate
from ..model.mojang import MojangIndex, MojangIndexWrap, MojangVersion

# Mojang download key -> (artifact, classifier, extension)
DOWNLOAD_COORDINATES = {
    "client": ("client", None, "jar"),
    "server": ("server", None, "jar"),
    "client_mappings": ("client", "mappings", "txt"),
    "server_mappings": ("server", "mappings", "txt"),
}


class MinecraftRepository(SimpleMavenRepository):
    """
    Local repository for everything under net.minecraft: the raw Mojang downloads
    and the artifacts produced by a deobfuscation environment.

    Version metadata is fetched from Mojang on demand and kept in cache_dir. With
    sess set to None the repository never touches the network.
    """

    def __init__(self, base_dir, cache_dir, sess=None):
        super().__init__(base_dir)
        self.cache_dir = ensure_dir(cache_dir)
        self.sess = sess
        self._versions: Dict[str, MojangVersion] = {}

    @property
    def offline(self) -> bool:
        return self.sess is None

    def _fetch_model(self, model, url):
        try:
            r = self.sess.get(url)
            r.raise_for_status()
            return model.model_validate(r.json())
        except requests.RequestException as e:
            raise ResolutionError(f"Failed to fetch {url}: {e}") from e
        except (ValidationError, ValueError) as e:
            raise ResolutionError(f"Invalid minecraft metadata from {url}: {e}") from e

    def version_index(self) -> MojangIndexWrap:
        index_path = os.path.join(self.cache_dir, VERSION_MANIFEST_FILE)
        if self.offline:
            if not os.path.isfile(index_path):
                raise OfflineError(f"Minecraft version index {index_path} is not cached and running offline")
            try:
                return MojangIndexWrap(MojangIndex.parse_file(index_path))
            except (ValidationError, ValueError) as e:
                raise ConfigurationError(f"Corrupt minecraft version index {index_path}: {e}") from e

        index = self._fetch_model(MojangIndex, MOJANG_VERSION_MANIFEST_URL)
        index.write(index_path)
        return MojangIndexWrap(index)

    def version(self, version: str) -> MojangVersion:
        if version in self._versions:
            return self._versions[version]

        path = version_file(self.cache_dir, version)
        if os.path.isfile(path):
            try:
                self._versions[version] = MojangVersion.parse_file(path)
                return self._versions[version]
            except (ValidationError, ValueError) as e:
                raise ConfigurationError(f"Corrupt minecraft version file {path}: {e}") from e

        if self.offline:
            raise OfflineError(f"Minecraft version {version} is not cached in {path} and running offline")

        index = self.version_index()
        if version not in index.versions:
            raise ResolutionError(f"Unknown minecraft version {version}")

        eprint("Fetching minecraft version %s" % version)
        data = self._fetch_model(MojangVersion, index.versions[version].url)
        data.write(path)
        self._versions[version] = data
        return data

    @staticmethod
    def download_coordinate(version: str, key: str) -> ArtifactCoordinate:
        try:
            artifact, classifier, extension = DOWNLOAD_COORDINATES[key]
        except KeyError:
            raise ConfigurationError(f"Unsupported minecraft download {key}") from None
        return ArtifactCoordinate(MINECRAFT_GROUP, artifact, version, classifier, extension)

    def install_download(self, version: str, key: str) -> str:
        coordinate = self.download_coordinate(version, key)
        path = self.path_for(coordinate)
        if self.is_installed(coordinate):
            return path

        if self.offline:
            raise OfflineError(f"{coordinate} is not installed and can't be downloaded while running offline")

        download = self.version(version).downloads.get(key)
        if download is None:
            raise ResolutionError(f"Minecraft version {version} has no {key} download")

        eprint("Downloading %s from %s" % (coordinate, download.url))
        try:
            download_binary_file(self.sess, path, download.url, download.sha1)
        except requests.RequestException as e:
            raise ResolutionError(f"Failed to download {coordinate} from {download.url}: {e}") from e
        return path

    def install(self, version: str, environment, utilities) -> Tuple[List[str], List[str]]:
        """
        Makes sure the compile and runtime artifacts of version exist and returns
        their paths. Nothing is downloaded or run if they are all installed already.
        """
        compile_artifacts = environment.compile_artifacts(version)
        runtime_artifacts = environment.runtime_artifacts(version)
        wanted = dict(compile_artifacts)
        wanted.update(runtime_artifacts)

        if not self.all_installed(wanted.values()):
            eprint("Setting up minecraft %s with environment %s" % (version, environment.name))
            environment.validate()
            try:
                seed_paths = {
                    kind: self.install_download(version, key)
                    for kind, key in environment.seeds.items()
                }
                produced = environment.run(utilities, seed_paths)
            except (ResolutionError, DeobfuscationError) as e:
                raise InstallationError(version, e) from e

            # register results only once the whole chain went through
            for kind, coordinate in wanted.items():
                self.store_file(coordinate, produced[kind])

        return (
            [self.path_for(c) for c in compile_artifacts.values()],
            [self.path_for(c) for c in runtime_artifacts.values()],
        )
