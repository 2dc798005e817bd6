from typing import List, Optional

from .remote import RemoteMavenRepository
from ..common import eprint
from ..common.errors import ArtifactNotFoundError, OfflineError
from ..model import ArtifactCoordinate


class MavenArtifactDownloader:
    """
    Looks up coordinates in an ordered list of remote repositories.

    The downloader itself never writes the resolved-URL cache; install() records a
    location only after the artifact has been stored successfully.
    """

    def __init__(self, sess=None, repositories: Optional[List[str]] = None):
        self.sess = sess
        self.sources: List[RemoteMavenRepository] = []
        for url in repositories or []:
            self.add_repository(url)

    @property
    def offline(self) -> bool:
        return self.sess is None

    def add_source(self, source: RemoteMavenRepository):
        if any(s.base_url == source.base_url for s in self.sources):
            return
        self.sources.append(source)

    def add_repository(self, url: str):
        if self.sess is None:
            return
        self.add_source(RemoteMavenRepository(self.sess, url))

    def source_for(self, base_url: str) -> RemoteMavenRepository:
        for source in self.sources:
            if source.base_url == base_url:
                return source
        return RemoteMavenRepository(self.sess, base_url)

    def resolve(self, coordinate: ArtifactCoordinate) -> str:
        """Returns the base URL of the first repository that has the coordinate."""
        if self.offline:
            raise OfflineError(f"Can't resolve {coordinate} while running offline")

        for source in self.sources:
            if source.has(coordinate):
                return source.base_url

        raise ArtifactNotFoundError(coordinate, [s.base_url for s in self.sources])

    def install(self, coordinate: ArtifactCoordinate, repository, url_cache) -> str:
        if repository.is_installed(coordinate):
            return repository.path_for(coordinate)

        if self.offline:
            raise OfflineError(f"{coordinate} is not installed and can't be downloaded while running offline")

        base_url = url_cache.resolve(coordinate, self, record=False)
        eprint("Downloading %s from %s" % (coordinate, base_url))
        with repository.target(coordinate) as part_path:
            self.source_for(base_url).download(coordinate, part_path)

        url_cache.put(coordinate, base_url)
        return repository.path_for(coordinate)
