import os
from typing import List, Optional, Tuple

from .common import cache_path, default_session, ensure_dir, is_offline
from .common.maven import ARTIFACT_URL_CACHE_FILE, DEFAULT_REPOSITORIES, INTERNAL_REPOSITORY_DIR
from .common.minecraft import CACHE_DIR, REPOSITORY_DIR, work_dir
from .environment import DeobfuscationUtilities, JavaExecutionHelper, default_environment
from .maven import MavenArtifactDownloader, MavenArtifactURLCache, SimpleMavenRepository
from .minecraft import MinecraftRepository


class BuildContext:
    """
    State shared by every project of one build.

    A single context is created at the top of a run and handed to each (sub-)project,
    so they all read and write the same URL cache and repositories.
    """

    def __init__(self, base_dir, session=None, offline: bool = False,
                 java: Optional[JavaExecutionHelper] = None, repositories: Optional[List[str]] = None):
        self.base_dir = ensure_dir(base_dir)
        self.offline = offline
        self.session = None if offline else session

        self.url_cache = MavenArtifactURLCache(
            os.path.join(self.base_dir, ARTIFACT_URL_CACHE_FILE), offline=offline
        )
        self.url_cache.setup()

        self.downloader = MavenArtifactDownloader(self.session, DEFAULT_REPOSITORIES)
        for url in repositories or []:
            self.downloader.add_repository(url)

        self.minecraft_repository = MinecraftRepository(
            os.path.join(self.base_dir, REPOSITORY_DIR),
            os.path.join(self.base_dir, CACHE_DIR),
            self.session,
        )
        self.internal_repository = SimpleMavenRepository(os.path.join(self.base_dir, INTERNAL_REPOSITORY_DIR))
        self.java = java or JavaExecutionHelper()

    @classmethod
    def from_environment(cls):
        offline = is_offline()
        return cls(cache_path(), session=None if offline else default_session(), offline=offline)

    def utilities(self) -> DeobfuscationUtilities:
        return DeobfuscationUtilities(
            self.downloader,
            self.minecraft_repository,
            self.internal_repository,
            self.session,
            self.url_cache,
            self.java,
        )

    def add_repositories(self, repositories):
        for url in repositories:
            self.downloader.add_repository(url)

    def setup_version(self, version: str) -> Tuple[List[str], List[str]]:
        """Returns the compile and runtime classpath of minecraft version, installing it if needed."""
        environment = default_environment(work_dir(os.path.join(self.base_dir, CACHE_DIR), version))
        return self.minecraft_repository.install(version, environment, self.utilities())

    def save(self):
        self.url_cache.save()
