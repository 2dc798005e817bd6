from .cache import MavenArtifactURLCache
from .downloader import MavenArtifactDownloader
from .local import SimpleMavenRepository
from .remote import RemoteMavenRepository

__all__ = [
    "MavenArtifactURLCache",
    "MavenArtifactDownloader",
    "SimpleMavenRepository",
    "RemoteMavenRepository",
]
