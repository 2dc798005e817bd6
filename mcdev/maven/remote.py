import requests

from ..common.errors import ResolutionError
from ..common.http import download_binary_file
from ..model import ArtifactCoordinate


class RemoteMavenRepository:
    def __init__(self, sess, base_url: str):
        if not base_url.endswith("/"):
            base_url += "/"
        self.sess = sess
        self.base_url = base_url

    def __repr__(self):
        return f"RemoteMavenRepository('{self.base_url}')"

    def artifact_url(self, coordinate: ArtifactCoordinate) -> str:
        return self.base_url + coordinate.path()

    def has(self, coordinate: ArtifactCoordinate) -> bool:
        url = self.artifact_url(coordinate)
        try:
            r = self.sess.head(url, allow_redirects=True)
        except requests.RequestException as e:
            raise ResolutionError(f"Failed to query {url} for {coordinate}: {e}") from e

        if r.status_code == 404:
            return False

        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            raise ResolutionError(f"Failed to query {url} for {coordinate}: {e}") from e
        return True

    def download(self, coordinate: ArtifactCoordinate, target_path):
        url = self.artifact_url(coordinate)
        try:
            download_binary_file(self.sess, target_path, url)
        except requests.RequestException as e:
            raise ResolutionError(f"Failed to download {coordinate} from {url}: {e}") from e
