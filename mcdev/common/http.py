import hashlib

from . import atomic_target
from .errors import ResolutionError


def download_binary_file(sess, path, url, sha1=None):
    with atomic_target(path) as part_path:
        r = sess.get(url, stream=True)
        r.raise_for_status()
        digest = hashlib.sha1()
        with open(part_path, "wb") as f:
            for chunk in r.iter_content(chunk_size=65536):
                digest.update(chunk)
                f.write(chunk)

        if sha1 is not None and digest.hexdigest() != sha1:
            raise ResolutionError(
                f"SHA-1 mismatch for {url}: expected {sha1}, got {digest.hexdigest()}"
            )
