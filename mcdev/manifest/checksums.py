import hashlib
import os
from typing import Dict, Iterable, Optional

import requests
from pydantic import ValidationError

from ..common import eprint, filehash
from ..common.errors import ConfigurationError, OfflineError, ResolutionError
from ..model.cache import ChecksumIndex, ChecksumRecord
from ..model.project import StaticFileDescription


class StaticFileChecksums:
    """SHA-256 checksums of static files, keyed by StaticFileDescription.identity()."""

    def __init__(self, records: Optional[Dict[str, ChecksumRecord]] = None):
        self.records: Dict[str, ChecksumRecord] = dict(records or {})

    def has(self, identity: str) -> bool:
        return identity in self.records

    def get(self, identity: str) -> str:
        return self.records[identity].sha256

    def record(self, identity: str) -> Optional[ChecksumRecord]:
        return self.records.get(identity)

    def put(self, identity: str, record: ChecksumRecord):
        self.records[identity] = record

    @classmethod
    def load(cls, path):
        if not os.path.isfile(path):
            raise ConfigurationError(f"Missing static file checksum cache {path}")
        try:
            return cls(ChecksumIndex.parse_file(path).files)
        except (ValidationError, ValueError) as e:
            raise ConfigurationError(f"Corrupt static file checksum cache {path}: {e}") from e

    @classmethod
    def load_or_empty(cls, path):
        if not os.path.isfile(path):
            return cls()
        return cls.load(path)

    def save(self, path):
        ChecksumIndex(files=dict(sorted(self.records.items()))).write(path)


def hash_remote_file(sess, url):
    digest = hashlib.sha256()
    size = 0
    try:
        r = sess.get(url, stream=True)
        r.raise_for_status()
        for chunk in r.iter_content(chunk_size=65536):
            digest.update(chunk)
            size += len(chunk)
    except requests.RequestException as e:
        raise ResolutionError(f"Failed to download static file {url}: {e}") from e
    return ChecksumRecord(sha256=digest.hexdigest(), size=size)


def compute_static_checksums(static_files: Iterable[StaticFileDescription], project_dir,
                             checksums: StaticFileChecksums, sess=None) -> StaticFileChecksums:
    """
    Makes sure checksums holds a record for every static file.

    Local files are hashed again only when their size or modification time changed.
    Remote files are hashed once; the record for a URL is trusted from then on.
    """
    for static_file in static_files:
        identity = static_file.identity(project_dir)
        known = checksums.record(identity)

        if static_file.is_remote:
            if known is not None:
                continue
            if sess is None:
                raise OfflineError(
                    f"Static file {static_file.source_url} has no cached checksum and running offline"
                )
            eprint("Hashing static file %s" % static_file.source_url)
            checksums.put(identity, hash_remote_file(sess, static_file.source_url))
            continue

        path = static_file.source_path(project_dir)
        if not os.path.isfile(path):
            raise ConfigurationError(f"Static file {path} does not exist")

        stat = os.stat(path)
        if known is not None and known.size == stat.st_size and known.modified == stat.st_mtime:
            continue

        eprint("Hashing static file %s" % path)
        checksums.put(
            identity,
            ChecksumRecord(sha256=filehash(path, hashlib.sha256), size=stat.st_size, modified=stat.st_mtime),
        )

    return checksums
