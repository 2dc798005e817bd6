from datetime import datetime
from typing import Optional, List, Dict

from pydantic import Field

from . import MetaBase

"""
Mojang index files look like this:
{
    "latest": {
        "release": "1.16.5",
        "snapshot": "21w10a"
    },
    "versions": [
        {
            "id": "1.16.5",
            "type": "release",
            "url": "https://piston-meta.mojang.com/v1/packages/.../1.16.5.json",
            "time": "2021-01-14T16:05:32+00:00",
            "releaseTime": "2021-01-14T16:05:32+00:00",
            "sha1": "...",
            "complianceLevel": 1
        },
        ...
    ]
}
"""


class MojangArtifactBase(MetaBase):
    sha1: Optional[str] = None
    size: Optional[int] = None
    url: str


class MojangLatestVersion(MetaBase):
    release: str
    snapshot: str


class MojangIndexEntry(MetaBase):
    id: str
    release_time: Optional[datetime] = Field(None, alias="releaseTime")
    time: Optional[datetime] = None
    type: Optional[str] = None
    url: str
    sha1: Optional[str] = None
    compliance_level: Optional[int] = Field(None, alias="complianceLevel")


class MojangIndex(MetaBase):
    latest: MojangLatestVersion
    versions: List[MojangIndexEntry]


class MojangIndexWrap:
    def __init__(self, index: MojangIndex):
        self.index = index
        self.latest = index.latest
        self.versions = dict((x.id, x) for x in index.versions)


class MojangVersion(MetaBase):
    """
    The per-version file. Only the downloads are of interest here:
        "downloads": {
            "client": {"sha1": "...", "size": 17547153, "url": "https://.../client.jar"},
            "client_mappings": {"sha1": "...", "size": 5746047, "url": "https://.../client.txt"},
            "server": {...},
            "server_mappings": {...}
        }
    """

    id: str
    downloads: Dict[str, MojangArtifactBase] = Field(default_factory=dict)
    release_time: Optional[datetime] = Field(None, alias="releaseTime")
    time: Optional[datetime] = None
    type: Optional[str] = None
