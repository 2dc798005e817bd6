import json
from typing import Optional, Dict, Any

import pydantic
from pydantic import ConfigDict, Field, field_validator
from pydantic_core import core_schema

from ..common import atomic_target

META_FORMAT_VERSION = 1


class ArtifactCoordinate:
    """
        A maven coordinate. Like one of these:
        "net.minecraft:client:1.16.5"
        "net.md-5:SpecialSource:1.11.0:shaded"
        "net.minecraft:client:1.16.5:mappings@txt"

        Coordinates are immutable and compare equal when every component does.
    """

    __slots__ = ("group", "artifact", "version", "classifier", "extension")

    def __init__(self, group: str, artifact: str, version: str, classifier: Optional[str] = None,
                 extension: Optional[str] = None):
        if extension is None:
            extension = "jar"
        object.__setattr__(self, "group", group)
        object.__setattr__(self, "artifact", artifact)
        object.__setattr__(self, "version", version)
        object.__setattr__(self, "classifier", classifier or None)
        object.__setattr__(self, "extension", extension)

    def __setattr__(self, key, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, key):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __str__(self):
        ext = ''
        if self.extension != 'jar':
            ext = "@%s" % self.extension
        if self.classifier:
            return "%s:%s:%s:%s%s" % (self.group, self.artifact, self.version, self.classifier, ext)
        else:
            return "%s:%s:%s%s" % (self.group, self.artifact, self.version, ext)

    def __repr__(self):
        return f"ArtifactCoordinate('{self}')"

    def filename(self):
        if self.classifier:
            return "%s-%s-%s.%s" % (self.artifact, self.version, self.classifier, self.extension)
        else:
            return "%s-%s.%s" % (self.artifact, self.version, self.extension)

    def base(self):
        return "%s/%s/%s/" % (self.group.replace('.', '/'), self.artifact, self.version)

    def path(self):
        return self.base() + self.filename()

    def with_classifier(self, classifier: Optional[str], extension: Optional[str] = None):
        return ArtifactCoordinate(self.group, self.artifact, self.version, classifier,
                                  extension or self.extension)

    def _key(self):
        return self.group, self.artifact, self.version, self.classifier, self.extension

    def __eq__(self, other):
        if not isinstance(other, ArtifactCoordinate):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __lt__(self, other):
        return str(self) < str(other)

    def __gt__(self, other):
        return str(self) > str(other)

    @classmethod
    def from_string(cls, v: str):
        ext_split = v.split('@')
        if len(ext_split) > 2:
            raise ValueError(f"Invalid artifact coordinate {v!r}")

        components = ext_split[0].split(':')
        if len(components) not in (3, 4) or not all(components):
            raise ValueError(f"Invalid artifact coordinate {v!r}")
        group = components[0]
        artifact = components[1]
        version = components[2]

        extension = None
        if len(ext_split) == 2:
            extension = ext_split[1]

        classifier = None
        if len(components) == 4:
            classifier = components[3]
        return cls(group, artifact, version, classifier, extension)

    @classmethod
    def validate(cls, v):
        if isinstance(v, cls):
            return v
        if isinstance(v, str):
            return cls.from_string(v)
        raise ValueError(f"Invalid artifact coordinate {v!r}")

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return core_schema.no_info_plain_validator_function(
            cls.validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


class MetaBase(pydantic.BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, indent=4)

    def write(self, file_path):
        with atomic_target(file_path) as part_path:
            with open(part_path, "w", encoding="utf-8") as f:
                f.write(self.json())

    @classmethod
    def parse_file(cls, file_path):
        with open(file_path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())

    def __hash__(self):
        return hash(self.json())


class Versioned(MetaBase):
    @field_validator("format_version")
    @classmethod
    def format_version_must_be_supported(cls, v):
        assert v <= META_FORMAT_VERSION
        return v

    format_version: int = Field(META_FORMAT_VERSION, alias="formatVersion")
