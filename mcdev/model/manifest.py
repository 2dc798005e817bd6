from typing import Optional, List, Any, Union, Literal, Annotated

from pydantic import Field

from . import MetaBase
from .enum import StrEnum


class OperatingSystem(StrEnum):
    Windows = "WINDOWS"
    OSX = "OSX"
    Linux = "LINUX"
    Unknown = "UNKNOWN"  # any operating system


class JsonInjectionOverrideType(StrEnum):
    Replace = "REPLACE"
    Keep = "KEEP"
    Fail = "FAIL"


class ModifyJsonArrayInjection(MetaBase):
    type: Literal["MODIFY_ARRAY"] = "MODIFY_ARRAY"
    override_type: JsonInjectionOverrideType = Field(alias="overrideType")
    path: List[str]
    injection: Any = None


class ModifyJsonObjectInjection(MetaBase):
    type: Literal["MODIFY_OBJECT"] = "MODIFY_OBJECT"
    override_type: JsonInjectionOverrideType = Field(alias="overrideType")
    path: List[str]
    key: str
    injection: Any = None


JsonInjection = Annotated[
    Union[ModifyJsonArrayInjection, ModifyJsonObjectInjection],
    Field(discriminator="type"),
]


class DownloadMavenDependencyData(MetaBase):
    group: str
    name: str
    version: str
    classifier: Optional[str] = None
    repository: str
    path: str


class DownloadFileData(MetaBase):
    url: str
    path: str
    sha256: str


class ModifyJsonFileData(MetaBase):
    path: str
    pretty_print: bool = Field(alias="prettyPrint")
    injections: List[JsonInjection]


class DownloadMavenDependencyInstruction(MetaBase):
    type: Literal["DOWNLOAD_MAVEN_DEPENDENCY"] = "DOWNLOAD_MAVEN_DEPENDENCY"
    os: Optional[OperatingSystem] = None
    data: DownloadMavenDependencyData


class DownloadFileInstruction(MetaBase):
    type: Literal["DOWNLOAD_FILE"] = "DOWNLOAD_FILE"
    os: Optional[OperatingSystem] = None
    data: DownloadFileData


class ModifyJsonFileInstruction(MetaBase):
    type: Literal["MODIFY_JSON_FILE"] = "MODIFY_JSON_FILE"
    os: Optional[OperatingSystem] = None
    data: ModifyJsonFileData


InstallInstruction = Annotated[
    Union[DownloadMavenDependencyInstruction, DownloadFileInstruction, ModifyJsonFileInstruction],
    Field(discriminator="type"),
]


class PackageDependency(MetaBase):
    name: str
    version: str
    channel: str


class PackageManifest(MetaBase):
    group: str
    name: str
    description: str
    version: str
    channel: str
    minecraft_versions: str = Field(alias="minecraftVersions")
    system_version: str = Field(alias="systemVersion")
    authors: List[str] = Field(default_factory=list)
    dependencies: List[PackageDependency] = Field(default_factory=list)
    runtime_classpath: List[str] = Field(default_factory=list, alias="runtimeClasspath")
    install_instructions: List[InstallInstruction] = Field(default_factory=list, alias="installInstructions")
