import os
from typing import Optional, List, Any, Tuple

from pydantic import Field, ValidationError, model_validator

from . import MetaBase, ArtifactCoordinate
from .enum import StrEnum
from .manifest import (
    OperatingSystem,
    JsonInjectionOverrideType,
    ModifyJsonArrayInjection,
    ModifyJsonObjectInjection,
)
from ..common import DEFAULT_CHANNEL, distributor_channel, project_file_name
from ..common.errors import ConfigurationError


class ProjectType(StrEnum):
    Library = "library"
    Package = "package"


class JsonInjectionType(StrEnum):
    ModifyArray = "MODIFY_ARRAY"
    ModifyObject = "MODIFY_OBJECT"


class StaticFileDescription(MetaBase):
    """
    A file installed verbatim, either downloaded from sourceUrl or shipped from sourceFile:
        {
            "name": "natives",
            "sourceUrl": "https://example.org/natives-windows.jar",
            "target": "${LIBRARY_DIR}/natives/natives-windows.jar",
            "os": "WINDOWS"
        }
    """

    name: Optional[str] = None
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    source_file: Optional[str] = Field(None, alias="sourceFile")
    target: str
    os: OperatingSystem = OperatingSystem.Unknown

    @model_validator(mode="after")
    def exactly_one_source(self):
        if (self.source_url is None) == (self.source_file is None):
            raise ValueError(
                f"Static file {self.name or self.target} needs exactly one of sourceUrl and sourceFile"
            )
        return self

    @property
    def is_remote(self) -> bool:
        return self.source_url is not None

    def source_path(self, project_dir) -> str:
        return os.path.abspath(os.path.join(project_dir, self.source_file))

    def identity(self, project_dir) -> str:
        if self.is_remote:
            return self.source_url
        return "file:" + self.source_path(project_dir)


class JsonInjectionDescription(MetaBase):
    file: str
    pretty_print: bool = Field(True, alias="prettyPrint")
    type: JsonInjectionType
    override_type: JsonInjectionOverrideType = Field(JsonInjectionOverrideType.Replace, alias="overrideType")
    path: List[str] = Field(default_factory=list)
    key: Optional[str] = None
    injection: Any = None

    @model_validator(mode="after")
    def object_injections_need_key(self):
        if self.type == JsonInjectionType.ModifyObject and not self.key:
            raise ValueError(f"JSON injection into {self.file} modifies an object but has no key")
        return self

    def to_injection(self):
        if self.type == JsonInjectionType.ModifyArray:
            return ModifyJsonArrayInjection(
                override_type=self.override_type, path=list(self.path), injection=self.injection
            )
        return ModifyJsonObjectInjection(
            override_type=self.override_type, path=list(self.path), key=self.key, injection=self.injection
        )


class ProjectDescription(MetaBase):
    group: str
    name: str
    version: str
    description: Optional[str] = None
    channel: Optional[str] = None
    system_version: Optional[str] = Field(None, alias="systemVersion")
    authors: List[str] = Field(default_factory=list)
    minecraft_versions: List[str] = Field(default_factory=list, alias="minecraftVersions")
    type: ProjectType = ProjectType.Package
    install_jar: bool = Field(True, alias="installJar")
    dependencies: List[ArtifactCoordinate] = Field(default_factory=list)
    runtime_artifacts: List[str] = Field(default_factory=list, alias="runtimeArtifacts")
    project_dependencies: List[str] = Field(default_factory=list, alias="projectDependencies")
    subprojects: List[str] = Field(default_factory=list)
    static_files: List[StaticFileDescription] = Field(default_factory=list, alias="staticFiles")
    json_injections: List[JsonInjectionDescription] = Field(default_factory=list, alias="jsonInjections")
    repositories: List[str] = Field(default_factory=list)

    def resolve_channel(self) -> str:
        return self.channel or distributor_channel() or DEFAULT_CHANNEL

    def require_system_version(self) -> str:
        if not self.system_version:
            raise ConfigurationError(f"Please set the systemVersion property of project {self.name}")
        return self.system_version


class VersionEnvironment(MetaBase):
    version: str
    compile_classpath: List[str] = Field(default_factory=list, alias="compileClasspath")
    runtime_classpath: List[str] = Field(default_factory=list, alias="runtimeClasspath")


def project_file(project_dir) -> str:
    return os.path.join(project_dir, project_file_name())


def find_project(project_dir) -> Optional[ProjectDescription]:
    """Returns the description of the project in project_dir, or None if it has none."""
    path = project_file(project_dir)
    if not os.path.isfile(path):
        return None
    try:
        return ProjectDescription.parse_file(path)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid project description {path}: {e}") from e


def load_project(project_dir) -> ProjectDescription:
    project = find_project(project_dir)
    if project is None:
        raise ConfigurationError(f"Missing project description {project_file(project_dir)}")
    return project


def collect_projects(root_dir) -> List[Tuple[str, ProjectDescription]]:
    """Returns the project in root_dir followed by all of its sub-projects, depth first."""
    root = load_project(root_dir)
    projects = [(root_dir, root)]
    for subproject in root.subprojects:
        projects.extend(collect_projects(os.path.join(root_dir, subproject)))
    return projects
