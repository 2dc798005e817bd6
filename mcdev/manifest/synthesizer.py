import os
import posixpath
from typing import Dict, List, Optional, Tuple

from ..common import DISTRIBUTOR_URL, LIBRARY_DIR, PACKAGE_DIR, eprint
from ..common.errors import ConfigurationError, ConsistencyError
from ..common.maven import MANIFEST_FILE, bound_dependencies_file, static_checksums_file
from ..maven.cache import read_url_index
from ..model import ArtifactCoordinate, MetaBase
from ..model.manifest import (
    DownloadFileData,
    DownloadFileInstruction,
    DownloadMavenDependencyData,
    DownloadMavenDependencyInstruction,
    ModifyJsonFileData,
    ModifyJsonFileInstruction,
    OperatingSystem,
    PackageManifest,
)
from ..model.project import ProjectDescription, ProjectType
from .checksums import StaticFileChecksums
from .dependencies import compute_package_dependencies

CODE_ARCHIVE_EXTENSION = ".jar"
DEFAULT_DESCRIPTION = "An mcdev project"


def unique(items):
    """Drops structurally equal duplicates, keeping the first occurrence."""
    seen = set()
    out = []
    for item in items:
        key = item.json() if isinstance(item, MetaBase) else item
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


class InstallInstructionSynthesizer:
    """
    Turns the cached state of a project into install instructions.

    Every target path is written relative to one of the installer placeholders
    (${LIBRARY_DIR}, ${PACKAGE_DIR}) so the manifest works on any machine.
    """

    def __init__(self, project: ProjectDescription, project_dir, channel: Optional[str] = None):
        self.project = project
        self.project_dir = project_dir
        self.channel = channel or project.resolve_channel()

    def distributor_url(self) -> str:
        return DISTRIBUTOR_URL + self.channel

    def own_path(self) -> Optional[str]:
        if not self.project.install_jar:
            return None

        if self.project.type == ProjectType.Library:
            own = ArtifactCoordinate(self.project.group, self.project.name, self.project.version)
            return f"{LIBRARY_DIR}/{own.path()}"
        return f"{PACKAGE_DIR}/{self.project.name}.jar"

    def own_instruction(self) -> Optional[DownloadMavenDependencyInstruction]:
        path = self.own_path()
        if path is None:
            return None

        return DownloadMavenDependencyInstruction(data=DownloadMavenDependencyData(
            group=self.project.group,
            name=self.project.name,
            version=self.project.version,
            repository=self.distributor_url(),
            path=path,
        ))

    def maven_instructions(self, bound: Dict[ArtifactCoordinate, str]) -> List[DownloadMavenDependencyInstruction]:
        instructions = []
        for coordinate, repository in sorted(bound.items()):
            instructions.append(DownloadMavenDependencyInstruction(data=DownloadMavenDependencyData(
                group=coordinate.group,
                name=coordinate.artifact,
                version=coordinate.version,
                classifier=coordinate.classifier,
                repository=repository,
                path=f"{LIBRARY_DIR}/{coordinate.path()}",
            )))
        return instructions

    def static_file_url(self, static_file) -> str:
        if static_file.is_remote:
            return static_file.source_url

        # local files are published next to the project artifact
        own = ArtifactCoordinate(self.project.group, self.project.name, self.project.version)
        relative = posixpath.normpath(static_file.source_file.replace(os.sep, "/"))
        return f"{self.distributor_url()}/{own.base()}static/{relative}"

    def static_file_instructions(self, checksums: StaticFileChecksums) -> List[DownloadFileInstruction]:
        instructions = []
        for static_file in sorted(self.project.static_files, key=lambda s: (s.target, str(s.os))):
            identity = static_file.identity(self.project_dir)
            if not checksums.has(identity):
                raise ConsistencyError(
                    f"No cached checksum found for static file {identity}, was the verification pass skipped?"
                )

            instructions.append(DownloadFileInstruction(
                os=static_file.os,
                data=DownloadFileData(
                    url=self.static_file_url(static_file),
                    path=static_file.target,
                    sha256=checksums.get(identity),
                ),
            ))
        return instructions

    def json_injection_instructions(self) -> List[ModifyJsonFileInstruction]:
        merged: Dict[Tuple[str, bool], ModifyJsonFileData] = {}
        for description in self.project.json_injections:
            key = (description.file, description.pretty_print)
            if key not in merged:
                merged[key] = ModifyJsonFileData(path=description.file, pretty_print=description.pretty_print,
                                                 injections=[])
            merged[key].injections.append(description.to_injection())

        return [ModifyJsonFileInstruction(os=OperatingSystem.Unknown, data=data) for data in merged.values()]

    def runtime_classpath(self, maven_instructions, static_file_instructions) -> List[str]:
        own_path = self.own_path()
        classpath = [
            instruction.data.path
            for instruction in maven_instructions
            if instruction.data.path != own_path
        ]
        classpath.extend(
            instruction.data.path
            for instruction in static_file_instructions
            if instruction.data.path.endswith(CODE_ARCHIVE_EXTENSION)
        )
        return unique(classpath)

    def synthesize(self, bound: Dict[ArtifactCoordinate, str], checksums: StaticFileChecksums):
        """Returns the instruction list and the runtime classpath."""
        maven = self.maven_instructions(bound)
        static = self.static_file_instructions(checksums)

        instructions = []
        own = self.own_instruction()
        if own is not None:
            instructions.append(own)
        instructions.extend(maven)
        instructions.extend(static)
        instructions.extend(self.json_injection_instructions())

        return unique(instructions), self.runtime_classpath(maven, static)


def generate_manifest(project: ProjectDescription, project_dir, output_dir) -> PackageManifest:
    bound_file = bound_dependencies_file(output_dir)
    checksums_file = static_checksums_file(output_dir)
    if not os.path.isfile(bound_file):
        raise ConfigurationError(f"Missing maven artifact URL cache {bound_file}, run resolve_artifacts first")
    if not os.path.isfile(checksums_file):
        raise ConfigurationError(f"Missing static file checksum cache {checksums_file}, run resolve_artifacts first")

    bound = read_url_index(bound_file)
    checksums = StaticFileChecksums.load(checksums_file)

    synthesizer = InstallInstructionSynthesizer(project, project_dir)
    instructions, classpath = synthesizer.synthesize(bound, checksums)

    manifest = PackageManifest(
        group=project.group,
        name=project.name,
        description=project.description or DEFAULT_DESCRIPTION,
        version=project.version,
        channel=synthesizer.channel,
        minecraft_versions=",".join(project.minecraft_versions),
        system_version=project.require_system_version(),
        authors=list(project.authors),
        dependencies=compute_package_dependencies(project, project_dir),
        runtime_classpath=classpath,
        install_instructions=instructions,
    )

    path = os.path.join(output_dir, MANIFEST_FILE)
    manifest.write(path)
    eprint("Wrote %s with %d install instructions" % (path, len(instructions)))
    return manifest
