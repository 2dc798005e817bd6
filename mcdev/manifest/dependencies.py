import os
import zipfile
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..common import eprint, warn
from ..common.errors import ConfigurationError
from ..common.maven import MANIFEST_FILE, bound_dependencies_file
from ..maven.cache import write_url_index
from ..model import ArtifactCoordinate
from ..model.manifest import PackageDependency, PackageManifest
from ..model.project import ProjectDescription, find_project


def bind_maven_dependencies(project: ProjectDescription, url_cache, downloader, output_dir) \
        -> Dict[ArtifactCoordinate, str]:
    """
    Resolves the repository of every maven dependency of project through the shared
    URL cache and writes the result to the project's output directory.
    """
    bound = {}
    for coordinate in project.dependencies:
        bound[coordinate] = url_cache.resolve(coordinate, downloader)

    eprint("Bound %d maven dependencies of %s" % (len(bound), project.name))
    write_url_index(bound_dependencies_file(output_dir), bound)
    return bound


def read_package_manifest(jar_path) -> Optional[PackageManifest]:
    """Returns the manifest packaged in jar_path, or None if it is a plain jar."""
    try:
        with zipfile.ZipFile(jar_path) as jar:
            try:
                data = jar.read(MANIFEST_FILE)
            except KeyError:
                return None
    except (OSError, zipfile.BadZipFile) as e:
        raise ConfigurationError(f"Failed to check if file {jar_path} is a package jar: {e}") from e

    try:
        return PackageManifest.model_validate_json(data)
    except ValidationError as e:
        raise ConfigurationError(f"Failed to parse {MANIFEST_FILE} from {jar_path}: {e}") from e


def compute_package_dependencies(project: ProjectDescription, project_dir) -> List[PackageDependency]:
    dependencies = []

    for artifact in project.runtime_artifacts:
        jar_path = os.path.join(project_dir, artifact)
        package = read_package_manifest(jar_path)
        if package is None:
            continue
        dependencies.append(PackageDependency(name=package.name, version=package.version, channel=package.channel))

    for dependency_dir in project.project_dependencies:
        path = os.path.join(project_dir, dependency_dir)
        if not os.path.isdir(path):
            warn(f"Project {project.name} depends on project {dependency_dir}, "
                 f"but it failed to resolve and thus will be excluded from the manifest dependencies")
            warn("You will need to make sure the project is available at runtime yourself!")
            continue

        dependency = find_project(path)
        if dependency is None:
            warn(f"Project {project.name} depends on project {dependency_dir} which is not an mcdev project, "
                 f"thus it will be excluded from the manifest dependencies")
            warn("You will need to make sure the project is available at runtime yourself!")
            continue

        dependencies.append(PackageDependency(
            name=dependency.name, version=dependency.version, channel=dependency.resolve_channel()
        ))

    unique = []
    for dependency in dependencies:
        if dependency not in unique:
            unique.append(dependency)
    return unique
