import os

from mcdev.common import eprint, output_path
from mcdev.common.maven import ENVIRONMENT_DIR
from mcdev.context import BuildContext
from mcdev.model.project import VersionEnvironment, collect_projects


def environment_file(output_dir, version):
    return os.path.join(output_dir, ENVIRONMENT_DIR, f"{version}.json")


def main(root_dir="."):
    context = BuildContext.from_environment()
    projects = collect_projects(root_dir)
    for _, project in projects:
        context.add_repositories(project.repositories)

    # one version may be wanted by several projects, set it up only once
    environments = {}
    for project_dir, project in projects:
        output_dir = os.path.join(project_dir, output_path())
        for version in project.minecraft_versions:
            if version not in environments:
                compile_classpath, runtime_classpath = context.setup_version(version)
                environments[version] = VersionEnvironment(
                    version=version,
                    compile_classpath=compile_classpath,
                    runtime_classpath=runtime_classpath,
                )
            environments[version].write(environment_file(output_dir, version))
            eprint("Set up minecraft %s for %s" % (version, project.name))

    context.save()


if __name__ == "__main__":
    main()
