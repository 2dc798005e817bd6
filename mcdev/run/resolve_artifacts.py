import concurrent.futures
import os

from mcdev.common import eprint, output_path
from mcdev.common.maven import static_checksums_file
from mcdev.context import BuildContext
from mcdev.manifest import StaticFileChecksums, bind_maven_dependencies, compute_static_checksums
from mcdev.model.project import collect_projects


def resolve_project(context: BuildContext, project_dir, project):
    output_dir = os.path.join(project_dir, output_path())
    bind_maven_dependencies(project, context.url_cache, context.downloader, output_dir)

    checksums_path = static_checksums_file(output_dir)
    checksums = StaticFileChecksums.load_or_empty(checksums_path)
    compute_static_checksums(project.static_files, project_dir, checksums, context.session)
    checksums.save(checksums_path)
    eprint("Resolved artifacts of %s" % project.name)


def main(root_dir="."):
    context = BuildContext.from_environment()
    projects = collect_projects(root_dir)
    for _, project in projects:
        context.add_repositories(project.repositories)

    with concurrent.futures.ThreadPoolExecutor() as executor:
        futures = [
            executor.submit(resolve_project, context, project_dir, project)
            for project_dir, project in projects
        ]
        try:
            for future in concurrent.futures.as_completed(futures):
                future.result()
        finally:
            # keep what was resolved even if one project failed
            context.save()


if __name__ == "__main__":
    main()
