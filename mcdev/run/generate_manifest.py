import os

from mcdev.common import output_path
from mcdev.manifest import generate_manifest
from mcdev.model.project import collect_projects


def main(root_dir="."):
    for project_dir, project in collect_projects(root_dir):
        generate_manifest(project, project_dir, os.path.join(project_dir, output_path()))


if __name__ == "__main__":
    main()
