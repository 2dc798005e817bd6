import contextlib
import os
import shutil

from ..common import atomic_target, ensure_dir
from ..model import ArtifactCoordinate


class SimpleMavenRepository:
    """
    A directory laid out like a maven repository. An artifact is installed iff its
    file exists; nothing else is tracked.
    """

    def __init__(self, base_dir):
        self.base_dir = ensure_dir(base_dir)

    def __repr__(self):
        return f"{type(self).__name__}('{self.base_dir}')"

    def path_for(self, coordinate: ArtifactCoordinate) -> str:
        return os.path.join(self.base_dir, *coordinate.path().split("/"))

    def is_installed(self, coordinate: ArtifactCoordinate) -> bool:
        return os.path.isfile(self.path_for(coordinate))

    def all_installed(self, coordinates) -> bool:
        return all(self.is_installed(c) for c in coordinates)

    @contextlib.contextmanager
    def target(self, coordinate: ArtifactCoordinate):
        with atomic_target(self.path_for(coordinate)) as part_path:
            yield part_path

    def store(self, coordinate: ArtifactCoordinate, data: bytes) -> str:
        if self.is_installed(coordinate):
            return self.path_for(coordinate)

        with self.target(coordinate) as part_path:
            with open(part_path, "wb") as f:
                f.write(data)
        return self.path_for(coordinate)

    def store_file(self, coordinate: ArtifactCoordinate, source_path) -> str:
        if self.is_installed(coordinate):
            return self.path_for(coordinate)

        with self.target(coordinate) as part_path:
            shutil.copyfile(source_path, part_path)
        return self.path_for(coordinate)
