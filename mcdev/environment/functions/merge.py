import zipfile

from .strip import copy_entry
from ..function import PipelineFunction, ArtifactKind
from ...common import atomic_target


class MergeFunction(PipelineFunction):
    """Joins the client and server jar. Entries present in both are taken from the client."""

    def __init__(self, name: str, output: str, client_kind: ArtifactKind, server_kind: ArtifactKind,
                 output_kind: ArtifactKind):
        super().__init__(name, output, {"client": client_kind, "server": server_kind}, output_kind)

    def execute(self, utilities, inputs):
        seen = set()
        with atomic_target(self.output) as part_path:
            with zipfile.ZipFile(part_path, "w", zipfile.ZIP_DEFLATED) as target:
                for key in ("client", "server"):
                    with zipfile.ZipFile(inputs[key]) as source:
                        for info in source.infolist():
                            if info.is_dir() or info.filename in seen:
                                continue
                            seen.add(info.filename)
                            copy_entry(source, info, target)
