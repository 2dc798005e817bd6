from ..function import PipelineFunction, ArtifactKind
from ...common import atomic_target
from ...model import ArtifactCoordinate

REMAPPER_TOOL = ArtifactCoordinate("net.md-5", "SpecialSource", "1.11.0", "shaded")


class RenameFunction(PipelineFunction):
    """Remaps a jar with TSRG mappings by running SpecialSource."""

    def __init__(self, name: str, output: str, input_kind: ArtifactKind, mappings_kind: ArtifactKind,
                 output_kind: ArtifactKind, tool: ArtifactCoordinate = REMAPPER_TOOL):
        super().__init__(name, output, {"input": input_kind, "mappings": mappings_kind}, output_kind)
        self.tool = tool
        self.tool_path = None

    def prepare(self, utilities, inputs):
        self.tool_path = utilities.downloader.install(
            self.tool, utilities.internal_repository, utilities.url_cache
        )

    def execute(self, utilities, inputs):
        with atomic_target(self.output) as part_path:
            utilities.java.execute(
                self.tool_path,
                [
                    "--in-jar", inputs["input"],
                    "--out-jar", part_path,
                    "--srg-in", inputs["mappings"],
                    "--kill-lvt",
                ],
                function=self.name,
            )
