import shutil
import zipfile

from ..function import PipelineFunction, ArtifactKind
from ...common import atomic_target
from ...common.errors import DeobfuscationError

VERSIONS_LIST = "META-INF/versions.list"
VERSIONS_DIR = "META-INF/versions/"


class UnbundleFunction(PipelineFunction):
    """
    Extracts the real server jar from a bundler jar. Servers since 1.18 ship as a
    bundler listing the nested jar in META-INF/versions.list ("<sha256>\t<id>\t<path>");
    older server jars are copied as they are.
    """

    def __init__(self, name: str, output: str, input_kind: ArtifactKind, output_kind: ArtifactKind):
        super().__init__(name, output, {"input": input_kind}, output_kind)

    def execute(self, utilities, inputs):
        with zipfile.ZipFile(inputs["input"]) as bundle:
            try:
                versions = bundle.read(VERSIONS_LIST).decode("utf-8").splitlines()
            except KeyError:
                versions = None

            with atomic_target(self.output) as part_path:
                if versions is None:
                    shutil.copyfile(inputs["input"], part_path)
                    return

                entries = [line.split("\t") for line in versions if line.strip()]
                if len(entries) != 1 or len(entries[0]) != 3:
                    raise DeobfuscationError(
                        f"Expected exactly one nested jar in {VERSIONS_LIST}", function=self.name, path=inputs["input"]
                    )

                with bundle.open(VERSIONS_DIR + entries[0][2]) as src, open(part_path, "wb") as dst:
                    shutil.copyfileobj(src, dst, 65536)
