import shutil
import zipfile
from typing import Set

from ..function import PipelineFunction, ArtifactKind
from ...common import atomic_target
from ...common.errors import DeobfuscationError

ASSETS_PREFIX = "assets/"


def read_class_list(path) -> Set[str]:
    """
    Collects the class file names listed in a TSRG mapping file. Only unindented
    lines are class records; indented member lines are skipped.
    """
    classes = set()
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if not line or line[0].isspace() or line.startswith("#"):
                    continue

                parts = line.split(" ")
                if len(parts) < 2 or not parts[0]:
                    raise DeobfuscationError(f"Malformed class mapping at line {line_number}", path=path)
                classes.add(parts[0] + ".class")
    except UnicodeDecodeError as e:
        raise DeobfuscationError(f"Mappings are not valid UTF-8: {e}", path=path) from e
    return classes


def copy_entry(source: zipfile.ZipFile, info: zipfile.ZipInfo, target: zipfile.ZipFile):
    out_info = zipfile.ZipInfo(info.filename, date_time=info.date_time)
    out_info.compress_type = zipfile.ZIP_DEFLATED
    out_info.external_attr = info.external_attr
    out_info.file_size = info.file_size
    with source.open(info) as src, target.open(out_info, "w") as dst:
        shutil.copyfileobj(src, dst, 65536)


class StripFunction(PipelineFunction):
    """
    Filters the classes of a jar by the classes named in a mapping file.

    In whitelist mode only listed classes are kept, in blacklist mode listed classes
    are dropped. Directory entries are always dropped and anything below assets/
    is always kept.
    """

    def __init__(self, name: str, output: str, input_kind: ArtifactKind, mappings_kind: ArtifactKind,
                 output_kind: ArtifactKind, whitelist: bool):
        super().__init__(name, output, {"input": input_kind, "mappings": mappings_kind}, output_kind)
        self.whitelist = whitelist
        self.class_list: Set[str] = set()

    def prepare(self, utilities, inputs):
        self.class_list = read_class_list(inputs["mappings"])

    def should_strip(self, info: zipfile.ZipInfo) -> bool:
        return info.is_dir() or (
            (info.filename in self.class_list) != self.whitelist
            and not info.filename.startswith(ASSETS_PREFIX)
        )

    def execute(self, utilities, inputs):
        with atomic_target(self.output) as part_path:
            with zipfile.ZipFile(inputs["input"]) as source, \
                    zipfile.ZipFile(part_path, "w", zipfile.ZIP_DEFLATED) as target:
                for info in source.infolist():
                    if self.should_strip(info):
                        continue
                    copy_entry(source, info, target)
