r"""
Mojang publishes mappings in ProGuard format, named name first:

    # comment
    net.minecraft.client.Minecraft -> dvp:
        java.lang.String VERSION -> a
        12:15:void <init>(dwh) -> <init>
        1:1:dvp getInstance():100:100 -> B

They are converted to TSRG, obfuscated name first, which is what the strip and
rename functions consume:

    dvp net/minecraft/client/Minecraft
    \ta VERSION
    \tB ()Ldvp; getInstance
"""

import re
from typing import Dict, List, Tuple

from ..function import PipelineFunction, ArtifactKind
from ...common import atomic_target
from ...common.errors import DeobfuscationError

CLASS_LINE = re.compile(r"^(?P<named>[^\s]+) -> (?P<obf>[^\s]+):$")
FIELD_LINE = re.compile(r"^(?P<type>[^\s(]+) (?P<named>[^\s(]+) -> (?P<obf>[^\s]+)$")
METHOD_LINE = re.compile(
    r"^(?:\d+:\d+:)?(?P<type>[^\s]+) (?P<named>[^\s(]+)\((?P<args>[^)]*)\)(?::\d+(?::\d+)?)? -> (?P<obf>[^\s]+)$"
)

PRIMITIVE_DESCRIPTORS = {
    "boolean": "Z",
    "byte": "B",
    "char": "C",
    "short": "S",
    "int": "I",
    "long": "J",
    "float": "F",
    "double": "D",
    "void": "V",
}


class ClassMapping:
    def __init__(self, named: str, obf: str):
        self.named = named
        self.obf = obf
        self.fields: List[Tuple[str, str]] = []
        self.methods: List[Tuple[str, str, List[str], str]] = []


def java_type_descriptor(java_type: str, obf_names: Dict[str, str]) -> str:
    dimensions = 0
    while java_type.endswith("[]"):
        java_type = java_type[:-2]
        dimensions += 1

    if java_type in PRIMITIVE_DESCRIPTORS:
        descriptor = PRIMITIVE_DESCRIPTORS[java_type]
    else:
        descriptor = "L%s;" % obf_names.get(java_type, java_type).replace(".", "/")
    return "[" * dimensions + descriptor


def method_descriptor(return_type: str, args: List[str], obf_names: Dict[str, str]) -> str:
    return "(%s)%s" % (
        "".join(java_type_descriptor(a, obf_names) for a in args),
        java_type_descriptor(return_type, obf_names),
    )


def parse_proguard(path) -> List[ClassMapping]:
    classes: List[ClassMapping] = []
    current = None
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if not line.strip() or line.lstrip().startswith("#"):
                    continue

                if not line[0].isspace():
                    match = CLASS_LINE.match(line)
                    if not match:
                        raise DeobfuscationError(f"Malformed class mapping at line {line_number}", path=path)
                    current = ClassMapping(match.group("named"), match.group("obf"))
                    classes.append(current)
                    continue

                if current is None:
                    raise DeobfuscationError(f"Member mapping outside of a class at line {line_number}", path=path)

                member = line.strip()
                match = METHOD_LINE.match(member)
                if match:
                    if "." in match.group("named"):
                        # inlined frame of a method declared in another class
                        continue
                    args = [a for a in match.group("args").split(",") if a]
                    current.methods.append((match.group("obf"), match.group("type"), args, match.group("named")))
                    continue

                match = FIELD_LINE.match(member)
                if match:
                    current.fields.append((match.group("obf"), match.group("named")))
                    continue

                raise DeobfuscationError(f"Malformed member mapping at line {line_number}", path=path)
    except UnicodeDecodeError as e:
        raise DeobfuscationError(f"Mappings are not valid UTF-8: {e}", path=path) from e

    return classes


def write_tsrg(classes: List[ClassMapping], f):
    obf_names = {c.named: c.obf for c in classes}

    for mapping in sorted(classes, key=lambda c: c.obf):
        f.write("%s %s\n" % (mapping.obf.replace(".", "/"), mapping.named.replace(".", "/")))
        for obf, named in mapping.fields:
            f.write("\t%s %s\n" % (obf, named))
        written = set()
        for obf, return_type, args, named in mapping.methods:
            if obf == named:
                # constructors, static initializers and unobfuscated overrides
                continue
            descriptor = method_descriptor(return_type, args, obf_names)
            # one line per line-number range of the same method
            if (obf, descriptor) in written:
                continue
            written.add((obf, descriptor))
            f.write("\t%s %s %s\n" % (obf, descriptor, named))


class MappingsFunction(PipelineFunction):
    """Converts ProGuard mappings to TSRG."""

    def __init__(self, name: str, output: str, input_kind: ArtifactKind, output_kind: ArtifactKind):
        super().__init__(name, output, {"mappings": input_kind}, output_kind)
        self.classes: List[ClassMapping] = []

    def prepare(self, utilities, inputs):
        self.classes = parse_proguard(inputs["mappings"])

    def execute(self, utilities, inputs):
        with atomic_target(self.output) as part_path:
            with open(part_path, "w", encoding="utf-8", newline="\n") as f:
                write_tsrg(self.classes, f)
