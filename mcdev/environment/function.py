from typing import Dict

from ..model.enum import StrEnum


class ArtifactKind(StrEnum):
    """The type of a file flowing through a deobfuscation pipeline."""

    ClientJar = "client-jar"
    ServerJar = "server-jar"
    ClientMappings = "client-mappings"
    ServerMappings = "server-mappings"
    ServerUnbundled = "server-unbundled"
    ClientSrg = "client-srg"
    ServerSrg = "server-srg"
    StrippedClient = "stripped-client"
    StrippedServer = "stripped-server"
    NamedClient = "named-client"
    NamedServer = "named-server"
    Joined = "joined"
    Extra = "extra"


class PipelineFunction:
    """
    One named step of a deobfuscation environment.

    A function consumes the files of the kinds listed in `consumes` (keyed by the
    parameter name it knows them by) and writes exactly one file of kind `produces`
    to `output`. The environment calls prepare() and then execute(); both receive
    the resolved input paths.
    """

    def __init__(self, name: str, output: str, consumes: Dict[str, ArtifactKind], produces: ArtifactKind):
        self.name = name
        self.output = output
        self.consumes = dict(consumes)
        self.produces = produces

    def __repr__(self):
        return f"{type(self).__name__}('{self.name}')"

    def prepare(self, utilities, inputs: Dict[str, str]):
        pass

    def execute(self, utilities, inputs: Dict[str, str]):
        raise NotImplementedError
