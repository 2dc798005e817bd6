import os
import zipfile
from typing import Dict, List

from .function import ArtifactKind, PipelineFunction
from .functions import MappingsFunction, MergeFunction, RenameFunction, StripFunction, UnbundleFunction
from .java import JavaExecutionHelper
from ..common import eprint
from ..common.errors import ConfigurationError, DeobfuscationError
from ..common.minecraft import MINECRAFT_GROUP
from ..model import ArtifactCoordinate

# raw inputs of the default environment and the Mojang download providing each of them
MOJANG_DOWNLOADS = {
    ArtifactKind.ClientJar: "client",
    ArtifactKind.ServerJar: "server",
    ArtifactKind.ClientMappings: "client_mappings",
    ArtifactKind.ServerMappings: "server_mappings",
}


class DeobfuscationUtilities:
    """Everything a pipeline function may need besides its inputs."""

    def __init__(self, downloader, minecraft_repository, internal_repository, sess, url_cache,
                 java: JavaExecutionHelper):
        self.downloader = downloader
        self.minecraft_repository = minecraft_repository
        self.internal_repository = internal_repository
        # None when running offline
        self.sess = sess
        self.url_cache = url_cache
        self.java = java


class DeobfuscationEnvironment:
    """
    A typed chain of pipeline functions turning the raw Minecraft downloads into
    compile and runtime artifacts.

    `seeds` maps the raw input kinds to the Mojang download providing them.
    `compile_outputs` and `runtime_outputs` map terminal kinds to the classifier
    they are published under as net.minecraft:minecraft:<version>:<classifier>.
    """

    def __init__(self, name: str, functions: List[PipelineFunction], seeds: Dict[ArtifactKind, str],
                 compile_outputs: Dict[ArtifactKind, str], runtime_outputs: Dict[ArtifactKind, str]):
        self.name = name
        self.functions = list(functions)
        self.seeds = dict(seeds)
        self.compile_outputs = dict(compile_outputs)
        self.runtime_outputs = dict(runtime_outputs)

    def validate(self):
        available = set(self.seeds)
        names = set()
        for function in self.functions:
            if function.name in names:
                raise ConfigurationError(f"Environment {self.name} declares function {function.name} twice")
            names.add(function.name)

            missing = [str(kind) for kind in function.consumes.values() if kind not in available]
            if missing:
                raise ConfigurationError(
                    "Function %s of environment %s consumes %s, which no earlier step produces"
                    % (function.name, self.name, ", ".join(missing))
                )
            if function.produces in available:
                raise ConfigurationError(
                    f"Function {function.name} of environment {self.name} produces {function.produces} again"
                )
            available.add(function.produces)

        for kind in list(self.compile_outputs) + list(self.runtime_outputs):
            if kind not in available:
                raise ConfigurationError(f"Environment {self.name} never produces its output {kind}")

    @staticmethod
    def _coordinates(version: str, outputs: Dict[ArtifactKind, str]) -> Dict[ArtifactKind, ArtifactCoordinate]:
        return {
            kind: ArtifactCoordinate(MINECRAFT_GROUP, "minecraft", version, classifier)
            for kind, classifier in outputs.items()
        }

    def compile_artifacts(self, version: str) -> Dict[ArtifactKind, ArtifactCoordinate]:
        return self._coordinates(version, self.compile_outputs)

    def runtime_artifacts(self, version: str) -> Dict[ArtifactKind, ArtifactCoordinate]:
        return self._coordinates(version, self.runtime_outputs)

    def run(self, utilities: DeobfuscationUtilities, seed_paths: Dict[ArtifactKind, str]) -> Dict[ArtifactKind, str]:
        """Runs every function in order and returns the path of every produced kind."""
        self.validate()

        missing = [str(kind) for kind in self.seeds if kind not in seed_paths]
        if missing:
            raise ConfigurationError(f"Environment {self.name} is missing its inputs {', '.join(missing)}")

        available = dict(seed_paths)
        for function in self.functions:
            inputs = {param: available[kind] for param, kind in function.consumes.items()}

            if os.path.isfile(function.output):
                eprint("Function %s is up to date" % function.name)
            else:
                eprint("Running function %s" % function.name)
                try:
                    function.prepare(utilities, inputs)
                    function.execute(utilities, inputs)
                except DeobfuscationError:
                    raise
                except (OSError, zipfile.BadZipFile, KeyError) as e:
                    raise DeobfuscationError(
                        f"{type(e).__name__}: {e}", function=function.name, path=function.output
                    ) from e

                if not os.path.isfile(function.output):
                    raise DeobfuscationError("No output was written", function=function.name, path=function.output)

            available[function.produces] = function.output

        return available


def default_environment(work_dir) -> DeobfuscationEnvironment:
    def out(name, extension="jar"):
        return os.path.join(work_dir, f"{name}.{extension}")

    functions = [
        MappingsFunction("convertClientMappings", out("client", "tsrg"),
                         ArtifactKind.ClientMappings, ArtifactKind.ClientSrg),
        MappingsFunction("convertServerMappings", out("server", "tsrg"),
                         ArtifactKind.ServerMappings, ArtifactKind.ServerSrg),
        UnbundleFunction("unbundleServer", out("server-unbundled"),
                         ArtifactKind.ServerJar, ArtifactKind.ServerUnbundled),
        StripFunction("stripClient", out("client-stripped"),
                      ArtifactKind.ClientJar, ArtifactKind.ClientSrg, ArtifactKind.StrippedClient, whitelist=True),
        StripFunction("stripServer", out("server-stripped"),
                      ArtifactKind.ServerUnbundled, ArtifactKind.ServerSrg, ArtifactKind.StrippedServer,
                      whitelist=True),
        RenameFunction("renameClient", out("client-named"),
                       ArtifactKind.StrippedClient, ArtifactKind.ClientSrg, ArtifactKind.NamedClient),
        RenameFunction("renameServer", out("server-named"),
                       ArtifactKind.StrippedServer, ArtifactKind.ServerSrg, ArtifactKind.NamedServer),
        MergeFunction("merge", out("joined-named"),
                      ArtifactKind.NamedClient, ArtifactKind.NamedServer, ArtifactKind.Joined),
        StripFunction("extractExtra", out("client-extra"),
                      ArtifactKind.ClientJar, ArtifactKind.ClientSrg, ArtifactKind.Extra, whitelist=False),
    ]

    return DeobfuscationEnvironment(
        "mojang",
        functions,
        MOJANG_DOWNLOADS,
        compile_outputs={ArtifactKind.Joined: "named"},
        runtime_outputs={ArtifactKind.Joined: "named", ArtifactKind.Extra: "extra"},
    )


__all__ = [
    "ArtifactKind",
    "PipelineFunction",
    "DeobfuscationUtilities",
    "DeobfuscationEnvironment",
    "JavaExecutionHelper",
    "MOJANG_DOWNLOADS",
    "default_environment",
]
