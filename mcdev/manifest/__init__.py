from .checksums import StaticFileChecksums, compute_static_checksums
from .dependencies import bind_maven_dependencies, compute_package_dependencies
from .synthesizer import InstallInstructionSynthesizer, generate_manifest, unique

__all__ = [
    "StaticFileChecksums",
    "compute_static_checksums",
    "bind_maven_dependencies",
    "compute_package_dependencies",
    "InstallInstructionSynthesizer",
    "generate_manifest",
    "unique",
]
