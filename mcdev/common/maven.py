from os.path import join

MINECRAFT_MAVEN = "https://libraries.minecraft.net/"
MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2/"

DEFAULT_REPOSITORIES = [MINECRAFT_MAVEN, MAVEN_CENTRAL]

ARTIFACT_URL_CACHE_FILE = "maven-artifact-urls.json"
STATIC_CHECKSUMS_FILE = "static-file-checksums.json"
MANIFEST_FILE = "manifest.json"

INTERNAL_REPOSITORY_DIR = "internal-repository"
ENVIRONMENT_DIR = "environment"


def bound_dependencies_file(output_dir):
    return join(output_dir, ARTIFACT_URL_CACHE_FILE)


def static_checksums_file(output_dir):
    return join(output_dir, STATIC_CHECKSUMS_FILE)
