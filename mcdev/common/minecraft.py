from os.path import join

MOJANG_VERSION_MANIFEST_URL = (
    "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
)

MINECRAFT_GROUP = "net.minecraft"

REPOSITORY_DIR = "minecraft-repository"
CACHE_DIR = "minecraft-cache"

VERSION_MANIFEST_FILE = "version_manifest_v2.json"
VERSIONS_DIR = "versions"
WORK_DIR = "work"


def version_file(cache_dir, version):
    return join(cache_dir, VERSIONS_DIR, f"{version}.json")


def work_dir(cache_dir, version):
    return join(cache_dir, WORK_DIR, version)
