from .repository import MinecraftRepository, DOWNLOAD_COORDINATES

__all__ = ["MinecraftRepository", "DOWNLOAD_COORDINATES"]
