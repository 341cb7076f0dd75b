from .directory_repository import DIRECTORIES_COLLECTION, DocumentDirectoryRepository, decode_directory, encode_directory

__all__ = ["DIRECTORIES_COLLECTION", "DocumentDirectoryRepository", "decode_directory", "encode_directory"]
