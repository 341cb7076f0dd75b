from .file_repository import FILES_COLLECTION, DocumentFileRepository, decode_file, encode_file

__all__ = ["FILES_COLLECTION", "DocumentFileRepository", "decode_file", "encode_file"]
