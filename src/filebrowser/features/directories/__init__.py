"""Per-user virtual directories.

A directory maps logical paths to files, resolves placement collisions and
lists its content one level at a time.
"""
