"""File access certificates.

Signed capability tokens binding a user, a file and a permission snapshot,
verifiable by peer services without calling back.
"""
