"""
FileVault

An HTTP file service that keeps uploaded bytes on a local filesystem or in a
chunked blob store, with file metadata tracked separately from the bytes.
"""

__version__ = "1.0.0"
