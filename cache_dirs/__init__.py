"""
cache-dirs: restore or populate CI build caches keyed by trigger-file hashes.
"""
