"""
Cache orchestration for the cache-dirs action.

The orchestrator reads action inputs, hashes the trigger files selected by
the invalidation pattern, renders one cache key per cache path and restores
each path from the cache backend, saving a fresh entry on a miss.
"""
