"""
Record Store package.

Persistence for all entities:
- Backends: key-value documents (in-memory or one JSON file per key)
- RecordStore: typed collections with read-modify-write semantics
- Defaults: content of a freshly initialized store
"""
