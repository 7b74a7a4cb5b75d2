"""Binary object storage for event documents."""
from eventdesk.storage.object_store import LocalObjectStore, ObjectStore, get_object_store

__all__ = ["LocalObjectStore", "ObjectStore", "get_object_store"]
