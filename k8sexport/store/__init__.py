"""Read-only access to the bbolt file etcd keeps its data in."""

from k8sexport.store.bolt import BoltSnapshot

__all__ = ["BoltSnapshot"]
