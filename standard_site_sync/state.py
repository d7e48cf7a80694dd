"""
In-memory sync state and change detection.

The state maps a post's path to the hash of the content last published
for it. It lives only as long as the engine that owns it: after a restart
every post is published once more, which is harmless because records are
written by key.
"""

import hashlib
import json
import threading
from typing import Optional

from .schema import BlogPost


def content_hash(post: BlogPost) -> str:
    """
    Stable SHA-1 of a validated post.
    
    Keys are sorted so equal posts always hash equal.
    """
    payload = json.dumps(post.model_dump(), sort_keys=True, separators=(",", ":"))
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class SyncState:
    """
    Last published content hash per post path.
    
    Safe to share between the worker threads of a full pass and the
    watcher thread. A hash is only recorded after a successful publish.
    """
    
    def __init__(self):
        self._hashes: dict[str, str] = {}
        self._lock = threading.Lock()
    
    def get(self, path: str) -> Optional[str]:
        with self._lock:
            return self._hashes.get(path)
    
    def has_changed(self, path: str, digest: str) -> bool:
        """True unless `digest` is what was last published for `path`."""
        with self._lock:
            return self._hashes.get(path) != digest
    
    def mark_published(self, path: str, digest: str) -> None:
        with self._lock:
            self._hashes[path] = digest
    
    def snapshot(self) -> dict[str, str]:
        """Copy of the current state."""
        with self._lock:
            return dict(self._hashes)
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._hashes)
    
    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._hashes
