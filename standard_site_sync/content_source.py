"""
Blog post discovery and change watching.

Posts are Markdown files anywhere under the content directory. Changes are
found by polling modification times; only created and modified files are
reported since records are never deleted.
"""

import threading
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from .errors import ContentSourceError

console = Console()


class ContentSource:
    """Markdown files under a root directory."""
    
    def __init__(self, root: Path, extension: str = ".md"):
        self.root = Path(root)
        self.extension = extension
    
    def is_document(self, path: Path) -> bool:
        """Whether `path` has the recognised document extension."""
        return str(path).endswith(self.extension)
    
    def canonical_path(self, path: Path) -> Path:
        """Absolute, symlink-free form of `path`, used to identify a document."""
        return Path(path).resolve()
    
    def list_documents(self) -> list[Path]:
        """
        Find all documents under the root, sorted by path.
        
        Raises:
            ContentSourceError: If the root is missing or unreadable.
        """
        if not self.root.is_dir():
            raise ContentSourceError(f"Content directory not found: {self.root}")
        
        try:
            paths = [
                self.canonical_path(p)
                for p in self.root.rglob(f"*{self.extension}")
                if p.is_file()
            ]
        except OSError as e:
            raise ContentSourceError(f"Could not list {self.root}: {e}") from e
        
        return sorted(paths)
    
    def read(self, path: Path) -> str:
        """Read a document as UTF-8 text."""
        return Path(path).read_text(encoding="utf-8")


class DocumentWatcher:
    """
    Polls a ContentSource for created or modified documents.
    
    The first snapshot is taken on construction, so only changes made
    after that are reported.
    """
    
    def __init__(self, source: ContentSource, interval: float = 1.0):
        self.source = source
        self.interval = interval
        self._mtimes = self.snapshot()
    
    def snapshot(self) -> dict[Path, int]:
        """Modification time of every document currently present."""
        mtimes = {}
        try:
            documents = self.source.list_documents()
        except ContentSourceError as e:
            console.print(f"[yellow]Warning: {e}[/yellow]")
            return mtimes
        
        for path in documents:
            try:
                mtimes[path] = path.stat().st_mtime_ns
            except FileNotFoundError:
                # Removed between listing and stat
                continue
        return mtimes
    
    def poll(self) -> list[Path]:
        """Documents created or modified since the previous poll."""
        current = self.snapshot()
        changed = [
            path for path, mtime in current.items()
            if self._mtimes.get(path) != mtime
        ]
        self._mtimes = current
        return sorted(changed)
    
    def watch(
        self,
        callback: Callable[[Path], object],
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Call `callback` for each changed document until `stop_event` is set.
        
        Args:
            callback: Called with the path of each created/modified document.
            stop_event: Event that ends the loop. Runs forever if omitted.
        """
        stop_event = stop_event or threading.Event()
        
        while not stop_event.wait(self.interval):
            for path in self.poll():
                callback(path)
