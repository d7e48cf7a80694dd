"""
Main sync engine for blog post → PDS synchronization.

Orchestrates:
- Post discovery in the content directory
- Frontmatter extraction and validation
- Change detection
- Record key derivation and record building
- Publishing to the PDS
- State management

A failure while syncing one post is reported and never stops the others.
"""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Config
from .content_source import ContentSource, DocumentWatcher
from .errors import ContentSourceError, DocumentValidationError, PublishError
from .frontmatter import extract_frontmatter
from .pds_api import PDSClient, RecordStore
from .record import build_document
from .schema import validate_post
from .state import SyncState, content_hash
from .tid import derive_record_key

console = Console()

LOG_PREFIX = escape("[standard-site-sync]")


class DocumentStatus(Enum):
    """What happened to a document during a sync."""
    PUBLISHED = "published"
    DRY_RUN = "dry_run"
    SKIPPED_DRAFT = "skipped_draft"
    SKIPPED_UNCHANGED = "skipped_unchanged"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class DocumentOutcome:
    """Result of running the pipeline for one document."""
    
    source_path: Path
    status: DocumentStatus
    record_path: Optional[str] = None
    rkey: Optional[str] = None
    record: Optional[dict] = None
    error: Optional[Exception] = None
    
    @property
    def failed(self) -> bool:
        return self.status in (DocumentStatus.INVALID, DocumentStatus.FAILED)


@dataclass
class SyncResult:
    """Result of a full sync pass."""
    
    outcomes: list[DocumentOutcome] = field(default_factory=list)
    
    def _paths(self, *statuses: DocumentStatus) -> list[Path]:
        return [o.source_path for o in self.outcomes if o.status in statuses]
    
    @property
    def documents_published(self) -> list[Path]:
        return self._paths(DocumentStatus.PUBLISHED, DocumentStatus.DRY_RUN)
    
    @property
    def documents_skipped(self) -> list[Path]:
        return self._paths(DocumentStatus.SKIPPED_DRAFT, DocumentStatus.SKIPPED_UNCHANGED)
    
    @property
    def documents_failed(self) -> list[Path]:
        return self._paths(DocumentStatus.INVALID, DocumentStatus.FAILED)
    
    @property
    def success(self) -> bool:
        """Check if sync was successful."""
        return len(self.documents_failed) == 0


class SyncEngine:
    """
    Main orchestrator for blog post → PDS synchronization.
    
    Per document:
    1. Extract and validate frontmatter
    2. Skip drafts
    3. Skip posts whose content was already published
    4. Derive the record key from the publish date and build the record
    5. Put the record and remember its content hash
    """
    
    def __init__(
        self,
        config: Config,
        store: Optional[RecordStore] = None,
        state: Optional[SyncState] = None,
        source: Optional[ContentSource] = None,
    ):
        """
        Initialize sync engine.
        
        Args:
            config: Configuration instance.
            store: Record store to publish to. Defaults to a PDSClient
                   (not created for dry runs).
            state: Sync state. A fresh one is created if not given.
            source: Content source. Defaults to the configured content dir.
        """
        self.config = config
        if store is None and not config.dry_run:
            store = PDSClient(config)
        self.store = store
        self.state = state if state is not None else SyncState()
        self.source = source or ContentSource(config.content_dir, config.document_extension)
    
    def sync(self) -> SyncResult:
        """
        Perform a full synchronization of every post.
        
        Returns:
            SyncResult with one outcome per post, in path order.
            
        Raises:
            ContentSourceError: If the content directory cannot be listed.
        """
        result = SyncResult()
        
        console.print(f"\n[bold blue]🔄 Syncing posts in {self.source.root}[/bold blue]\n")
        
        paths = self.source.list_documents()
        
        if not paths:
            console.print("[yellow]No posts found in the content directory.[/yellow]")
            return result
        
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            result.outcomes = list(executor.map(self.sync_file, paths))
        
        self._print_summary(result)
        
        return result
    
    def handle_change(self, path: Path) -> Optional[DocumentOutcome]:
        """
        Sync a single post after a file-change notification.
        
        Args:
            path: Path of the created or modified file.
            
        Returns:
            The outcome, or None if the file is not a post.
        """
        if not self.source.is_document(path):
            return None
        return self.sync_file(self.source.canonical_path(path))
    
    def watch(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Run a full pass, then keep syncing posts as they change.
        
        The full pass runs in the background so changes made while it is in
        progress are picked up straight away.
        
        Args:
            stop_event: Event that stops watching. Runs until interrupted if omitted.
        """
        stop_event = stop_event or threading.Event()
        watcher = DocumentWatcher(self.source, self.config.watch_interval)
        
        full_pass = threading.Thread(target=self._background_sync, name="full-sync", daemon=True)
        full_pass.start()
        
        console.print(f"[dim]Watching {self.source.root} for changes...[/dim]")
        watcher.watch(self.handle_change, stop_event)
        full_pass.join()
    
    def _background_sync(self) -> None:
        try:
            self.sync()
        except ContentSourceError as e:
            console.print(f"[red]{LOG_PREFIX} {escape(str(e))}[/red]")
    
    def sync_file(self, path: Path) -> DocumentOutcome:
        """
        Run the pipeline for one post.
        
        Never raises: any error is reported and returned in the outcome.
        
        Args:
            path: Path of the post.
            
        Returns:
            DocumentOutcome describing what happened.
        """
        try:
            return self._sync_file(path)
        except Exception as e:
            console.print(f"[red]{LOG_PREFIX} Error in {escape(str(path))}:[/red] {escape(str(e))}")
            return DocumentOutcome(source_path=path, status=DocumentStatus.FAILED, error=e)
    
    def _sync_file(self, path: Path) -> DocumentOutcome:
        content = self.source.read(path)
        
        frontmatter = extract_frontmatter(content)
        if self.config.debug:
            for issue in frontmatter.issues:
                console.print(f"[yellow]{LOG_PREFIX} {escape(str(path))}: skipped {escape(str(issue))}[/yellow]")
        
        validation = validate_post(frontmatter.data)
        if not validation.success:
            error = DocumentValidationError(str(path), validation.issues)
            console.print(f"[yellow]{LOG_PREFIX} Validation failed for {escape(str(path))}[/yellow]")
            for issue in validation.issues:
                console.print(f"  [yellow]- {escape(str(issue))}[/yellow]")
            return DocumentOutcome(source_path=path, status=DocumentStatus.INVALID, error=error)
        
        post = validation.output
        
        if post.draft:
            if self.config.debug:
                console.print(f"[dim]{LOG_PREFIX} Skipping draft: {escape(post.path)}[/dim]")
            return DocumentOutcome(
                source_path=path,
                status=DocumentStatus.SKIPPED_DRAFT,
                record_path=post.path,
            )
        
        digest = content_hash(post)
        
        if not self.config.force_sync and not self.state.has_changed(post.path, digest):
            if self.config.debug:
                console.print(f"[dim]{LOG_PREFIX} Skipping {escape(post.path)} (unchanged)[/dim]")
            return DocumentOutcome(
                source_path=path,
                status=DocumentStatus.SKIPPED_UNCHANGED,
                record_path=post.path,
            )
        
        rkey = derive_record_key(post.date, self.config.fixed_clock_id)
        document = build_document(post, self.config.site_url, self.config.collection)
        serialized = json.dumps(document, indent=2, ensure_ascii=False)
        
        if self.config.dry_run:
            console.print(f"[cyan]{LOG_PREFIX} Would push:[/cyan] {escape(post.path)} (rkey {rkey})")
            console.print(serialized, markup=False, highlight=False)
            return DocumentOutcome(
                source_path=path,
                status=DocumentStatus.DRY_RUN,
                record_path=post.path,
                rkey=rkey,
                record=document,
            )
        
        try:
            self.store.put_record(self.config.collection, document, rkey)
        except PublishError as e:
            if e.path is None:
                e.path = str(path)
            raise
        
        console.print(f"[green]{LOG_PREFIX} Pushing:[/green] {escape(post.path)} (rkey {rkey})")
        console.print(serialized, markup=False, highlight=False)
        
        # Only a successful put is remembered, so failures are retried next time
        self.state.mark_published(post.path, digest)
        
        return DocumentOutcome(
            source_path=path,
            status=DocumentStatus.PUBLISHED,
            record_path=post.path,
            rkey=rkey,
            record=document,
        )
    
    def _print_summary(self, result: SyncResult) -> None:
        """Print sync summary."""
        console.print("\n" + "=" * 50)
        console.print("[bold]Sync Summary[/bold]")
        console.print("=" * 50)
        
        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")
        
        published_label = "Posts previewed" if self.config.dry_run else "Posts published"
        table.add_row(published_label, str(len(result.documents_published)))
        table.add_row("Posts skipped", str(len(result.documents_skipped)))
        table.add_row("Posts failed", str(len(result.documents_failed)))
        
        request_count = getattr(self.store, "request_count", None)
        if request_count is not None:
            table.add_row("API requests", str(request_count))
        
        console.print(table)
        
        if result.documents_failed:
            failed = ", ".join(str(p) for p in result.documents_failed)
            console.print(f"\n[red]Failed:[/red] {failed}")
        
        console.print("")
