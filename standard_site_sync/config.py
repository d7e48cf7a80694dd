"""
Configuration management for the standard.site document sync.

Loads settings from environment variables and provides
structured configuration for all sync components.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SITE_URL = "https://npmx.dev"
DEFAULT_COLLECTION = "site.standard.document"
DEFAULT_CONTENT_DIR = Path("app") / "pages" / "blog"

# Must stay the same for every run so a publish date always maps to the same rkey
FIXED_CLOCK_ID = 3


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


@dataclass
class Config:
    """
    Central configuration for the sync system.
    
    Loads from environment variables and provides defaults.
    The PDS access token is read from env vars - never hardcoded.
    """
    
    # Site settings
    site_url: str = DEFAULT_SITE_URL
    collection: str = DEFAULT_COLLECTION
    
    # PDS settings
    pds_url: Optional[str] = None
    repo_did: Optional[str] = None
    access_token: Optional[str] = None
    
    # Paths
    repo_root: Path = field(default_factory=lambda: Path.cwd())
    content_dir: Optional[Path] = None
    
    # Sync behavior
    debug: bool = False
    dry_run: bool = False
    force_sync: bool = False
    workers: int = 4
    watch_interval: float = 1.0
    
    document_extension: str = ".md"
    fixed_clock_id: int = FIXED_CLOCK_ID
    
    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables.
        
        Args:
            env_file: Optional path to .env file. If not provided,
                     looks for .env in current directory.
        
        Returns:
            Configured Config instance.
            
        Raises:
            ValueError: If an environment variable holds an invalid value.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
        
        repo_root_str = os.getenv("REPO_ROOT")
        repo_root = Path(repo_root_str) if repo_root_str else Path.cwd()
        
        content_dir_str = os.getenv("CONTENT_DIR")
        content_dir = Path(content_dir_str) if content_dir_str else None
        
        workers_str = os.getenv("SYNC_WORKERS", "4")
        try:
            workers = int(workers_str)
        except ValueError:
            raise ValueError(
                f"SYNC_WORKERS must be an integer, got {workers_str!r}."
            ) from None
        
        interval_str = os.getenv("WATCH_INTERVAL", "1.0")
        try:
            watch_interval = float(interval_str)
        except ValueError:
            raise ValueError(
                f"WATCH_INTERVAL must be a number of seconds, got {interval_str!r}."
            ) from None
        
        # Empty strings count as unset
        return cls(
            site_url=os.getenv("SITE_URL") or DEFAULT_SITE_URL,
            collection=os.getenv("COLLECTION") or DEFAULT_COLLECTION,
            pds_url=os.getenv("PDS_URL") or None,
            repo_did=os.getenv("PDS_REPO") or None,
            access_token=os.getenv("PDS_ACCESS_TOKEN") or None,
            repo_root=repo_root,
            content_dir=content_dir,
            debug=_env_flag("DEBUG"),
            dry_run=_env_flag("DRY_RUN"),
            force_sync=_env_flag("FORCE_SYNC"),
            workers=workers,
            watch_interval=watch_interval,
        )
    
    def validate_for_publish(self) -> None:
        """
        Check that everything needed to write to the PDS is present.
        
        Dry runs never talk to the PDS, so nothing is required for them.
        
        Raises:
            ValueError: If a PDS setting is missing.
        """
        if self.dry_run:
            return
        
        if not self.pds_url:
            raise ValueError(
                "PDS_URL environment variable is required.\n"
                "Set this to the base URL of your PDS, e.g. https://bsky.social"
            )
        
        if not self.repo_did:
            raise ValueError(
                "PDS_REPO environment variable is required.\n"
                "Set this to the DID or handle that owns the records."
            )
        
        if not self.access_token:
            raise ValueError(
                "PDS_ACCESS_TOKEN environment variable is required.\n"
                "Use an access JWT for an app password session on the PDS."
            )
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.repo_root, str):
            self.repo_root = Path(self.repo_root)
        
        if self.content_dir is None:
            self.content_dir = self.repo_root / DEFAULT_CONTENT_DIR
        elif isinstance(self.content_dir, str):
            self.content_dir = Path(self.content_dir)
        
        if not self.content_dir.is_absolute():
            self.content_dir = self.repo_root / self.content_dir
        
        # The record's site field is a URI
        scheme, sep, rest = self.site_url.partition(":")
        if not sep or not scheme or not rest:
            raise ValueError(
                f"SITE_URL must be a URI like https://example.com, got {self.site_url!r}."
            )
        
        if self.workers < 1:
            raise ValueError(f"SYNC_WORKERS must be at least 1, got {self.workers}.")
        
        if self.watch_interval <= 0:
            raise ValueError(
                f"WATCH_INTERVAL must be positive, got {self.watch_interval}."
            )
        
        if self.pds_url:
            self.pds_url = self.pds_url.rstrip("/")
