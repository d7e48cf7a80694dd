"""
PDS client for the sync system.

Writes records with com.atproto.repo.putRecord, which overwrites the
record stored under the same collection and rkey. This is the only call
the sync engine makes: it never lists, reads or deletes records.

Session creation is not handled here; the client is given an access
token that is already valid.
"""

import threading
from typing import Any, Optional, Protocol

import requests
from ratelimit import limits, sleep_and_retry
from rich.console import Console

from .config import Config
from .errors import PublishError

console = Console()

# Stay well under the PDS write limits
RATE_LIMIT_CALLS = 5
RATE_LIMIT_PERIOD = 1  # second

REQUEST_TIMEOUT = 30  # seconds

PUT_RECORD_ENDPOINT = "/xrpc/com.atproto.repo.putRecord"


class RecordStore(Protocol):
    """Anything that can upsert a record by collection and key."""
    
    def put_record(self, collection: str, record: dict[str, Any], rkey: str) -> Any:
        ...


class PDSClient:
    """
    Thin wrapper around the PDS XRPC API with rate limiting.
    
    Handles:
    - Bearer authentication with a pre-issued access token
    - Rate limiting
    - Turning transport and HTTP errors into PublishError
    """
    
    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        """
        Initialize the PDS client.
        
        Args:
            config: Configuration with PDS URL, repo and access token.
            session: Optional requests session (useful for connection reuse).
        """
        config.validate_for_publish()
        self.config = config
        self.session = session or requests.Session()
        self._request_count = 0
        self._count_lock = threading.Lock()
    
    @sleep_and_retry
    @limits(calls=RATE_LIMIT_CALLS, period=RATE_LIMIT_PERIOD)
    def _rate_limited_call(self, func, *args, **kwargs) -> Any:
        """Execute a rate-limited API call."""
        with self._count_lock:
            self._request_count += 1
        return func(*args, **kwargs)
    
    def put_record(self, collection: str, record: dict[str, Any], rkey: str) -> dict:
        """
        Create or overwrite the record at (collection, rkey).
        
        Args:
            collection: NSID of the record collection.
            record: Record body, including its $type.
            rkey: Record key.
            
        Returns:
            The PDS response, containing the record's uri and cid.
            
        Raises:
            PublishError: If the request fails or the PDS rejects it.
        """
        url = f"{self.config.pds_url}{PUT_RECORD_ENDPOINT}"
        payload = {
            "repo": self.config.repo_did,
            "collection": collection,
            "rkey": rkey,
            "record": record,
        }
        headers = {"Authorization": f"Bearer {self.config.access_token}"}
        
        try:
            response = self._rate_limited_call(
                self.session.post,
                url,
                json=payload,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise PublishError(f"Could not reach PDS at {self.config.pds_url}: {e}") from e
        
        if not response.ok:
            body = response.text
            raise PublishError(
                f"PDS rejected {collection}/{rkey} with HTTP {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )
        
        try:
            return response.json()
        except ValueError:
            return {}
    
    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count
