"""
Shared pytest fixtures for sync tests.

Provides an in-memory record store so no test talks to a real PDS.
"""

import threading
from pathlib import Path
from typing import Any

import pytest

from standard_site_sync.config import Config
from standard_site_sync.errors import PublishError


class FakeRecordStore:
    """
    Records every put_record call.

    Paths listed in `fail_paths` are rejected with a PublishError, so tests
    can simulate an upstream failure for chosen posts.
    """

    def __init__(self, fail_paths: set[str] | None = None):
        self.fail_paths = set(fail_paths or ())
        self.calls: list[tuple[str, dict[str, Any], str]] = []
        self.records: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def put_record(self, collection: str, record: dict[str, Any], rkey: str) -> dict:
        with self._lock:
            self.calls.append((collection, record, rkey))
            if record.get("path") in self.fail_paths:
                raise PublishError(f"PDS rejected {collection}/{rkey}", status_code=500)
            self.records[(collection, rkey)] = record
        return {"uri": f"at://did:plc:test/{collection}/{rkey}", "cid": "bafytest"}

    @property
    def published_paths(self) -> list[str]:
        return [record["path"] for _, record, _ in self.calls]


def make_post(
    title: str = "Hello",
    date: str = "2024-03-15",
    description: str = "First post",
    slug: str = "hello-world",
    **extra: Any,
) -> str:
    """Render a Markdown post with frontmatter."""
    fields = {"title": title, "date": date, "description": description, "slug": slug}
    fields.update(extra)
    lines = ["---"]
    for key, value in fields.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, list):
            value = "[" + ", ".join(value) + "]"
        lines.append(f"{key}: {value}")
    lines.append("---")
    lines.append("")
    lines.append(f"# {title}")
    lines.append("")
    return "\n".join(lines)


@pytest.fixture
def fake_store():
    """Create a fresh FakeRecordStore."""
    return FakeRecordStore()


@pytest.fixture
def blog_dir(tmp_path: Path) -> Path:
    """Empty blog content directory."""
    content = tmp_path / "app" / "pages" / "blog"
    content.mkdir(parents=True)
    return content


@pytest.fixture
def config(tmp_path: Path, blog_dir: Path) -> Config:
    """Config pointing at the temporary blog directory and a fake PDS."""
    return Config(
        site_url="https://npmx.dev",
        pds_url="https://pds.example.com",
        repo_did="did:plc:test",
        access_token="test-token",
        repo_root=tmp_path,
        content_dir=blog_dir,
        workers=2,
        watch_interval=0.05,
    )


@pytest.fixture
def write_post(blog_dir: Path):
    """Write a post into the blog directory and return its path."""

    def _write(name: str, content: str) -> Path:
        path = blog_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path.resolve()

    return _write
