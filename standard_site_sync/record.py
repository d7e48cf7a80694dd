"""
Builds site.standard.document records from validated posts.
"""

from typing import Any

from .dates import format_iso, parse_published_at
from .schema import BlogPost

DOCUMENT_TYPE = "site.standard.document"


def build_document(
    post: BlogPost,
    site_url: str,
    collection: str = DOCUMENT_TYPE,
) -> dict[str, Any]:
    """
    Map a validated post to a site.standard.document record.
    
    Args:
        post: Validated blog post.
        site_url: URI of the site the document belongs to.
        collection: Record type, also used as the $type field.
        
    Returns:
        Record dict ready to be sent to the PDS.
        
    Raises:
        InvalidDateError: If the post date is not an ISO-8601 date.
    """
    # excerpt stands in when there is no description
    description = post.description if post.description is not None else post.excerpt
    
    document: dict[str, Any] = {
        "$type": collection,
        "site": site_url,
        "path": post.path,
        "title": post.title,
        "description": description,
    }
    
    if post.tags is not None:
        document["tags"] = list(post.tags)
    
    document["publishedAt"] = format_iso(parse_published_at(post.date))
    
    return document
