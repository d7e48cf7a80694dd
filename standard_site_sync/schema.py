"""
Blog post frontmatter schema.

Validation never raises for bad documents: callers get a ValidationResult
and decide what to do with the issues.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

BLOG_PATH_PREFIX = "/blog"


class BlogPost(BaseModel):
    """Frontmatter of a blog post after validation."""
    
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)
    
    title: str
    date: str
    description: str
    slug: str
    excerpt: Optional[str] = None
    author: Optional[str] = None
    tags: Optional[list[str]] = None
    draft: bool = False
    path: Optional[str] = None


@dataclass
class ValidationIssue:
    """One problem with one field."""
    
    field: str
    message: str
    
    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating extracted frontmatter."""
    
    output: Optional[BlogPost] = None
    issues: list[ValidationIssue] = field(default_factory=list)
    
    @property
    def success(self) -> bool:
        return self.output is not None


def blog_path(slug: str) -> str:
    """Public path of a post, e.g. "hello-world" -> "/blog/hello-world"."""
    return f"{BLOG_PATH_PREFIX}/{slug}"


def _issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "(root)"
        issues.append(ValidationIssue(field=location, message=detail["msg"]))
    return issues


def validate_post(data: dict[str, Any]) -> ValidationResult:
    """
    Validate extracted frontmatter against the BlogPost schema.
    
    The slug decides the path: a raw `path` field is always replaced by
    `/blog/{slug}` when the slug is non-empty. Without a slug the raw
    `path` is kept, and a post with neither is rejected.
    
    Args:
        data: Extracted frontmatter fields.
        
    Returns:
        ValidationResult with either a BlogPost or a list of issues.
    """
    fields = dict(data)
    
    slug = fields.get("slug")
    if isinstance(slug, str) and slug:
        fields["path"] = blog_path(slug)
    
    try:
        post = BlogPost.model_validate(fields)
    except ValidationError as e:
        return ValidationResult(issues=_issues_from_error(e))
    
    if not post.path:
        return ValidationResult(
            issues=[ValidationIssue("path", "Path required when slug is empty")]
        )
    
    return ValidationResult(output=post)
