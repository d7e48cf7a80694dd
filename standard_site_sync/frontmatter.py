"""
Frontmatter extraction for blog posts.

Parses the simple `key: value` header at the top of a Markdown file.
Only the shapes blog posts actually use are understood:
- strings (optionally quoted)
- booleans (`true` / `false`)
- inline lists (`[a, "b", c]`)

Anything more elaborate belongs in the content pipeline, not here.
"""

import re
from dataclasses import dataclass, field
from typing import Union

FrontmatterValue = Union[str, bool, list[str]]

FRONTMATTER_PATTERN = re.compile(r"^---\r?\n([\s\S]+?)\r?\n---")

# One quote character at either end
QUOTE_PATTERN = re.compile(r"^[\"']|[\"']$")


@dataclass
class FrontmatterIssue:
    """A header line that could not be parsed and was skipped."""
    
    line_number: int
    line: str
    message: str
    
    def __str__(self) -> str:
        return f"line {self.line_number}: {self.message} ({self.line!r})"


@dataclass
class FrontmatterResult:
    """Extracted header fields plus any lines that were skipped."""
    
    data: dict[str, FrontmatterValue] = field(default_factory=dict)
    issues: list[FrontmatterIssue] = field(default_factory=list)
    
    @property
    def found(self) -> bool:
        """Whether the document had a header block with at least one field."""
        return bool(self.data)


def _unquote(value: str) -> str:
    return QUOTE_PATTERN.sub("", value)


def parse_value(raw: str) -> FrontmatterValue:
    """
    Convert a raw header value to a string, boolean or list.
    
    Examples:
        '"Hello"'      -> "Hello"
        "true"         -> True
        "[a, 'b', c]"  -> ["a", "b", "c"]
    """
    value = _unquote(raw.strip())
    
    if value == "true":
        return True
    if value == "false":
        return False
    
    if value.startswith("[") and value.endswith("]"):
        return [_unquote(item.strip()) for item in value[1:-1].split(",")]
    
    return value


def extract_frontmatter(content: str) -> FrontmatterResult:
    """
    Extract the frontmatter header from a document.
    
    Args:
        content: Raw document text.
        
    Returns:
        FrontmatterResult. `data` is empty if the document has no header.
    """
    result = FrontmatterResult()
    
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return result
    
    # Header starts on line 2, after the opening marker
    for offset, line in enumerate(match.group(1).split("\n")):
        line_number = offset + 2
        line = line.rstrip("\r")
        
        if not line.strip():
            continue
        
        key, sep, raw_value = line.partition(":")
        if not sep:
            result.issues.append(FrontmatterIssue(line_number, line, "missing ':'"))
            continue
        
        key = key.strip()
        if not key:
            result.issues.append(FrontmatterIssue(line_number, line, "empty key"))
            continue
        
        result.data[key] = parse_value(raw_value)
    
    return result
