"""Tests for blog post validation."""

import pytest
from pydantic import ValidationError

from standard_site_sync.schema import BlogPost, blog_path, validate_post


def valid_fields(**overrides):
    fields = {
        "title": "Hello",
        "date": "2024-03-15",
        "description": "First post",
        "slug": "hello-world",
    }
    fields.update(overrides)
    return fields


class TestValidatePost:
    def test_minimal_post(self):
        result = validate_post(valid_fields())

        assert result.success
        post = result.output
        assert post.title == "Hello"
        assert post.draft is False
        assert post.tags is None
        assert post.excerpt is None

    def test_path_derived_from_slug(self):
        result = validate_post(valid_fields())

        assert result.output.path == "/blog/hello-world"

    def test_slug_overrides_raw_path(self):
        result = validate_post(valid_fields(path="/somewhere/else"))

        assert result.output.path == "/blog/hello-world"

    def test_empty_slug_keeps_raw_path(self):
        result = validate_post(valid_fields(slug="", path="/custom"))

        assert result.success
        assert result.output.path == "/custom"

    def test_empty_slug_without_path_rejected(self):
        result = validate_post(valid_fields(slug=""))

        assert not result.success
        assert [i.field for i in result.issues] == ["path"]

    def test_input_is_not_modified(self):
        fields = valid_fields()
        validate_post(fields)

        assert "path" not in fields

    def test_optional_fields(self):
        result = validate_post(
            valid_fields(excerpt="Short", author="npmx", tags=["a", "b"], draft=True)
        )

        post = result.output
        assert post.excerpt == "Short"
        assert post.author == "npmx"
        assert post.tags == ["a", "b"]
        assert post.draft is True

    def test_unknown_fields_ignored(self):
        result = validate_post(valid_fields(layout="post"))

        assert result.success

    def test_missing_required_fields(self):
        result = validate_post({"title": "Hello"})

        assert not result.success
        assert result.output is None
        assert {i.field for i in result.issues} == {"date", "description", "slug"}

    def test_wrong_types_rejected(self):
        result = validate_post(valid_fields(title=True, tags="a, b", draft="yes"))

        assert not result.success
        assert {i.field for i in result.issues} == {"title", "tags", "draft"}

    def test_issue_string_names_field(self):
        result = validate_post(valid_fields(description=False))

        assert str(result.issues[0]).startswith("description: ")

    def test_empty_record(self):
        result = validate_post({})

        assert not result.success
        assert {i.field for i in result.issues} == {"title", "date", "description", "slug"}


def test_blog_path():
    assert blog_path("hello-world") == "/blog/hello-world"


def test_post_is_immutable():
    post = validate_post(valid_fields()).output

    assert isinstance(post, BlogPost)
    with pytest.raises(ValidationError):
        post.title = "Changed"
