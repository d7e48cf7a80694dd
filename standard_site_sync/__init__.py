"""
Standard.site Document Sync

Publishes blog posts written as Markdown files to an AT Protocol PDS as
site.standard.document records, one record per publish date.
"""

__version__ = "1.0.0"
__author__ = "npmx contributors"
