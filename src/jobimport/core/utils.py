"""Utility functions for jobimport."""

import html
from typing import Iterable, TypeVar
from urllib.parse import quote

SEPARATOR = "/"

T = TypeVar("T")


def clean_remote_string(text: str | None) -> str:
    """
    Sanitize free text received from a remote server.

    Examples:
        >>> clean_remote_string(None)
        ''
        >>> clean_remote_string("  <b>build</b> & test ")
        '&lt;b&gt;build&lt;/b&gt; &amp; test'
    """
    if text is None:
        return ""
    return html.escape(str(text).strip(), quote=False)


def safe_url(base: str, folder: str | None = None) -> str:
    """
    Build the URL of a remote folder below a site URL.

    Examples:
        >>> safe_url("https://ci.example.com/", "team/tools")
        'https://ci.example.com/job/team/job/tools'
        >>> safe_url("https://ci.example.com", None)
        'https://ci.example.com'
    """
    url = base.rstrip("/")
    if not folder:
        return url
    for segment in folder.split(SEPARATOR):
        segment = segment.strip()
        if segment:
            url += "/job/" + quote(segment, safe="")
    return url


def join_path(parent: str | None, name: str) -> str:
    """Join a local folder path and an item name."""
    if not parent:
        return name
    if parent.endswith(SEPARATOR):
        return parent + name
    return f"{parent}{SEPARATOR}{name}"


def split_path(path: str) -> list[str]:
    """Split a local path into its non-empty segments."""
    return [segment for segment in path.strip().split(SEPARATOR) if segment]


def find_remote_item(items: Iterable[T], url: str) -> T | None:
    """Return the first item whose url matches, ignoring a trailing slash."""
    wanted = url.rstrip("/")
    for item in items:
        if item.url.rstrip("/") == wanted:  # type: ignore[attr-defined]
            return item
    return None


FOLDER_CLASSES = frozenset({
    "com.cloudbees.hudson.plugins.folder.Folder",
    "jenkins.branch.OrganizationFolder",
    "org.jenkinsci.plugins.workflow.multibranch.WorkflowMultiBranchProject",
})


def is_folder_class(impl: str | None) -> bool:
    return impl in FOLDER_CLASSES
