"""Tests for URL and path helpers."""

import pytest

from jobimport.core.model import RemoteJob
from jobimport.core.utils import (
    clean_remote_string,
    find_remote_item,
    is_folder_class,
    join_path,
    safe_url,
    split_path,
)


@pytest.mark.parametrize("base,folder,expected", [
    ("https://ci.example.com", None, "https://ci.example.com"),
    ("https://ci.example.com/", "", "https://ci.example.com"),
    ("https://ci.example.com/", "team", "https://ci.example.com/job/team"),
    ("https://ci.example.com", "/team/tools/", "https://ci.example.com/job/team/job/tools"),
    ("https://ci.example.com", "my team", "https://ci.example.com/job/my%20team"),
])
def test_safe_url(base, folder, expected):
    assert safe_url(base, folder) == expected


def test_join_and_split_path():
    assert join_path(None, "job") == "job"
    assert join_path("", "job") == "job"
    assert join_path("a/b", "job") == "a/b/job"
    assert join_path("a/b/", "job") == "a/b/job"
    assert split_path(" /a//b/ ") == ["a", "b"]
    assert split_path("/") == []


def test_clean_remote_string():
    assert clean_remote_string(None) == ""
    assert clean_remote_string("  plain ") == "plain"
    assert clean_remote_string("a & <b>") == "a &amp; &lt;b&gt;"


def test_find_remote_item_ignores_trailing_slash():
    items = [
        RemoteJob(name="a", impl="x", url="http://r/job/a/"),
        RemoteJob(name="b", impl="x", url="http://r/job/b"),
    ]
    assert find_remote_item(items, "http://r/job/a").name == "a"
    assert find_remote_item(items, "http://r/job/b/").name == "b"
    assert find_remote_item(items, "http://r/job/c") is None


def test_is_folder_class():
    assert is_folder_class("com.cloudbees.hudson.plugins.folder.Folder")
    assert not is_folder_class("hudson.model.FreeStyleProject")
    assert not is_folder_class(None)
