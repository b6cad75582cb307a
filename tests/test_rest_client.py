"""Tests for the Jenkins REST API client."""

from unittest import mock

import pytest
import requests

from jobimport.adapters.rest_client import TREE_QUERY, RestApiClient, requests_retry_session
from jobimport.config import HttpConfig
from jobimport.core.model import Credentials
from jobimport.errors import TransportError


class MockResponse:
    def __init__(self, data=None, content=b"", status_code=200, bad_json=False):
        self.data = data
        self.content = content
        self.status_code = status_code
        self.bad_json = bad_json
        self.closed = False

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def close(self):
        self.closed = True


LISTING = {
    "_class": "hudson.model.Hudson",
    "jobs": [
        {"_class": "hudson.model.FreeStyleProject", "name": "build",
         "url": "https://ci/job/build/", "description": "Builds"},
        {"_class": "com.cloudbees.hudson.plugins.folder.Folder", "name": "team",
         "url": "https://ci/job/team/", "description": None, "jobs": []},
        {"_class": "com.example.CustomFolder", "name": "custom",
         "url": "https://ci/job/custom/", "jobs": [{"name": "x"}]},
    ],
}


@mock.patch.object(requests.Session, "get")
def test_fetch_item_tree(mock_get):
    """Test listings are requested with the tree filter and normalized."""
    mock_get.return_value = MockResponse(LISTING)
    client = RestApiClient(HttpConfig(timeout=5))

    nodes = client.fetch_item_tree("https://ci/job/team/", Credentials("admin", "pw"))

    mock_get.assert_called_once_with(
        "https://ci/job/team/api/json",
        auth=("admin", "pw"),
        timeout=5,
        params={"tree": TREE_QUERY},
    )
    assert [n["name"] for n in nodes] == ["build", "team", "custom"]
    assert [n["is_folder"] for n in nodes] == [False, True, True]
    assert nodes[0]["impl"] == "hudson.model.FreeStyleProject"
    assert nodes[0]["description"] == "Builds"


@mock.patch.object(requests.Session, "get")
def test_anonymous_requests_send_no_auth(mock_get):
    mock_get.return_value = MockResponse({"jobs": []})

    assert RestApiClient().fetch_item_tree("https://ci", Credentials()) == []
    assert mock_get.call_args.kwargs["auth"] is None


@mock.patch.object(requests.Session, "get")
def test_http_error_becomes_transport_error(mock_get):
    mock_get.return_value = MockResponse(status_code=403)

    with pytest.raises(TransportError) as excinfo:
        RestApiClient().fetch_item_tree("https://ci", Credentials())

    assert excinfo.value.url == "https://ci/api/json"
    assert "403" in str(excinfo.value)


@mock.patch.object(requests.Session, "get")
def test_connection_error_becomes_transport_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(TransportError, match="refused"):
        RestApiClient().fetch_config("https://ci/job/a/config.xml", Credentials())


@mock.patch.object(requests.Session, "get")
def test_malformed_listing(mock_get):
    mock_get.return_value = MockResponse(bad_json=True)
    with pytest.raises(TransportError, match="Malformed item listing"):
        RestApiClient().fetch_item_tree("https://ci", Credentials())

    mock_get.return_value = MockResponse(["not", "a", "dict"])
    with pytest.raises(TransportError, match="Malformed item listing"):
        RestApiClient().fetch_item_tree("https://ci", Credentials())


@pytest.mark.parametrize("jobs", [[None], ["build"], {"name": "build"}, "build"])
@mock.patch.object(requests.Session, "get")
def test_malformed_jobs_entries(mock_get, jobs):
    mock_get.return_value = MockResponse({"jobs": jobs})

    with pytest.raises(TransportError, match="Malformed item listing") as excinfo:
        RestApiClient().fetch_item_tree("https://ci/job/team", Credentials())

    assert excinfo.value.url == "https://ci/job/team"


@mock.patch.object(requests.Session, "get")
def test_fetch_config_returns_closed_response_body(mock_get):
    response = MockResponse(content=b"<project/>")
    mock_get.return_value = response

    with RestApiClient().fetch_config("https://ci/job/a/config.xml", Credentials()) as stream:
        assert stream.read() == b"<project/>"

    assert response.closed


def test_retry_session_mounts_adapters():
    session = requests_retry_session(retries=5, backoff_factor=1)
    retry = session.get_adapter("https://ci").max_retries

    assert retry.total == 5
    assert retry.backoff_factor == 1
    assert 503 in retry.status_forcelist
