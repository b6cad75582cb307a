"""Shared fixtures: an in-memory remote server and a store in tmp_path."""

import io

import pytest

from jobimport.adapters.credentials import ConfigCredentials
from jobimport.adapters.fs_store import FsItemStore
from jobimport.adapters.plugins import ConfiguredPluginRegistry
from jobimport.config import CredentialConfig
from jobimport.errors import TransportError
from jobimport.importer.engine import ImportEngine

REMOTE = "http://remote.example.com"
FOLDER_CLASS = "com.cloudbees.hudson.plugins.folder.Folder"
JOB_CLASS = "hudson.model.FreeStyleProject"


def job_xml(*plugins: str, description: str = "") -> bytes:
    builders = "".join(
        f'<step plugin="{plugin}"><name>{plugin}</name></step>' for plugin in plugins
    )
    return (
        "<?xml version='1.0' encoding='UTF-8'?>\n"
        f"<project><description>{description}</description>"
        f"<builders>{builders}</builders></project>"
    ).encode("utf-8")


def folder_xml(*plugins: str) -> bytes:
    props = "".join(f'<prop plugin="{plugin}"/>' for plugin in plugins)
    return (
        f"<{FOLDER_CLASS}><properties>{props}</properties></{FOLDER_CLASS}>"
    ).encode("utf-8")


class TrackedStream(io.BytesIO):
    pass


class FakeTransport:
    """In-memory remote Jenkins. URLs follow the /job/<name> convention."""

    def __init__(self):
        self.listings: dict[str, list[dict]] = {REMOTE: []}
        self.configs: dict[str, bytes] = {}
        self.failing_listings: set[str] = set()
        self.failing_configs: set[str] = set()
        self.tree_calls: list[str] = []
        self.config_calls: list[str] = []
        self.streams: list[TrackedStream] = []
        self.credentials_seen: list = []

    def add_job(self, parent_url: str, name: str, config: bytes | None = None,
                description: str = "") -> str:
        url = f"{parent_url}/job/{name}"
        self.listings.setdefault(parent_url, []).append({
            "name": name,
            "impl": JOB_CLASS,
            "url": url,
            "description": description,
            "is_folder": False,
        })
        self.configs[url + "/config.xml"] = config if config is not None else job_xml()
        return url

    def add_folder(self, parent_url: str, name: str, config: bytes | None = None) -> str:
        url = f"{parent_url}/job/{name}"
        self.listings.setdefault(parent_url, []).append({
            "name": name,
            "impl": FOLDER_CLASS,
            "url": url,
            "description": "",
            "is_folder": True,
        })
        self.listings[url] = []
        self.configs[url + "/config.xml"] = config if config is not None else folder_xml()
        return url

    def fetch_item_tree(self, url, credentials):
        self.tree_calls.append(url)
        self.credentials_seen.append(credentials)
        if url in self.failing_listings or url not in self.listings:
            raise TransportError(f"404 for {url}", url=url)
        return [dict(node) for node in self.listings[url]]

    def fetch_config(self, url, credentials):
        self.config_calls.append(url)
        self.credentials_seen.append(credentials)
        if url in self.failing_configs or url not in self.configs:
            raise TransportError(f"Could not fetch {url}", url=url)
        stream = TrackedStream(self.configs[url])
        self.streams.append(stream)
        return stream


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def store(tmp_path):
    return FsItemStore(tmp_path / "home")


@pytest.fixture
def plugins():
    return ConfiguredPluginRegistry({"a": "1.0"})


@pytest.fixture
def credentials():
    return ConfigCredentials({"ci": CredentialConfig(username="admin", password="secret")})


@pytest.fixture
def engine(store, transport, plugins, credentials):
    return ImportEngine(store, transport, plugins, credentials)
