from typing import Any, BinaryIO, Protocol

from .model import Credentials, LocalItem


class Transport(Protocol):
    """
    Authenticated access to a remote server's JSON API and config.xml files.
    """

    def fetch_item_tree(self, url: str, credentials: Credentials) -> list[dict[str, Any]]:
        """
        Return the items directly below url. Each node carries name, impl,
        url, description and is_folder; a node may also carry children.
        """
        pass

    def fetch_config(self, url: str, credentials: Credentials) -> BinaryIO:
        pass


class LocalStore(Protocol):
    """
    Hierarchical item namespace, addressed by slash-separated full names.
    """

    def exists(self, path: str) -> bool:
        pass

    def get(self, name: str) -> LocalItem | None:
        """Top-level item by bare name."""
        pass

    def get_by_full_path(self, path: str) -> LocalItem | None:
        pass

    def create_folder(self, parent_path: str | None, name: str) -> LocalItem:
        pass

    def create_from_config(self, parent_path: str | None, name: str, payload: bytes) -> LocalItem:
        pass

    def update_from_config(self, item: LocalItem, payload: bytes) -> None:
        pass

    def save(self, item: LocalItem) -> None:
        pass

    def delete(self, item: LocalItem) -> None:
        pass

    def disable(self, item: LocalItem) -> None:
        pass


class PluginRegistry(Protocol):
    def installed_plugins(self) -> dict[str, str]:
        pass

    def required_plugins(self, payload: bytes) -> dict[str, str]:
        pass

    def prevalidate(self, payload: bytes) -> dict[str, str]:
        pass


class CredentialsResolver(Protocol):
    def resolve(self, credential_id: str | None) -> Credentials:
        """Never fails; unknown ids resolve to anonymous credentials."""
        pass
