"""Query phase: walk a remote item tree and build the candidate set."""

from logging import getLogger
from typing import Any

from ..core.model import Credentials, RemoteFolder, RemoteItem, RemoteJob, Site
from ..core.ports import Transport
from ..core.utils import safe_url
from ..errors import DiscoveryError, TransportError

logger = getLogger(__name__)


def build_item(node: dict[str, Any], parent: RemoteFolder | None) -> RemoteItem:
    """Turn one listing node into a RemoteJob or RemoteFolder."""
    name = node.get("name")
    url = node.get("url")
    if not name or not url:
        raise TransportError(f"Item listing entry is missing a name or url: {node!r}")

    cls = RemoteFolder if node.get("is_folder") else RemoteJob
    return cls(
        name=str(name),
        impl=str(node.get("impl") or ""),
        url=str(url),
        description=node.get("description"),
        parent=parent,
    )


def _build_level(
    nodes: list[dict[str, Any]],
    parent: RemoteFolder | None,
    credentials: Credentials,
    recursive: bool,
    transport: Transport,
    failures: dict[str, str] | None,
    found: set[RemoteItem],
) -> list[RemoteItem]:
    """Build one listing level into found; returns the level's items in order."""
    level: list[RemoteItem] = []
    for node in nodes:
        item = build_item(node, parent)
        found.add(item)
        level.append(item)

        if not (recursive and isinstance(item, RemoteFolder)):
            continue

        # Sub-folder failures are isolated to the folder that raised them.
        # Its children are attached only once the whole sub-tree was built.
        subtree: set[RemoteItem] = set()
        try:
            children = node.get("children")
            if children is None:
                children = transport.fetch_item_tree(item.url, credentials)
            for child in _build_level(children, item, credentials, recursive, transport, failures, subtree):
                item.add_child(child)
            found.update(subtree)
        except DiscoveryError:
            raise
        except TransportError as e:
            if failures is None:
                raise DiscoveryError(
                    f"Could not list folder {item.full_name}: {e}", url=item.url
                ) from e
            logger.warning("Could not list folder %s (%s): %s", item.full_name, item.url, e)
            failures[item.url] = str(e)

    return level


def discover(
    parent: RemoteFolder | None,
    url: str,
    credentials: Credentials,
    recursive: bool,
    transport: Transport,
    failures: dict[str, str] | None = None,
) -> set[RemoteItem]:
    """
    Discover the remote items below url.

    Args:
        parent: Folder the listed items belong to, None at the top level
        url: Remote folder (or server root) URL
        credentials: Credentials for the remote server
        recursive: Expand every discovered folder, depth-first
        transport: Remote API client
        failures: Optional collector; sub-folder failures are recorded here
            (folder url -> message) instead of raised

    Returns:
        Set of every discovered item. Folders have their children attached.

    Raises:
        TransportError: The listing at url itself could not be fetched or parsed
        DiscoveryError: A sub-folder could not be listed and no collector was given
    """
    nodes = transport.fetch_item_tree(url, credentials)
    found: set[RemoteItem] = set()
    level = _build_level(nodes, parent, credentials, recursive, transport, failures, found)
    if parent is not None:
        for item in level:
            parent.add_child(item)
    logger.info("Discovered %d items below %s (recursive=%s)", len(found), url, recursive)
    return found


def query(
    site: Site,
    folder: str | None,
    credentials: Credentials,
    recursive: bool,
    transport: Transport,
    failures: dict[str, str] | None = None,
) -> list[RemoteItem]:
    """Discover the items of a configured site below an optional remote folder."""
    url = safe_url(site.url, folder)
    return sorted(discover(None, url, credentials, recursive, transport, failures))
