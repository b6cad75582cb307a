import shutil
from logging import getLogger
from pathlib import Path

import yaml

from ..core.model import LocalItem
from ..core.ports import LocalStore
from ..core.utils import join_path, split_path
from ..errors import PersistenceError
from .xml_config import FOLDER_CONFIG, item_kind, parse_config

logger = getLogger(__name__)

CONFIG_FILE = "config.xml"
STATE_FILE = "state.yaml"


class FsItemStore(LocalStore):
    """
    Item tree laid out like JENKINS_HOME: <root>/jobs/<a>/jobs/<b>/config.xml,
    with a state.yaml sidecar next to each config.xml.
    """

    def __init__(self, root: Path):
        self.root = root

    def _dir(self, path: str) -> Path:
        d = self.root
        for segment in split_path(path):
            d = d / "jobs" / segment
        return d

    def _read_state(self, path: str) -> dict | None:
        p = self._dir(path) / STATE_FILE
        if not split_path(path) or not p.exists():
            return None
        try:
            return yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise PersistenceError(f"Corrupt state for '{path}': {e}") from e

    def exists(self, path: str) -> bool:
        return self._read_state(path) is not None

    def get(self, name: str) -> LocalItem | None:
        if len(split_path(name)) != 1:
            return None
        return self.get_by_full_path(name)

    def get_by_full_path(self, path: str) -> LocalItem | None:
        state = self._read_state(path)
        if state is None:
            return None
        return LocalItem(
            full_name="/".join(split_path(path)),
            kind=state.get("kind", "job"),
            disabled=bool(state.get("disabled", False)),
        )

    def _check_parent(self, parent_path: str | None) -> None:
        if not parent_path or not split_path(parent_path):
            return
        parent = self.get_by_full_path(parent_path)
        if parent is None:
            raise PersistenceError(f"No such folder: '{parent_path}'")
        if not parent.is_folder:
            raise PersistenceError(f"'{parent_path}' is not a folder")

    def _create(self, parent_path: str | None, name: str, kind: str, payload: bytes) -> LocalItem:
        if not name or "/" in name or name in (".", ".."):
            raise PersistenceError(f"Invalid item name: '{name}'")
        self._check_parent(parent_path)
        full_name = "/".join(split_path(join_path(parent_path, name)))
        if self.exists(full_name):
            raise PersistenceError(f"An item named '{full_name}' already exists")

        d = self._dir(full_name)
        d.mkdir(parents=True, exist_ok=True)
        (d / CONFIG_FILE).write_bytes(payload)
        item = LocalItem(full_name=full_name, kind=kind)
        self.save(item)
        logger.info("Created %s %s", kind, full_name)
        return item

    def create_folder(self, parent_path: str | None, name: str) -> LocalItem:
        return self._create(parent_path, name, "folder", FOLDER_CONFIG)

    def create_from_config(self, parent_path: str | None, name: str, payload: bytes) -> LocalItem:
        kind = item_kind(parse_config(payload))
        return self._create(parent_path, name, kind, payload)

    def update_from_config(self, item: LocalItem, payload: bytes) -> None:
        kind = item_kind(parse_config(payload))
        if kind != item.kind:
            raise PersistenceError(
                f"Cannot update {item.kind} '{item.full_name}' from a {kind} configuration"
            )
        (self._dir(item.full_name) / CONFIG_FILE).write_bytes(payload)
        logger.info("Updated %s %s", item.kind, item.full_name)

    def read_config(self, path: str) -> bytes | None:
        p = self._dir(path) / CONFIG_FILE
        return p.read_bytes() if split_path(path) and p.exists() else None

    def save(self, item: LocalItem) -> None:
        d = self._dir(item.full_name)
        if not d.exists():
            raise PersistenceError(f"Cannot save '{item.full_name}': item does not exist")
        state = {"kind": item.kind, "disabled": item.disabled}
        tmp_path = d / (STATE_FILE + ".tmp")
        tmp_path.write_text(yaml.safe_dump(state, sort_keys=False), encoding="utf-8")
        tmp_path.replace(d / STATE_FILE)

    def delete(self, item: LocalItem) -> None:
        d = self._dir(item.full_name)
        if d.exists():
            shutil.rmtree(d)
            logger.info("Deleted %s", item.full_name)

    def disable(self, item: LocalItem) -> None:
        if not item.can_disable:
            raise PersistenceError(f"'{item.full_name}' cannot be disabled")
        item.disabled = True
        self.save(item)
