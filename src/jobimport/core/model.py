from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterator

from .utils import SEPARATOR, clean_remote_string


@total_ordering
@dataclass(eq=False)
class RemoteItem:
    """
    A job or folder discovered on a remote server.

    Identity is (impl, full_name); ordering is by full_name. Only
    missing_plugins changes after construction, once per import attempt.
    """

    name: str
    impl: str
    url: str
    description: str | None = ""
    parent: RemoteFolder | None = field(default=None, repr=False)
    full_name: str = field(init=False)
    missing_plugins: dict[str, str] | None = field(default=None, init=False)

    is_folder = False

    def __post_init__(self) -> None:
        self.description = clean_remote_string(self.description)
        if self.parent is None:
            self.full_name = self.name
        else:
            self.full_name = f"{self.parent.full_name}{SEPARATOR}{self.name}"

    def has_parent(self) -> bool:
        return self.parent is not None

    def _key(self) -> tuple[str, str]:
        return (self.full_name, self.impl)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RemoteItem):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: RemoteItem) -> bool:
        if not isinstance(other, RemoteItem):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass(eq=False)
class RemoteJob(RemoteItem):
    pass


@dataclass(eq=False)
class RemoteFolder(RemoteItem):
    # dict keys give an insertion-ordered set under RemoteItem equality
    _children: dict[RemoteItem, None] = field(default_factory=dict, init=False, repr=False)

    is_folder = True

    @property
    def children(self) -> list[RemoteItem]:
        return list(self._children)

    def add_child(self, item: RemoteItem) -> None:
        self._children.setdefault(item, None)

    def has_children(self) -> bool:
        return bool(self._children)

    def __iter__(self) -> Iterator[RemoteItem]:
        return iter(self._children)


@dataclass(frozen=True)
class Credentials:
    username: str = ""
    password: str = ""

    @property
    def anonymous(self) -> bool:
        return not self.username


@dataclass(frozen=True)
class Site:
    name: str
    url: str
    default_credentials_id: str = ""


@dataclass
class LocalItem:
    """An item in the local store."""

    full_name: str
    kind: str  # "job" | "folder"
    disabled: bool = False

    @property
    def name(self) -> str:
        return self.full_name.rsplit(SEPARATOR, 1)[-1]

    @property
    def is_folder(self) -> bool:
        return self.kind == "folder"

    @property
    def can_disable(self) -> bool:
        return self.kind == "job"


@dataclass
class ImportStatus:
    target: RemoteItem
    status: str
