"""Import phase: replay remote item configurations into the local store."""

from logging import getLogger
from typing import Iterable

from ..core.model import Credentials, LocalItem, RemoteItem
from ..core.ports import CredentialsResolver, LocalStore, PluginRegistry, Transport
from ..core.utils import SEPARATOR, find_remote_item, join_path, split_path
from ..errors import DuplicateNameError, PersistenceError
from ..messages import (
    format_failed_duplicate_job_name,
    format_failed_exception,
    format_success,
)
from .report import ImportReport

logger = getLogger(__name__)


class ImportEngine:
    """
    Imports selected remote items, one at a time and depth-first.

    Each item's failure is recorded in the report and never propagates, so
    siblings and already imported items are unaffected.
    """

    def __init__(
        self,
        store: LocalStore,
        transport: Transport,
        plugins: PluginRegistry,
        credentials: CredentialsResolver,
    ):
        self.store = store
        self.transport = transport
        self.plugins = plugins
        self.credentials = credentials

    def run(
        self,
        job_urls: Iterable[str],
        local_path: str | None,
        credential_id: str | None,
        install_plugins: bool,
        update: bool,
        disable_urls: Iterable[str],
        discovered: Iterable[RemoteItem],
    ) -> ImportReport:
        """Import every selected url in order and return the report."""
        report = ImportReport()
        discovered = list(discovered)
        disable = {url.rstrip("/") for url in disable_urls}
        for job_url in job_urls:
            self.import_item(
                job_url,
                local_path,
                credential_id,
                install_plugins,
                update,
                job_url.rstrip("/") in disable,
                discovered,
                report,
            )
        return report

    def import_item(
        self,
        job_url: str,
        local_path: str | None,
        credential_id: str | None,
        install_plugins: bool,
        update: bool,
        disable: bool,
        discovered: Iterable[RemoteItem],
        report: ImportReport,
    ) -> None:
        """
        Import one remote item and, for folders, its children.

        Args:
            job_url: URL of the remote item; must be present in discovered
            local_path: Local folder to import into; empty or None for top level
            credential_id: Credentials for the remote server
            install_plugins: Prevalidate plugins referenced by the config
            update: Update an existing local item instead of failing
            disable: Disable imported jobs
            discovered: Items from the query phase
            report: Receives one status per visited item
        """
        remote = find_remote_item(discovered, job_url)
        if remote is None:
            logger.debug("Ignoring %s: not among the discovered items", job_url)
            return

        report.ensure(remote)

        # Nothing has been written yet, so a failure here needs no cleanup
        try:
            self._check_duplicate(remote, local_path, update)
            existed = self.store.get(remote.name) is not None
        except DuplicateNameError as e:
            logger.info("Skipping %s: %s", remote.full_name, e)
            report.set_status(remote, format_failed_duplicate_job_name())
            return
        except Exception as e:
            logger.warning("Job import failed: %s", e)
            report.set_status(remote, format_failed_exception(e))
            return

        try:
            credentials = self.credentials.resolve(credential_id)
            created = self._import_one(remote, local_path, credentials, install_plugins, update, disable)
            report.set_status(remote, format_success())
        except Exception as e:
            logger.warning("Job import failed: %s", e)
            logger.debug("Import of %s failed", remote.url, exc_info=True)
            report.set_status(remote, format_failed_exception(e))
            if not existed and not remote.has_parent():
                self._cleanup(remote)
            return

        if remote.is_folder and remote.has_children():
            for child in remote.children:
                self.import_item(
                    child.url,
                    created.full_name,
                    credential_id,
                    install_plugins,
                    update,
                    disable,
                    discovered,
                    report,
                )

    def _check_duplicate(self, remote: RemoteItem, local_path: str | None, update: bool) -> None:
        if update:
            return
        destination = join_path(local_path, remote.name) if local_path else remote.name
        if self.store.exists(destination):
            raise DuplicateNameError(destination)

    def _import_one(
        self,
        remote: RemoteItem,
        local_path: str | None,
        credentials: Credentials,
        install_plugins: bool,
        update: bool,
        disable: bool,
    ) -> LocalItem:
        with self.transport.fetch_config(remote.url.rstrip("/") + "/config.xml", credentials) as stream:
            payload = stream.read()

        current = self.store.get_by_full_path(remote.full_name)
        if update and current is not None:
            self.store.update_from_config(current, payload)
            item = current
        elif local_path and local_path.strip() != SEPARATOR:
            folder = self.materialize(split_path(local_path))
            item = self.store.create_from_config(folder, remote.name, payload)
        elif remote.has_parent():
            folder = self.materialize(split_path(remote.full_name)[:-1])
            item = self.store.create_from_config(folder, remote.name, payload)
        else:
            item = self.store.create_from_config(None, remote.name, payload)

        if install_plugins:
            self.plugins.prevalidate(payload)

        self.store.save(item)

        if disable and item.can_disable:
            self.store.disable(item)

        required = self.plugins.required_plugins(payload)
        installed = self.plugins.installed_plugins()
        remote.missing_plugins = {
            name: version
            for name, version in sorted(required.items())
            if name not in installed
        }
        return item

    def materialize(self, folders: list[str]) -> str:
        """
        Make sure every folder along the path exists, creating only the
        missing ones. Returns the full path of the last folder.
        """
        path = ""
        for name in folders:
            parent = path
            path = join_path(parent, name)
            existing = self.store.get_by_full_path(path)
            if existing is None:
                logger.info("Creating folder %s", path)
                self.store.create_folder(parent or None, name)
            elif not existing.is_folder:
                raise PersistenceError(f"'{path}' exists and is not a folder")
        return path

    def _cleanup(self, remote: RemoteItem) -> None:
        """Delete the top-level item a failed import of remote may have left behind."""
        try:
            created = self.store.get(remote.name)
            if created is not None:
                self.store.delete(created)
        except (PersistenceError, InterruptedError, OSError) as e:
            logger.warning("Cleanup after failed import of %s failed: %s", remote.full_name, e)
