"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.credentials import ConfigCredentials
from .adapters.fs_store import FsItemStore
from .adapters.plugins import ConfiguredPluginRegistry
from .adapters.rest_client import RestApiClient
from .config import JobImportConfig, load_config
from .core.ports import CredentialsResolver, Transport
from .importer.engine import ImportEngine


@dataclass
class Runtime:
    """Container for all wired components."""
    store: FsItemStore
    transport: Transport
    plugins: ConfiguredPluginRegistry
    credentials: CredentialsResolver
    engine: ImportEngine
    config: JobImportConfig


def build_runtime(
    root_path: Path | None = None,
    config_path: Path | None = None,
    transport: Transport | None = None,
) -> Runtime:
    """Build and wire all components for a local store."""
    config = load_config(config_path=config_path, root_path=root_path)

    # CLI root overrides config
    if root_path is None:
        root_path = config.store.root

    store = FsItemStore(root_path)
    transport = transport or RestApiClient(config.http)
    plugins = ConfiguredPluginRegistry(config.plugins.installed)
    credentials = ConfigCredentials(config.credentials)
    engine = ImportEngine(store, transport, plugins, credentials)

    return Runtime(
        store=store,
        transport=transport,
        plugins=plugins,
        credentials=credentials,
        engine=engine,
        config=config,
    )
