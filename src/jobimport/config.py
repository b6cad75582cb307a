"""Configuration loader for jobimport.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.model import Site
from .errors import ConfigError

CONFIG_NAME = "jobimport.toml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StoreConfig:
    """Local item store configuration."""
    root: Path


@dataclass
class HttpConfig:
    """Remote API client configuration."""
    timeout: float = 30
    retries: int = 3
    backoff_factor: float = 0.5
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504)


@dataclass
class CredentialConfig:
    username: str = ""
    password: str = ""
    password_env: str | None = None


@dataclass
class PluginConfig:
    """Plugins installed on the destination, name -> version."""
    installed: dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class JobImportConfig:
    """Complete jobimport configuration."""
    store: StoreConfig
    http: HttpConfig
    sites: list[Site]
    credentials: dict[str, CredentialConfig]
    plugins: PluginConfig
    logging: LoggingConfig

    def find_site(self, name: str) -> Site:
        for site in self.sites:
            if site.name == name:
                return site
        raise ConfigError(f"Unknown site: {name}")


def load_config(config_path: Path | None = None, root_path: Path | None = None) -> JobImportConfig:
    """
    Load configuration from jobimport.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/jobimport.toml
    3. root_path/jobimport.toml

    Args:
        config_path: Explicit path to config file
        root_path: Local store root for fallback search

    Returns:
        JobImportConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if root_path:
        search_paths.append(root_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid config file {path}: {e}") from e
            break

    # Parse store config
    store_data = toml_data.get("store", {})
    store_config = StoreConfig(
        root=Path(store_data.get("root", root_path or Path("./jenkins-home"))),
    )

    # Parse HTTP config
    http_data = toml_data.get("http", {})
    defaults = HttpConfig()
    http_config = HttpConfig(
        timeout=http_data.get("timeout", defaults.timeout),
        retries=http_data.get("retries", defaults.retries),
        backoff_factor=http_data.get("backoff_factor", defaults.backoff_factor),
        status_forcelist=tuple(http_data.get("status_forcelist", defaults.status_forcelist)),
    )

    # Parse sites
    sites_data = toml_data.get("sites", [])
    if not isinstance(sites_data, list):
        raise ConfigError("'sites' must be an array of tables")
    sites = []
    for site_data in sites_data:
        if not isinstance(site_data, dict) or "name" not in site_data or "url" not in site_data:
            raise ConfigError("Each site needs a 'name' and a 'url'")
        sites.append(Site(
            name=site_data["name"],
            url=site_data["url"],
            default_credentials_id=site_data.get("default_credentials_id", ""),
        ))

    # Parse credentials
    credentials_data = toml_data.get("credentials", {})
    if not isinstance(credentials_data, dict):
        raise ConfigError("'credentials' must be a table")
    credentials = {}
    for credential_id, entry in credentials_data.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"Credentials '{credential_id}' must be a table")
        credentials[credential_id] = CredentialConfig(
            username=entry.get("username", ""),
            password=entry.get("password", ""),
            password_env=entry.get("password_env"),
        )

    # Parse plugins
    plugins_data = toml_data.get("plugins", {})
    plugin_config = PluginConfig(
        installed={str(k): str(v) for k, v in plugins_data.get("installed", {}).items()},
    )

    logging_data = toml_data.get("logging", {})
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "WARNING")).upper(),
    )
    if logging_config.level not in LOG_LEVELS:
        raise ConfigError(f"Unknown logging level: {logging_config.level}")

    return JobImportConfig(
        store=store_config,
        http=http_config,
        sites=sites,
        credentials=credentials,
        plugins=plugin_config,
        logging=logging_config,
    )
