import re
from logging import getLogger

from ..core.ports import PluginRegistry
from .xml_config import parse_config

logger = getLogger(__name__)


def version_key(version: str) -> tuple:
    """
    Sort key for plugin version strings, numeric where possible.

    Examples:
        >>> version_key("1.10") > version_key("1.9")
        True
    """
    parts = []
    for segment in re.split(r"[.\-]", version):
        if segment.isdigit():
            parts.append((1, int(segment), ""))
        else:
            parts.append((0, 0, segment))
    return tuple(parts)


def parse_requested_plugins(payload: bytes) -> dict[str, str]:
    """Collect plugin="name@version" attributes from a config.xml."""
    requested: dict[str, str] = {}
    for element in parse_config(payload).iter():
        value = element.get("plugin")
        if not value:
            continue
        name, _, version = value.strip().partition("@")
        if not name:
            continue
        current = requested.get(name)
        if current is None or version_key(version) > version_key(current):
            requested[name] = version
    return dict(sorted(requested.items()))


class ConfiguredPluginRegistry(PluginRegistry):
    """Installed plugins come from configuration; nothing is ever installed."""

    def __init__(self, installed: dict[str, str] | None = None):
        self.installed = dict(installed or {})

    def installed_plugins(self) -> dict[str, str]:
        return dict(self.installed)

    def required_plugins(self, payload: bytes) -> dict[str, str]:
        return parse_requested_plugins(payload)

    def prevalidate(self, payload: bytes) -> dict[str, str]:
        wanted = {
            name: version
            for name, version in parse_requested_plugins(payload).items()
            if name not in self.installed
        }
        for name, version in wanted.items():
            logger.info("Plugin %s@%s is required but not installed", name, version or "?")
        return wanted
