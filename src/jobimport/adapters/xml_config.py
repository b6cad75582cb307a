"""Helpers for reading Jenkins config.xml payloads."""

from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ..core.utils import is_folder_class
from ..errors import PersistenceError

FOLDER_CONFIG = b"""<?xml version='1.1' encoding='UTF-8'?>
<com.cloudbees.hudson.plugins.folder.Folder>
  <description></description>
  <properties/>
</com.cloudbees.hudson.plugins.folder.Folder>
"""


def parse_config(payload: bytes) -> Element:
    try:
        return ET.fromstring(payload)
    except (ET.ParseError, DefusedXmlException) as e:
        raise PersistenceError(f"Invalid config.xml: {e}") from e


def item_kind(root: Element) -> str:
    """Map the config.xml root element to a local item kind."""
    return "folder" if is_folder_class(root.tag) else "job"
