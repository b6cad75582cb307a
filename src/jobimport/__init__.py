"""jobimport - copy jobs and folders from a remote Jenkins into a local tree."""

__version__ = "0.3.0"
