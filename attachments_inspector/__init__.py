"""PRC Attachments Inspector.

Attachment metadata for posts: a public attachments report and an
editor-facing attachments panel.
"""

from pathlib import Path

PLUGIN_FILE = Path(__file__).resolve()
PLUGIN_DIR = PLUGIN_FILE.parent
PLUGIN_VERSION = "1.0.0"

__version__ = PLUGIN_VERSION
