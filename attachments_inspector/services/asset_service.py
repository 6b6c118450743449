"""
Asset Service

Request-scoped registry of script and style bundles. Bundles are versioned
by the ``index.asset.json`` manifest their build step writes next to them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlencode

from attachments_inspector.exceptions import AssetRegistrationError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "index.asset.json"
SCRIPT_FILENAME = "index.js"
STYLE_FILENAME = "style-index.css"

# Host handles every inspector bundle depends on
SCRIPT_HOST_DEPENDENCIES = ["media-editor"]
STYLE_HOST_DEPENDENCIES = ["wp-components"]


@dataclass
class Asset:
    handle: str
    src: str
    dependencies: list[str] = field(default_factory=list)
    version: str | None = None
    in_footer: bool = False

    @property
    def url(self) -> str:
        if not self.version:
            return self.src
        return f"{self.src}?{urlencode({'ver': self.version})}"


def load_manifest(build_dir: Path) -> dict | None:
    """
    Read a bundle's build manifest.

    Returns None when the manifest is missing or unreadable.
    """
    manifest_path = build_dir / MANIFEST_FILENAME
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Failed to read asset manifest %s: %s", manifest_path, exc)
        return None
    if not isinstance(manifest, dict):
        logger.warning("Asset manifest %s is not an object", manifest_path)
        return None
    return manifest


class AssetRegistry:
    """Registered and enqueued script/style handles for one page render."""

    def __init__(self) -> None:
        self._scripts: dict[str, Asset] = {}
        self._styles: dict[str, Asset] = {}
        self._enqueued_scripts: list[str] = []
        self._enqueued_styles: list[str] = []

    # ── Registration ──────────────────────────────────────────────────────────

    def register_script(self, asset: Asset) -> bool:
        existing = self._scripts.get(asset.handle)
        if existing is not None:
            return existing == asset
        self._scripts[asset.handle] = asset
        return True

    def register_style(self, asset: Asset) -> bool:
        existing = self._styles.get(asset.handle)
        if existing is not None:
            return existing == asset
        self._styles[asset.handle] = asset
        return True

    def register_bundle(self, handle: str, build_dir: Path, base_url: str) -> bool | AssetRegistrationError:
        """
        Register the script and style of a built bundle under ``handle``.

        Returns True, or an AssetRegistrationError value tagged with the
        handle when the manifest is unusable or a handle conflicts.
        """
        manifest = load_manifest(build_dir)
        if manifest is None:
            return AssetRegistrationError(handle)

        version = manifest.get("version")
        base_url = base_url.rstrip("/")

        script = self.register_script(
            Asset(
                handle=handle,
                src=f"{base_url}/{SCRIPT_FILENAME}",
                dependencies=[*manifest.get("dependencies", []), *SCRIPT_HOST_DEPENDENCIES],
                version=version,
                in_footer=True,
            )
        )
        style = self.register_style(
            Asset(
                handle=handle,
                src=f"{base_url}/{STYLE_FILENAME}",
                dependencies=list(STYLE_HOST_DEPENDENCIES),
                version=version,
            )
        )

        if not script or not style:
            return AssetRegistrationError(handle)
        return True

    def is_registered(self, handle: str) -> bool:
        return handle in self._scripts and handle in self._styles

    # ── Enqueueing ────────────────────────────────────────────────────────────

    def enqueue_script(self, handle: str) -> None:
        if handle not in self._scripts:
            logger.warning("Cannot enqueue unregistered script %s", handle)
            return
        if handle not in self._enqueued_scripts:
            self._enqueued_scripts.append(handle)

    def enqueue_style(self, handle: str) -> None:
        if handle not in self._styles:
            logger.warning("Cannot enqueue unregistered style %s", handle)
            return
        if handle not in self._enqueued_styles:
            self._enqueued_styles.append(handle)

    def enqueue(self, handle: str) -> None:
        self.enqueue_script(handle)
        self.enqueue_style(handle)

    def is_enqueued(self, handle: str) -> bool:
        return handle in self._enqueued_scripts or handle in self._enqueued_styles

    # ── Rendering ─────────────────────────────────────────────────────────────

    def head_scripts(self) -> list[Asset]:
        return [self._scripts[h] for h in self._enqueued_scripts if not self._scripts[h].in_footer]

    def footer_scripts(self) -> list[Asset]:
        return [self._scripts[h] for h in self._enqueued_scripts if self._scripts[h].in_footer]

    def styles(self) -> list[Asset]:
        return [self._styles[h] for h in self._enqueued_styles]
