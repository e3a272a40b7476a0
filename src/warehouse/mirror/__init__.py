"""Inventory mirror adapter factory.

Uses FakeMirror by default. Set ``MIRROR_ADAPTER=http`` together with
``MIRROR_SYNC_URL`` to push stock levels to a real sync endpoint.
"""

import os

from warehouse.mirror.port import MirrorPort

_mirror_instance: MirrorPort | None = None


def get_mirror() -> MirrorPort:
    """Return the configured mirror adapter (singleton)."""
    global _mirror_instance
    if _mirror_instance is None:
        adapter = os.environ.get("MIRROR_ADAPTER", "fake")
        if adapter == "fake":
            from warehouse.mirror.fake_adapter import FakeMirror

            _mirror_instance = FakeMirror()
        elif adapter == "http":
            from warehouse.mirror.http_adapter import HttpMirror

            sync_url = os.environ.get("MIRROR_SYNC_URL")
            if not sync_url:
                raise ValueError("MIRROR_SYNC_URL must be set when MIRROR_ADAPTER=http")
            _mirror_instance = HttpMirror(
                sync_url=sync_url,
                timeout=float(os.environ.get("MIRROR_SYNC_TIMEOUT", "10")),
            )
        else:
            raise ValueError(f"Unknown mirror adapter: {adapter}")
    return _mirror_instance


def set_mirror(mirror: MirrorPort) -> None:
    """Override the active mirror adapter (useful for tests)."""
    global _mirror_instance
    _mirror_instance = mirror


def reset_mirror() -> None:
    """Reset the mirror singleton."""
    global _mirror_instance
    _mirror_instance = None
