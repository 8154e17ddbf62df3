"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any


def _host(api: str, player: str) -> dict[str, Any]:
    endpoint = f"https://{api}/api/v1/video/manage"
    return {
        "enabled": True,
        "primary": {"endpoint": endpoint, "api_key": ""},
        "fallback": {"endpoint": endpoint, "api_key": ""},
        "embed_base": f"https://{player}/#",
        "download_base": f"https://{player}/#",
    }


DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "skyflix",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "Skyflix/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "memory",
        "dir": "./.cache/skyflix",
        "ttl_seconds": 3600,
        "video_result_ttl_seconds": 600,
    },
    "cors": {
        "origins": [
            "https://skyflixer.pages.dev",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
    },
    "hosting": {
        # Dict order is host scan order.
        "hosts": {
            "streamp2p": _host("streamp2p.com", "skyflixerpro.p2pplay.pro"),
            "seekstreaming": _host("seekstreaming.com", "skyflixer.seekplayer.me"),
            "upnshare": _host("upnshare.com", "skyflixer.upn.one"),
            "rpmshare": _host("rpmshare.com", "skyflixer.rpmplay.me"),
        },
        "primary_timeout_seconds": 3.0,
        "fallback_timeout_seconds": 2.0,
        "page_timeout_seconds": 8.0,
        "resolve_deadline_seconds": 25.0,
        "refresh_interval_seconds": 3600,
        "build_on_startup": True,
        "prefer_index": False,
    },
}
