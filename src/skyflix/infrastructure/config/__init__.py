from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, HostConfig, HostingConfig

__all__ = ["AppConfig", "EnvOverrides", "HostConfig", "HostingConfig", "load_config"]
