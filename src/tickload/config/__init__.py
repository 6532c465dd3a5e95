from __future__ import annotations

from tickload.config.models import RunConfig, TargetConfig

__all__ = ["RunConfig", "TargetConfig"]
