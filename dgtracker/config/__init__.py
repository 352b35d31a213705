"""Configuration helpers for tracker settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "Settings",
    "DEFAULT_LIVE_ROUND_TTL_H",
    "DEFAULT_NEAR_BASKET_M",
    "DEFAULT_ROUNDS_DIR",
    "env_bool",
    "get_settings",
    "reset_settings_cache",
]

DEFAULT_ROUNDS_DIR = "data/rounds"
DEFAULT_NEAR_BASKET_M = 500.0
DEFAULT_LIVE_ROUND_TTL_H = 12.0
_FINISH_POLICIES = {"last_hole", "permissive"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    rounds_dir: str = DEFAULT_ROUNDS_DIR
    finish_policy: str = "last_hole"
    near_basket_m: float = DEFAULT_NEAR_BASKET_M
    live_round_ttl_h: float = DEFAULT_LIVE_ROUND_TTL_H


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    policy = (os.getenv("DGTRACKER_FINISH_POLICY") or "last_hole").strip().lower()
    if policy not in _FINISH_POLICIES:
        policy = "last_hole"
    near = _float_env("DGTRACKER_NEAR_BASKET_M", DEFAULT_NEAR_BASKET_M)
    if near <= 0:
        near = DEFAULT_NEAR_BASKET_M
    ttl = _float_env("DGTRACKER_LIVE_ROUND_TTL_H", DEFAULT_LIVE_ROUND_TTL_H)
    if ttl <= 0:
        ttl = DEFAULT_LIVE_ROUND_TTL_H
    return Settings(
        rounds_dir=os.getenv("DGTRACKER_ROUNDS_DIR") or DEFAULT_ROUNDS_DIR,
        finish_policy=policy,
        near_basket_m=near,
        live_round_ttl_h=ttl,
    )


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default

