import platform
import time
from typing import Any, Dict

from dgtracker.config import get_settings
from dgtracker.metrics import BUILD_VERSION, GIT_SHA


async def health() -> Dict[str, Any]:
    settings = get_settings()
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "ts": time.time(),
        "env": {
            "finish_policy": settings.finish_policy,
            "near_basket_m": settings.near_basket_m,
        },
        "runtime": {
            "python": platform.python_version(),
        },
    }
