from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

HOME_ENV = "PYSECTIONS_HOME"


def user_sections_dir(app_name: str) -> Path:
    """Return the per-user directory holding *app_name*'s section files.

    ``PYSECTIONS_HOME`` replaces the platform config directory, the
    application name is still appended.
    """
    if not app_name:
        raise ValueError("app_name must not be empty")
    env = os.getenv(HOME_ENV)
    if env:
        return Path(env).expanduser().resolve() / app_name
    return Path(_uc(appname=app_name)).resolve() / "sections"
