"""Platform directory paths for agui-bridge.

Directories are resolved through platformdirs; callers create them on first
write, so importing this module never touches the filesystem.
"""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "agui-bridge"
CONFIG_FILENAMES = ("agui-bridge.jsonc", "agui-bridge.json")


class GlobalPath:
    """Global path management for agui-bridge directories."""

    @classmethod
    def data(cls) -> str:
        return user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")

    @classmethod
    def config(cls) -> str:
        """Global configuration directory."""
        return os.environ.get("AGUI_BRIDGE_CONFIG_DIR") or user_config_dir(APP_NAME)

