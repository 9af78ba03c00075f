"""Process-wide switches read from the environment at import time."""

from __future__ import annotations

import os
from typing import Final

USE_JITTED_SEARCH: Final[bool] = os.environ.get("CMAP_JAX_DISABLE_JITTED_SEARCH", "0") != "1"
CHECK_SORTED: Final[bool] = os.environ.get("CMAP_JAX_CHECK_SORTED", "0") == "1"
