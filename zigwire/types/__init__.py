from __future__ import annotations

from .basic import *  # noqa: F401,F403
from .named import *  # noqa: F401,F403
