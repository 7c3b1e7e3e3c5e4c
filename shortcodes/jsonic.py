from __future__ import annotations

import json
from typing import Any


def dumps(obj: Any) -> str:
    """
    Minimal JSON dumper for CLI responses:
    no prettify, ensure_ascii=False, no trailing newline (the CLI decides).
    """
    return json.dumps(obj, ensure_ascii=False)
