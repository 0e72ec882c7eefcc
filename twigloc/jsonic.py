from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel


def dumps(obj: Any) -> str:
    """Compact JSON for CLI output; pydantic models are dumped by alias."""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(mode="json", by_alias=True)
    return json.dumps(obj, ensure_ascii=False)
