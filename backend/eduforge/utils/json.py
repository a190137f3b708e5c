from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

import orjson as _orjson


def _default(o: Any):
    # Normalize common non-JSON-native types for audit payloads
    if isinstance(o, Decimal):
        return str(o)
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    return str(o)


def dumps_bytes(obj: Any) -> bytes:
    # Allow non-string dict keys and coerce Decimals/datetimes
    return _orjson.dumps(obj, option=_orjson.OPT_NON_STR_KEYS, default=_default)
