from decimal import Decimal
from typing import Any

from fastapi.encoders import jsonable_encoder

from .json import dumps_bytes as _json_dumps


def dumps(obj: Any) -> str:
    """Serialize obj to a compact JSON string (UTF-8).

    Money stays exact: Decimals are written as strings, not floats.
    """
    encoded = jsonable_encoder(obj, custom_encoder={Decimal: str})
    return _json_dumps(encoded).decode("utf-8")
