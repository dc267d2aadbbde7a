from __future__ import annotations

from typing import Optional

from ..types import NikBool, NikNumber, NikString, NikValue

def is_truthy(val: Optional[NikValue]) -> bool:
    match val:
        case NikBool(value=b):
            return b
        case None:
            return False
        case NikNumber(value=num):
            return num != 0
        case NikString(value=s):
            return bool(s)
        case _:
            return True
