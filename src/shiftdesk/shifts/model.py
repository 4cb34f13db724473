from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ShiftCode


@dataclass(frozen=True)
class ShiftSlot:
    day: date
    shift_code: ShiftCode
    seller_id: Optional[str]
