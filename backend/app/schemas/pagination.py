"""
Pagination block shared by paginated listings.
"""

import math
from typing import Any, Dict

from pydantic import BaseModel


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total: int
    total_pages: int

    @classmethod
    def of(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            per_page=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )

    def dump(self) -> Dict[str, Any]:
        return self.model_dump()
