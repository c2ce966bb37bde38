from __future__ import annotations

from typing import Dict, List, Union

from pydantic import BaseModel

ExportValue = Union[str, float, int, None]


class ExportTable(BaseModel):
    columns: List[str]
    rows: List[Dict[str, ExportValue]]
