from datetime import datetime
from typing import List

from .base_schema import CamelModel


class VisitorOut(CamelModel):
    id: int
    visitor_id: str
    ip_address: str | None = None
    user_agent: str | None = None
    last_visit: datetime
    visit_count: int
    created_at: datetime
    updated_at: datetime


class TrackVisitOut(CamelModel):
    is_new_visitor: bool
    unique_visitors: int
    total_visits: int


class VisitorCountOut(CamelModel):
    unique_visitors: int
    total_visits: int


class VisitorListOut(CamelModel):
    visitors: List[VisitorOut]
    total: int
    total_pages: int
    current_page: int
