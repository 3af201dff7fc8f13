"""Directory schemas."""

from pydantic import BaseModel

from alumni.modules.profiles.schemas import ProfileSummary


class DirectoryPage(BaseModel):
    items: list[ProfileSummary]
    page: int
    page_size: int
    total: int
    has_next: bool
