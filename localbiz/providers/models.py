from __future__ import annotations

from pydantic import BaseModel, Field


class Provider(BaseModel):
    id: str
    name: str
    slug: str = ""
    category_key: str
    tags: list[str] = Field(default_factory=list)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    is_member: bool = False
    is_featured: bool = False
    description: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    address: str | None = None
    specialties: list[str] = Field(default_factory=list)
    service_areas: list[str] = Field(default_factory=list)
    business_hours: dict[str, str] = Field(default_factory=dict)
    published: bool = True

    @property
    def featured(self) -> bool:
        return self.is_member or self.is_featured

    @property
    def has_rating(self) -> bool:
        return self.rating is not None
