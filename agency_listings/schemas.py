# agency_listings/schemas.py
from pydantic import BaseModel, Field
from typing import Any, List, Literal, Optional, Union
from datetime import datetime

Source = Literal["curated", "bulk"]


class RawAgencyRecord(BaseModel):
    """A document from the bulk agency import. Any field may be missing or mistyped."""
    id: Any = Field(None, alias="_id")
    name: Optional[str] = None
    url: Any = None
    website_url: Any = None
    services: Any = None
    description: Any = None
    generated_desc: Any = None
    why_choose: Any = None
    tagline: Any = None
    locality: Any = None
    location: Any = None
    avg_rating: Any = None
    reviews: Any = None
    reviews_count: Any = None
    min_project_size: Any = None
    hourly_rate: Any = None
    employees_count: Any = None
    year_founded: Any = None
    clutch_url: Any = None

    class Config:
        extra = "allow"
        populate_by_name = True


class Listing(BaseModel):
    rank: int
    name: str
    tagline: str
    rating: float
    website_url: str = Field(..., alias="websiteUrl")
    services: List[str]
    description: str
    why_choose: Union[str, List[str]] = Field(..., alias="whyChoose")
    min_project_size: str = Field(..., alias="minProjectSize")
    hourly_rate: str = Field(..., alias="hourlyRate")
    employees_count: str = Field(..., alias="employeesCount")
    year_founded: str = Field(..., alias="yearFounded")
    reviews_count: int = Field(0, alias="reviewsCount")
    clutch_url: str = Field("", alias="clutchUrl")
    location: str
    is_sponsor: bool = Field(False, alias="isSponsor")

    class Config:
        populate_by_name = True


class ListingsResponse(BaseModel):
    data: List[Listing]
    source: Source
    error: Optional[str] = None


class PageListingBase(BaseModel):
    service_slug: str = Field(..., max_length=255)
    city_slug: str = Field(..., max_length=255)
    rank: int = Field(..., gt=0)
    name: str = Field(..., max_length=255)
    tagline: Optional[str] = None
    clutch_rating: Optional[float] = Field(None, ge=0, le=5)
    website_url: Optional[str] = None
    services: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    why_choose: Optional[str] = None
    min_project_size: Optional[str] = None
    hourly_rate: Optional[str] = None
    employees_count: Optional[str] = None
    year_founded: Optional[str] = None
    reviews_count: Optional[int] = None
    clutch_url: Optional[str] = None
    location: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False


class PageListingCreate(PageListingBase):
    pass


class PageListingUpdate(BaseModel):
    rank: Optional[int] = Field(None, gt=0)
    name: Optional[str] = None
    tagline: Optional[str] = None
    clutch_rating: Optional[float] = Field(None, ge=0, le=5)
    website_url: Optional[str] = None
    services: Optional[List[str]] = None
    description: Optional[str] = None
    why_choose: Optional[str] = None
    min_project_size: Optional[str] = None
    hourly_rate: Optional[str] = None
    employees_count: Optional[str] = None
    year_founded: Optional[str] = None
    reviews_count: Optional[int] = None
    clutch_url: Optional[str] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class PageListingOut(PageListingBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ImportRequest(BaseModel):
    service_slug: str
    city_slug: str
    city_name: Optional[str] = None
