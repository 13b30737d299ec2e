"""Pydantic models for Rides API responses."""
from typing import List, Optional
from pydantic import BaseModel, Field


class Product(BaseModel):
    """A product (vehicle type) available at a location."""

    product_id: str = Field(..., description="Unique product identifier")
    display_name: str = Field(..., description="Display name of the product")
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, description="Maximum riders")
    image: Optional[str] = Field(None, description="Image URL of the product")
    shared: Optional[bool] = None
    upfront_fare_enabled: Optional[bool] = None


class ProductsResponse(BaseModel):
    """Response model for the products endpoint."""

    products: List[Product] = Field(default_factory=list)


class UserProfile(BaseModel):
    """Profile of the user the access token belongs to."""

    uuid: str = Field(..., description="Unique user identifier")
    rider_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = None
    promo_code: Optional[str] = None
    mobile_verified: Optional[bool] = None
