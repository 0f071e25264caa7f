"""
Vendor-related Pydantic schemas.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict


class VendorTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class VendorTypeResponse(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class VendorBase(BaseModel):
    """Base schema with common vendor attributes."""

    name: str = Field(..., min_length=1, max_length=255)
    type_id: Optional[int] = None
    contact_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    alternative_phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    notes: Optional[str] = None


class VendorCreate(VendorBase):
    """Schema for vendor creation."""

    custom_field_values: Dict[str, Any] = Field(default_factory=dict)


class VendorUpdate(BaseModel):
    """Schema for updating a vendor."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type_id: Optional[int] = None
    contact_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    alternative_phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    notes: Optional[str] = None
    custom_field_values: Optional[Dict[str, Any]] = None


class VendorResponse(VendorBase):
    """Schema for vendor response (owner only)."""

    id: int
    custom_field_values: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VendorAssignment(BaseModel):
    """Replace the vendor set of a timeline or an event."""

    vendor_ids: List[int] = Field(default_factory=list)
