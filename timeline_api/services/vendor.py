"""
Vendor service for the owner's address book of participants.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.exceptions import InvalidReferenceError, ResourceNotFoundError
from timeline_api.models.user import User
from timeline_api.models.vendor import Vendor, VendorType
from timeline_api.schemas.vendor import VendorCreate, VendorTypeCreate, VendorUpdate


class VendorService:
    """Service for vendor and vendor type CRUD, scoped to the owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_vendor_types(self, user_id: int) -> List[VendorType]:
        result = await self.db.execute(
            select(VendorType)
            .where(VendorType.user_id == user_id)
            .order_by(VendorType.name)
        )
        return list(result.scalars().all())

    async def create_vendor_type(self, user: User, data: VendorTypeCreate) -> VendorType:
        vendor_type = VendorType(user_id=user.id, name=data.name)
        self.db.add(vendor_type)
        await self.db.flush()
        await self.db.refresh(vendor_type)
        return vendor_type

    async def get_user_vendors(self, user_id: int) -> List[Vendor]:
        result = await self.db.execute(
            select(Vendor)
            .where(Vendor.user_id == user_id)
            .order_by(Vendor.name, Vendor.id)
        )
        return list(result.scalars().all())

    async def get_vendor(self, vendor_id: int, user_id: int) -> Vendor:
        """
        Get a vendor owned by the given user.

        Raises:
            ResourceNotFoundError: If missing or owned by someone else
        """
        result = await self.db.execute(
            select(Vendor)
            .where(Vendor.id == vendor_id)
            .where(Vendor.user_id == user_id)
        )
        vendor = result.scalar_one_or_none()
        if vendor is None:
            raise ResourceNotFoundError("Vendor not found")
        return vendor

    async def create_vendor(self, user: User, vendor_data: VendorCreate) -> Vendor:
        await self._check_type(user.id, vendor_data.type_id)

        vendor = Vendor(user_id=user.id, **vendor_data.model_dump())
        self.db.add(vendor)
        await self.db.flush()
        await self.db.refresh(vendor)
        return vendor

    async def update_vendor(self, vendor: Vendor, update_data: VendorUpdate) -> Vendor:
        data = update_data.model_dump(exclude_unset=True)
        if "type_id" in data:
            await self._check_type(vendor.user_id, data["type_id"])

        for field, value in data.items():
            if value is None and field in ("name", "custom_field_values"):
                continue
            setattr(vendor, field, value)

        await self.db.flush()
        await self.db.refresh(vendor)
        return vendor

    async def delete_vendor(self, vendor: Vendor) -> None:
        """Delete a vendor. Its timeline and event links go with it."""
        await self.db.delete(vendor)
        await self.db.flush()

    async def _check_type(self, user_id: int, type_id: Optional[int]) -> None:
        if type_id is None:
            return
        result = await self.db.execute(
            select(VendorType.id)
            .where(VendorType.id == type_id)
            .where(VendorType.user_id == user_id)
        )
        if result.scalar_one_or_none() is None:
            raise InvalidReferenceError("Unknown vendor type")
