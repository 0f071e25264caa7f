"""
Vendors router: the owner's address book of participants.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.database import get_db
from timeline_api.dependencies.auth import get_current_active_user
from timeline_api.exceptions import InvalidReferenceError, ResourceNotFoundError
from timeline_api.models.user import User
from timeline_api.models.vendor import Vendor
from timeline_api.schemas.vendor import (
    VendorCreate,
    VendorResponse,
    VendorTypeCreate,
    VendorTypeResponse,
    VendorUpdate,
)
from timeline_api.services.vendor import VendorService

router = APIRouter(prefix="/vendors", tags=["Vendors"])


async def get_owned_vendor(
    vendor_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Vendor:
    try:
        return await VendorService(db).get_vendor(vendor_id, current_user.id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# ============== Vendor types ==============
# Registered before /{vendor_id} so "types" is not parsed as an id


@router.get(
    "/types",
    response_model=List[VendorTypeResponse],
    summary="List vendor types",
)
async def get_vendor_types(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> List[VendorTypeResponse]:
    vendor_types = await VendorService(db).get_vendor_types(current_user.id)
    return [VendorTypeResponse.model_validate(t) for t in vendor_types]


@router.post(
    "/types",
    response_model=VendorTypeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create vendor type",
)
async def create_vendor_type(
    type_data: VendorTypeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> VendorTypeResponse:
    vendor_type = await VendorService(db).create_vendor_type(current_user, type_data)
    return VendorTypeResponse.model_validate(vendor_type)


# ============== Vendors ==============


@router.get(
    "",
    response_model=List[VendorResponse],
    summary="List vendors",
)
async def get_vendors(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> List[VendorResponse]:
    vendors = await VendorService(db).get_user_vendors(current_user.id)
    return [VendorResponse.model_validate(v) for v in vendors]


@router.post(
    "",
    response_model=VendorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create vendor",
)
async def create_vendor(
    vendor_data: VendorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> VendorResponse:
    """
    Create a vendor.

    - **name**: Vendor name (required)
    - **type_id**: Optional, must be one of your vendor types
    - **notes** / **custom_field_values**: Private, never shown on public links
    """
    try:
        vendor = await VendorService(db).create_vendor(current_user, vendor_data)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return VendorResponse.model_validate(vendor)


@router.get(
    "/{vendor_id}",
    response_model=VendorResponse,
    summary="Get vendor",
)
async def get_vendor(
    vendor: Vendor = Depends(get_owned_vendor),
) -> VendorResponse:
    return VendorResponse.model_validate(vendor)


@router.patch(
    "/{vendor_id}",
    response_model=VendorResponse,
    summary="Update vendor",
)
async def update_vendor(
    update_data: VendorUpdate,
    vendor: Vendor = Depends(get_owned_vendor),
    db: AsyncSession = Depends(get_db),
) -> VendorResponse:
    try:
        vendor = await VendorService(db).update_vendor(vendor, update_data)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return VendorResponse.model_validate(vendor)


@router.delete(
    "/{vendor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete vendor",
)
async def delete_vendor(
    vendor: Vendor = Depends(get_owned_vendor),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Delete a vendor. It is unlinked from every timeline and event.
    """
    await VendorService(db).delete_vendor(vendor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
