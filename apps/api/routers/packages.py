"""Umrah package catalog endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from apps.api.deps import get_package_service
from domain.models import PackageOption, UmrahPackageCreate, UmrahPackageRecord, UmrahPackageUpdate
from services.package_service import PackageNotFoundError, PackageService


router = APIRouter(prefix="/packages", tags=["packages"])


@router.get("", response_model=List[UmrahPackageRecord])
def list_packages(service: PackageService = Depends(get_package_service)):
    return service.list_packages()


@router.get("/options", response_model=List[PackageOption])
def list_package_options(service: PackageService = Depends(get_package_service)):
    """Options for the registration form's package select."""
    return service.package_options()


@router.post("", response_model=UmrahPackageRecord, status_code=status.HTTP_201_CREATED)
def create_package(
    package_data: UmrahPackageCreate,
    service: PackageService = Depends(get_package_service),
):
    return service.create_package(package_data)


@router.get("/{package_id}", response_model=UmrahPackageRecord)
def get_package(package_id: int, service: PackageService = Depends(get_package_service)):
    try:
        return service.get_package(package_id)
    except PackageNotFoundError:
        raise HTTPException(status_code=404, detail="Package not found")


@router.patch("/{package_id}", response_model=UmrahPackageRecord)
def update_package(
    package_id: int,
    changes: UmrahPackageUpdate,
    service: PackageService = Depends(get_package_service),
):
    try:
        return service.update_package(package_id, changes)
    except PackageNotFoundError:
        raise HTTPException(status_code=404, detail="Package not found")


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_package(package_id: int, service: PackageService = Depends(get_package_service)):
    try:
        service.delete_package(package_id)
    except PackageNotFoundError:
        raise HTTPException(status_code=404, detail="Package not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
