"""Package service for managing the Umrah package catalog."""
import logging
from typing import List

from sqlalchemy.orm import Session

from db.models_sqlalchemy import UmrahPackage
from domain.models import PackageOption, UmrahPackageCreate, UmrahPackageUpdate


logger = logging.getLogger(__name__)


class PackageNotFoundError(Exception):
    """Raised when a package is not found."""
    pass


class PackageService:
    """Service for managing Umrah packages."""

    def __init__(self, db_session: Session):
        """
        Initialize the package service.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db = db_session

    def create_package(self, package_data: UmrahPackageCreate) -> UmrahPackage:
        """
        Create a new package.

        Args:
            package_data: Validated package fields

        Returns:
            Created UmrahPackage object
        """
        package = UmrahPackage(**package_data.model_dump())

        self.db.add(package)
        self.db.commit()
        self.db.refresh(package)

        logger.info(f"Created package {package.id}")
        return package

    def get_package(self, package_id: int) -> UmrahPackage:
        """
        Get a package by ID.

        Raises:
            PackageNotFoundError: If package not found
        """
        package = self.db.get(UmrahPackage, package_id)

        if not package:
            raise PackageNotFoundError(f"Package {package_id} not found")

        return package

    def update_package(self, package_id: int, changes: UmrahPackageUpdate) -> UmrahPackage:
        """
        Update an existing package. Only fields present in the request are written.

        Raises:
            PackageNotFoundError: If package not found
        """
        package = self.get_package(package_id)

        for field_name, value in changes.model_dump(exclude_unset=True).items():
            setattr(package, field_name, value)

        self.db.commit()
        self.db.refresh(package)

        return package

    def delete_package(self, package_id: int) -> None:
        """
        Permanently delete a package.

        Raises:
            PackageNotFoundError: If package not found
        """
        package = self.get_package(package_id)
        self.db.delete(package)
        self.db.commit()
        logger.info(f"Deleted package {package_id}")

    def list_packages(self) -> List[UmrahPackage]:
        return self.db.query(UmrahPackage).order_by(UmrahPackage.name, UmrahPackage.id).all()

    def package_options(self) -> List[PackageOption]:
        """Select options for the registration form's package field."""
        return [
            PackageOption(value=package.id, label=package.name)
            for package in self.list_packages()
        ]
