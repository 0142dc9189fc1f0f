"""Repositories for the fleet entities expenses can be linked to."""
from datetime import datetime
from typing import Optional

from database.models import Truck, Trip, Driver, AssociationKind
from database.repositories.base import BaseRepository


class TruckRepository(BaseRepository[Truck]):
    """Repository for trucks."""

    model_class = Truck

    async def create(
        self,
        organization_id: str,
        registration_no: str,
        make: Optional[str] = None,
        model: Optional[str] = None,
        truck_id: Optional[str] = None,
    ) -> Truck:
        """Create a truck."""
        truck = Truck(
            id=truck_id,
            organization_id=organization_id,
            registration_no=registration_no,
            make=make,
            model=model,
        )
        self.add(truck)
        await self.flush()
        return truck


class TripRepository(BaseRepository[Trip]):
    """Repository for trips."""

    model_class = Trip

    async def create(
        self,
        organization_id: str,
        origin_city: str,
        destination_city: str,
        scheduled_date: Optional[datetime] = None,
        trip_id: Optional[str] = None,
    ) -> Trip:
        """Create a trip."""
        trip = Trip(
            id=trip_id,
            organization_id=organization_id,
            origin_city=origin_city,
            destination_city=destination_city,
            scheduled_date=scheduled_date,
        )
        self.add(trip)
        await self.flush()
        return trip


class DriverRepository(BaseRepository[Driver]):
    """Repository for drivers."""

    model_class = Driver

    async def create(
        self,
        organization_id: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        driver_id: Optional[str] = None,
    ) -> Driver:
        """Create a driver."""
        driver = Driver(
            id=driver_id,
            organization_id=organization_id,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        self.add(driver)
        await self.flush()
        return driver


FLEET_REPOSITORIES = {
    AssociationKind.TRUCK: TruckRepository,
    AssociationKind.TRIP: TripRepository,
    AssociationKind.DRIVER: DriverRepository,
}
