from tankalert.models.tank_group import TankGroup
from tankalert.models.fuel_tank import FuelTank
from tankalert.models.dip_reading import DipReading
from tankalert.models.driver import Driver
from tankalert.models.vehicle import Vehicle
from tankalert.models.safety_event import SafetyEvent

__all__ = [
    "TankGroup",
    "FuelTank",
    "DipReading",
    "Driver",
    "Vehicle",
    "SafetyEvent",
]
