"""Fleet composition — counts, costs, lifespans, efficiency and mileage per class."""

from typing import Literal

from pydantic import BaseModel, Field

VehicleClass = Literal["light", "medium", "heavy"]
ConventionalFuel = Literal["gasoline", "diesel"]

VEHICLE_CLASSES: tuple[VehicleClass, ...] = ("light", "medium", "heavy")


class VehicleParameters(BaseModel):
    """The fleet being converted to CNG, one block of fields per vehicle class."""

    # --- Counts ---
    light_duty_count: int = Field(default=10, ge=0, description="Light-duty vehicles to convert")
    medium_duty_count: int = Field(default=5, ge=0, description="Medium-duty vehicles to convert")
    heavy_duty_count: int = Field(default=2, ge=0, description="Heavy-duty vehicles to convert")

    # --- Conversion cost per vehicle ($) ---
    light_duty_cost: float = Field(default=15_000.0, ge=0, description="CNG conversion cost per light-duty vehicle ($)")
    medium_duty_cost: float = Field(default=15_000.0, ge=0, description="CNG conversion cost per medium-duty vehicle ($)")
    heavy_duty_cost: float = Field(default=50_000.0, ge=0, description="CNG conversion cost per heavy-duty vehicle ($)")

    # --- Lifespan (years) ---
    light_duty_lifespan: int = Field(default=10, ge=1, description="Service life of a light-duty vehicle (years)")
    medium_duty_lifespan: int = Field(default=10, ge=1, description="Service life of a medium-duty vehicle (years)")
    heavy_duty_lifespan: int = Field(default=15, ge=1, description="Service life of a heavy-duty vehicle (years)")

    # --- Conventional-fuel efficiency (MPG) ---
    light_duty_mpg: float = Field(default=12.0, gt=0, description="Light-duty fuel economy on conventional fuel (mpg)")
    medium_duty_mpg: float = Field(default=10.0, gt=0, description="Medium-duty fuel economy on conventional fuel (mpg)")
    heavy_duty_mpg: float = Field(default=5.0, gt=0, description="Heavy-duty fuel economy on conventional fuel (mpg)")

    # --- Annual mileage ---
    light_duty_annual_miles: float = Field(default=15_000.0, ge=0, description="Miles driven per light-duty vehicle per year")
    medium_duty_annual_miles: float = Field(default=20_000.0, ge=0, description="Miles driven per medium-duty vehicle per year")
    heavy_duty_annual_miles: float = Field(default=40_000.0, ge=0, description="Miles driven per heavy-duty vehicle per year")

    # --- Fuel being displaced ---
    light_duty_fuel_type: ConventionalFuel = Field(default="gasoline", description="Fuel the light-duty vehicles run on today")
    medium_duty_fuel_type: ConventionalFuel = Field(default="diesel", description="Fuel the medium-duty vehicles run on today")
    heavy_duty_fuel_type: ConventionalFuel = Field(default="diesel", description="Fuel the heavy-duty vehicles run on today")

    def count(self, vehicle_class: VehicleClass) -> int:
        return getattr(self, f"{vehicle_class}_duty_count")

    def cost(self, vehicle_class: VehicleClass) -> float:
        return getattr(self, f"{vehicle_class}_duty_cost")

    def lifespan(self, vehicle_class: VehicleClass) -> int:
        return getattr(self, f"{vehicle_class}_duty_lifespan")

    def mpg(self, vehicle_class: VehicleClass) -> float:
        return getattr(self, f"{vehicle_class}_duty_mpg")

    def annual_miles(self, vehicle_class: VehicleClass) -> float:
        return getattr(self, f"{vehicle_class}_duty_annual_miles")

    def fuel_type(self, vehicle_class: VehicleClass) -> ConventionalFuel:
        return getattr(self, f"{vehicle_class}_duty_fuel_type")

    @property
    def total_count(self) -> int:
        return self.light_duty_count + self.medium_duty_count + self.heavy_duty_count

    @property
    def total_vehicle_investment(self) -> float:
        """Cost of converting the whole fleet, regardless of timing."""
        return sum(self.count(c) * self.cost(c) for c in VEHICLE_CLASSES)
