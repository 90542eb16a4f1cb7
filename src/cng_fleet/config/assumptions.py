"""Engine heuristics — efficiency loss, station sizing factors, emission factors.

Every field has the default the calculator has always used; scenarios can
override any of them.
"""

from pydantic import BaseModel, Field


class Assumptions(BaseModel):
    """Tunable constants used by the station estimator and the projector."""

    # --- CNG efficiency loss vs. liquid fuel (fraction of MPG lost) ---
    light_cng_efficiency_loss: float = Field(default=0.05, ge=0, lt=1.0, description="Light-duty MPG loss on CNG")
    medium_cng_efficiency_loss: float = Field(default=0.075, ge=0, lt=1.0, description="Medium-duty MPG loss on CNG")
    heavy_cng_efficiency_loss: float = Field(default=0.10, ge=0, lt=1.0, description="Heavy-duty MPG loss on CNG")

    # --- Station sizing (GGE per vehicle per day, before efficiency loss) ---
    light_gge_per_day: float = Field(default=2.5, ge=0, description="Daily fuel draw of one light-duty vehicle (GGE)")
    medium_gge_per_day: float = Field(default=6.0, ge=0, description="Daily fuel draw of one medium-duty vehicle (GGE)")
    heavy_gge_per_day: float = Field(default=15.0, ge=0, description="Daily fuel draw of one heavy-duty vehicle (GGE)")

    # --- Maintenance ---
    maintenance_savings_pct: float = Field(
        default=0.10, ge=0, le=1.0,
        description="Maintenance savings as a fraction of that year's fuel savings.",
    )

    # --- Emission factors ---
    gasoline_emission_factor: float = Field(default=8.887, ge=0, description="kg CO₂ per gallon of gasoline")
    diesel_emission_factor: float = Field(default=10.180, ge=0, description="kg CO₂ per gallon of diesel")
    cng_emission_factor: float = Field(default=5.511, ge=0, description="kg CO₂ per GGE of CNG")

    # --- Fleet lifecycle ---
    retire_vehicles: bool = Field(
        default=False,
        description="False = vehicles stay in operation for the whole horizon once deployed. "
                    "True = a cohort leaves operation lifespan years after deployment "
                    "(no replacement purchase is modelled).",
    )

    def cng_efficiency_loss(self, vehicle_class: str) -> float:
        return getattr(self, f"{vehicle_class}_cng_efficiency_loss")

    def gge_per_day(self, vehicle_class: str) -> float:
        return getattr(self, f"{vehicle_class}_gge_per_day")

    def emission_factor(self, fuel: str) -> float:
        return getattr(self, f"{fuel}_emission_factor")
