"""Fuel prices and escalation."""

from pydantic import BaseModel, Field


class FuelPrices(BaseModel):
    """Nominal fuel prices at year 0, escalated by ``annual_increase`` each year."""

    gasoline_price: float = Field(default=3.85, ge=0, description="Gasoline price ($/gallon)")
    diesel_price: float = Field(default=4.25, ge=0, description="Diesel price ($/gallon)")
    cng_price: float = Field(default=2.15, ge=0, description="CNG price ($/GGE), electricity for compression included")
    annual_increase: float = Field(
        default=2.5, ge=0, le=100,
        description="Annual fuel price escalation (%), compounded and applied to every fuel.",
    )

    def escalation_factor(self, year: int) -> float:
        """Multiplier for 0-indexed ``year``: (1 + annual_increase/100) ** year."""
        return (1 + self.annual_increase / 100) ** year
