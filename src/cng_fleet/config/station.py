"""CNG fueling station configuration."""

from typing import Literal

from pydantic import BaseModel, Field

StationType = Literal["fast", "time"]
BusinessType = Literal["aglc", "cgc", "vng"]
SizingMethod = Literal["total", "peak"]

STATION_TYPES: tuple[StationType, ...] = ("fast", "time")
BUSINESS_TYPES: tuple[BusinessType, ...] = ("aglc", "cgc", "vng")
SIZING_METHODS: tuple[SizingMethod, ...] = ("total", "peak")


class StationConfig(BaseModel):
    """How the station is built, who builds it, and how it is paid for."""

    station_type: StationType = Field(
        default="fast",
        description="'fast' = fast-fill (vehicles fuel in minutes); "
                    "'time' = time-fill (vehicles fuel overnight, cheaper at small sizes).",
    )
    business_type: BusinessType = Field(
        default="aglc",
        description="Local distribution company building the station. "
                    "Drives the cost multiplier and the monthly tariff rate.",
    )
    turnkey: bool = Field(
        default=True,
        description="True = station cost paid upfront; "
                    "False = financed through the LDC investment tariff (monthly fee).",
    )
    sizing_method: SizingMethod = Field(
        default="total",
        description="'total' = size for the whole fleet; "
                    "'peak' = size for the largest single-year deployment.",
    )
