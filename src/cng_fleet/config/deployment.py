"""Deployment strategy, analysis horizon and manual per-year rollout."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

DeploymentStrategy = Literal["immediate", "phased", "aggressive", "deferred", "manual"]

DEPLOYMENT_STRATEGIES: tuple[DeploymentStrategy, ...] = (
    "immediate", "phased", "aggressive", "deferred", "manual",
)

MAX_TIME_HORIZON = 50


class ManualYear(BaseModel):
    """Vehicles the user chose to deploy in one year (manual strategy)."""

    light: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    heavy: int = Field(default=0, ge=0)


class DeploymentConfig(BaseModel):
    """How the fleet is rolled out over the analysis horizon."""

    strategy: DeploymentStrategy = Field(
        default="phased",
        description="'immediate' = all in year 1; 'phased' = even split; "
                    "'aggressive' = half in year 1; 'deferred' = half in the final year; "
                    "'manual' = rows from manual_distribution.",
    )
    time_horizon: int = Field(
        default=5, ge=1, le=MAX_TIME_HORIZON,
        description="Analysis horizon (years).",
    )
    manual_distribution: list[ManualYear] | None = Field(
        default=None,
        description="Per-year deployments for the manual strategy. "
                    "Shorter lists are zero-padded to the horizon.",
    )

    @model_validator(mode="after")
    def _manual_fits_horizon(self) -> "DeploymentConfig":
        if self.manual_distribution is not None and len(self.manual_distribution) > self.time_horizon:
            raise ValueError(
                f"manual_distribution has {len(self.manual_distribution)} years "
                f"but time_horizon is {self.time_horizon}"
            )
        return self
