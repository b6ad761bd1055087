"""Result models for day counting, the presence test, and imports."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from spt_calc.models.travel import TravelPeriod


class DayCounts(BaseModel):
    """Days physically present in each of the three relevant years."""

    current_year_days: int = Field(default=0, ge=0)
    first_prior_year_days: int = Field(default=0, ge=0)
    second_prior_year_days: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SPTResult(BaseModel):
    """Weighted breakdown and verdict of the Substantial Presence Test."""

    tax_year: int | None = None
    current_year_days: int
    first_prior_year_days: int
    second_prior_year_days: int
    first_prior_year_days_calculated: float
    second_prior_year_days_calculated: float
    total_days: float
    meets_current_year_requirement: bool
    meets_total_days_requirement: bool
    passes_test: bool
    periods: list[TravelPeriod] = Field(
        default_factory=list, description="Periods the counts were derived from"
    )

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def total_days_display(self) -> str:
        """Total rounded to two decimals, for display only."""
        return f"{self.total_days:.2f}"

    @property
    def from_date_ranges(self) -> bool:
        return bool(self.periods)


class ParseResult(BaseModel):
    """Periods reconstructed from a travel history export."""

    periods: list[TravelPeriod] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


class CalculationSuccess(BaseModel):
    """A completed calculation."""

    status: Literal["ok"] = "ok"
    result: SPTResult

    model_config = ConfigDict(frozen=True)


class CalculationEmpty(BaseModel):
    """Nothing to calculate from."""

    status: Literal["empty"] = "empty"
    message: str

    model_config = ConfigDict(frozen=True)


CalculationOutcome = Annotated[
    Union[CalculationSuccess, CalculationEmpty], Field(discriminator="status")
]


class ImportSuccess(BaseModel):
    """Travel history imported into periods.

    When warnings are present the caller must ask the user to confirm
    before accepting the periods.
    """

    status: Literal["ok"] = "ok"
    periods: list[TravelPeriod]
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def requires_confirmation(self) -> bool:
        return len(self.warnings) > 0


class ImportFailure(BaseModel):
    """Travel history could not be turned into any period."""

    status: Literal["failed"] = "failed"
    message: str

    model_config = ConfigDict(frozen=True)


ImportOutcome = Annotated[Union[ImportSuccess, ImportFailure], Field(discriminator="status")]
