from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

# Accepted non-ISO date layouts, tried in order after ISO parsing fails
DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d")


class RawRecord(BaseModel):
    """One parsed CSV row of daily well production, before business validation"""
    well_id: str = Field(alias="WellId", description="Unique identifier for the well")
    production_date: date = Field(alias="ProductionDate", description="Production day")
    oil_production: float = Field(0.0, alias="OilProduction", description="Oil production in barrels per day")
    gas_production: float = Field(0.0, alias="GasProduction", description="Gas production in thousand cubic feet per day")
    water_production: float = Field(0.0, alias="WaterProduction", description="Water production in barrels per day")
    wellhead_pressure: float = Field(0.0, alias="WellheadPressure", description="Wellhead pressure in psi")
    temperature: float = Field(0.0, alias="Temperature", description="Temperature in degrees Fahrenheit")
    status: str = Field("Active", alias="Status", description="Active, Maintenance or Shutdown")
    comments: Optional[str] = Field(None, alias="Comments", description="Free-text operator comment")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "WellId": "WELL-001",
                "ProductionDate": "2024-01-15",
                "OilProduction": 500.0,
                "GasProduction": 2000.0,
                "WaterProduction": 120.0,
                "WellheadPressure": 85.5,
                "Temperature": 140.0,
                "Status": "Active",
                "Comments": None
            }
        }
    )

    @field_validator("production_date", mode="before")
    @classmethod
    def parse_production_date(cls, value):
        if not isinstance(value, str):
            return value
        text = value.strip()
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        raise ValueError(f"unrecognised date: {value!r}")

    @field_validator("comments", mode="after")
    @classmethod
    def empty_comment_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class CleanRecord(RawRecord):
    """Validated, normalized production record with derived metrics"""

    @model_validator(mode="after")
    def check_valid(self) -> "CleanRecord":
        from ..validation import validation_errors

        errors = validation_errors(self)
        if errors:
            raise ValueError(f"record for well {self.well_id!r} violates: {', '.join(errors)}")
        return self

    @computed_field
    @property
    def oil_gas_ratio(self) -> float:
        """Barrels of oil per thousand cubic feet of gas"""
        if self.gas_production > 0:
            return self.oil_production / (self.gas_production / 1000)
        return 0.0

    @computed_field
    @property
    def water_cut(self) -> float:
        """Share of total liquid production that is water, in percent"""
        liquids = self.oil_production + self.water_production
        if liquids > 0:
            return self.water_production / liquids * 100
        return 0.0

    @classmethod
    def from_raw(cls, record: RawRecord) -> "CleanRecord":
        """Promote a raw record; raises pydantic.ValidationError if it is invalid"""
        return cls.model_validate(record.model_dump())
