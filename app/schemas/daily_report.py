from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.stock import StockOutResponse

ReportType = Literal["Morning Report", "Evening Report", "Full Day Report"]


class RoadProgress(BaseModel):
    description: Optional[str] = None
    value: Decimal = Field(ge=0)
    unit: Literal["m", "km"] = "m"


class MaterialUsed(BaseModel):
    material_name: str = Field(min_length=1)
    quantity: Decimal = Field(gt=0)
    unit: str = Field(min_length=1)


class DailyReportCreate(BaseModel):
    project_id: int
    report_type: ReportType
    description: str = Field(min_length=1)
    photos: list[str] = []
    road_progress: list[RoadProgress] = []
    stock_used: list[MaterialUsed] = []


class DailyReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    report_type: str
    description: str
    photos: list[str]
    road_progress: list[RoadProgress]
    stock_used: list[StockOutResponse]
    submitted_by: Optional[int]
    created_at: datetime
