from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TransferType = Literal["labour", "machine", "stock", "lab-equipment", "consumable-goods", "equipment"]


class TransferCreate(BaseModel):
    type: TransferType
    item_id: Union[int, str]
    from_project: int
    to_project: int
    quantity: Optional[Decimal] = Field(default=None, gt=0)
    remarks: Optional[str] = None


class TransferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    from_project_id: int
    to_project_id: int
    labour_id: Optional[int]
    machine_id: Optional[int]
    asset_id: Optional[int]
    material_name: Optional[str]
    quantity: Decimal
    remarks: Optional[str]
    status: str
    requested_by: Optional[int]
    created_at: datetime
