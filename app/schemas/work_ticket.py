from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WorkTicketBase(BaseModel):
    ticket_number: Optional[str] = Field(None, max_length=50)
    cost_centre: Optional[str] = Field(None, max_length=100)
    activity: Optional[str] = Field(None, max_length=200)
    operator_name: Optional[str] = Field(None, max_length=100)
    num_operators: int = 0

    start_date_time: datetime
    start_counter: int = 0
    end_date_time: datetime
    end_counter: int = 0

    quantity_in: int = 0
    quantity_out: int = 0
    material_used: Optional[str] = Field(None, max_length=500)


class WorkTicketCreate(WorkTicketBase):
    pass


class WorkTicketUpdate(WorkTicketBase):
    created_by: Optional[str] = Field(None, max_length=100)


class WorkTicketRecord(WorkTicketBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = Field(None, max_length=100)
    model_config = ConfigDict(from_attributes=True)
