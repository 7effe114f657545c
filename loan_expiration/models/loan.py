# file: loan_expiration/models/loan.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class Loan(BaseModel):
    id: str = ""
    image_url: str = Field(default="", alias="imageUrl")
    return_date: str = Field(default="", alias="returnDate")
    reason: str = ""
    is_active: bool = Field(default=False, alias="isActive")
    item: int = 0
    applicant: str = ""
    dependent: str = ""
    responsible: str = ""
    device_token: str = Field(default="", alias="deviceToken")
    created_at: str = Field(default="", alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator('id', 'image_url', 'return_date', 'reason', 'applicant', 'dependent',
                     'responsible', 'device_token', 'created_at', mode='before')
    def null_string_is_empty(cls, v: Optional[str]):
        return "" if v is None else v


class LoansResponse(BaseModel):
    """Envelope returned by the loans API. Only `data` is used by the job."""
    success: bool = False
    count: int = 0
    data: List[Loan] = []
    message: str = ""

    @field_validator('data', mode='before')
    def null_data_is_empty(cls, v: Optional[list]):
        return [] if v is None else v
