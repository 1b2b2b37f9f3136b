from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zhelper.db.models import Procurement

# fz_number is a 32-bit INTEGER column
MAX_FZ_NUMBER = 2**31 - 1


class Envelope(BaseModel):
    request_id: str | None = None


class ProcurementDto(Envelope):
    """
    Incoming procurement payload, from the web UI or the Chrome extension.

    `fz_number`, `uin`, `object_of`, `publisher_name` and `procedure_type`
    are mandatory and may not be blank.
    """

    fz_number: int = Field(ge=1, le=MAX_FZ_NUMBER)
    uin: str = Field(min_length=1, max_length=64)
    object_of: str = Field(min_length=1)
    publisher_name: str = Field(min_length=1, max_length=512)
    contract_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=19, decimal_places=2)
    procedure_type: str = Field(min_length=1, max_length=255)
    stage: Optional[str] = None
    link_on_placement: Optional[str] = None
    application_deadline: Optional[datetime] = None
    application_secure: Optional[str] = None
    contract_secure: Optional[str] = None
    restrictions: Optional[str] = None
    last_updated_from_eis: Optional[datetime] = None
    date_of_placement: Optional[datetime] = None
    date_of_auction: Optional[datetime] = None
    time_of_auction: Optional[str] = None
    time_zone: Optional[str] = None
    etp_name: Optional[str] = None
    etp_url: Optional[str] = None
    summing_up_date: Optional[datetime] = None

    @field_validator("uin", "object_of", "publisher_name", "procedure_type", mode="before")
    @classmethod
    def strip_required(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("contract_price", mode="before")
    @classmethod
    def price_from_float(cls, v):
        # go through repr so 10.1 stays 10.1 instead of its binary expansion
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    def to_entity(self, entity_id: int | None = None) -> Procurement:
        data = self.model_dump(exclude={"request_id"})
        return Procurement(id=entity_id, **data)


class ProcurementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fz_number: int
    uin: str
    object_of: Optional[str] = None
    publisher_name: Optional[str] = None
    contract_price: Optional[Decimal] = None
    procedure_type: Optional[str] = None
    stage: Optional[str] = None
    link_on_placement: Optional[str] = None
    application_deadline: Optional[datetime] = None
    application_secure: Optional[str] = None
    contract_secure: Optional[str] = None
    restrictions: Optional[str] = None
    last_updated_from_eis: Optional[datetime] = None
    date_of_placement: Optional[datetime] = None
    date_of_auction: Optional[datetime] = None
    time_of_auction: Optional[str] = None
    time_zone: Optional[str] = None
    etp_name: Optional[str] = None
    etp_url: Optional[str] = None
    summing_up_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def of(cls, entity: Procurement) -> dict:
        return cls.model_validate(entity).model_dump(mode="json")
