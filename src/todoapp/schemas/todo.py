"""Pydantic schemas for todo lists and items.

Learn: Update schemas are sparse. Each field is either absent (not in
``model_fields_set``, leave the column alone) or present with a real
value. An explicit null is rejected rather than treated as "absent", so
"set to empty string" and "leave unchanged" never get confused.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class _SparseUpdate(BaseModel):
    @field_validator("*")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


# ─── Lists ──────────────────────────────────────────────

class ListCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=255)


class ListUpdate(_SparseUpdate):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)


class ListRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class ListCollection(BaseModel):
    data: list[ListRead]


# ─── Items ──────────────────────────────────────────────

class ItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=255)


class ItemUpdate(_SparseUpdate):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    done: Optional[bool] = None


class ItemRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    done: bool

    model_config = {"from_attributes": True}


# ─── Common ─────────────────────────────────────────────

class IdResponse(BaseModel):
    id: int


class StatusResponse(BaseModel):
    status: str = "ok"
