"""Data models for the chemical vendor price lookup."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VendorStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    LINK_ONLY = "link_only"
    ERROR = "error"


class VendorSourceEntry(BaseModel):
    """A vendor listing for a compound, as reported by PubChem."""
    source_name: str
    record_url: Optional[str] = None


class PriceLine(BaseModel):
    """One quantity/price pair as shown by the vendor (not normalized)."""
    quantity: str
    price: str


class VendorResult(BaseModel):
    """Normalized outcome for a single configured vendor."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    vendor_name: str = Field(alias="vendorName")
    status: VendorStatus
    prices: list[PriceLine] = Field(default_factory=list)
    url: Optional[str] = None
    message: Optional[str] = None


class PriceLookupResult(BaseModel):
    """Complete result of one lookup."""
    identifier: str
    cid: int
    vendors: list[VendorResult]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
