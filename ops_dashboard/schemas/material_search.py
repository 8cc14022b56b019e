"""
Pydantic models for the supplier material search passthrough.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MaterialSearchRequest(BaseModel):
    query: str = Field("", description="Free-text description of the material needed.")


class MaterialSearchResult(BaseModel):
    """One ranked product returned by the automation workflow."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    rank: int = 0
    title: str = ""
    price: str = Field("", description="Price as formatted by the supplier.")
    supplier: str = ""
    also_available: str = Field("", description="Availability note.")
    delivery: str = ""
    rating: str = ""
    url: str = ""
    image: Optional[str] = None
    why: str = Field("", description="Why the workflow ranked this result.")


class MaterialSearchResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = True
    query_original: str = ""
    query_optimized: str = ""
    suppliers_searched: list[str] = Field(default_factory=list)
    results: list[MaterialSearchResult] = Field(default_factory=list)


__all__ = [
    "MaterialSearchRequest",
    "MaterialSearchResponse",
    "MaterialSearchResult",
]
