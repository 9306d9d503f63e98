from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

# Health check schema
class HealthResponse(BaseModel):
    """Health check response"""
    status: str

# Conversion schemas
class PedigreeRequest(BaseModel):
    """Request schema carrying a pedigree document"""
    pedigree: Union[Dict[str, Any], str] = Field(..., description="Pedigree JSON (object or JSON text) as produced by the pedigree editor")
    image: str = Field("", description="Optional SVG rendering of the pedigree")

class FieldErrorResponse(BaseModel):
    """A field group that could not be converted"""
    node_index: Optional[int] = None
    group: str
    message: str

class ConvertResponse(BaseModel):
    """Response schema for a stateless conversion"""
    patients: List[Dict[str, Any]]
    count: int
    version: Optional[str] = None
    version_mismatch: bool = False
    errors: List[FieldErrorResponse] = Field(default_factory=list)

# Stored pedigree schemas
class PedigreeCreateResponse(BaseModel):
    """Response schema after storing and converting a pedigree"""
    id: int
    version: Optional[str] = None
    count: int
    patient_ids: List[str] = Field(default_factory=list)
    errors: List[FieldErrorResponse] = Field(default_factory=list)

class PedigreeResponse(BaseModel):
    """Stored pedigree with all fields"""
    id: int
    data: Dict[str, Any]
    image: Optional[str] = ""
    version: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}

class PatientsResponse(BaseModel):
    """Converted patient records of a stored pedigree"""
    pedigree_id: int
    patients: List[Dict[str, Any]]
    count: int
