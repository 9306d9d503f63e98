from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .database import Base


def utcnow():
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class PedigreeRecord(Base):
    """Storage for imported pedigree documents"""
    __tablename__ = "pedigrees"

    id = Column(Integer, primary_key=True, index=True)
    data = Column(JSON, nullable=False)  # Raw pedigree JSON as submitted
    image = Column(String, default="")  # Optional SVG rendering
    version = Column(String(20), nullable=True)  # JSON_version tag, if declared
    created_at = Column(DateTime, default=utcnow)

    patients = relationship(
        "ConvertedPatient",
        back_populates="pedigree",
        cascade="all, delete-orphan",
        order_by="ConvertedPatient.position",
    )


class ConvertedPatient(Base):
    """
    Patient record JSON produced from one individual of a pedigree.

    position keeps the individual's order within the pedigree.
    """
    __tablename__ = "converted_patients"

    id = Column(Integer, primary_key=True, index=True)
    pedigree_id = Column(Integer, ForeignKey("pedigrees.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    patient_id = Column(String(100), nullable=True, index=True)  # 'id' of the record, if linked
    record = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    pedigree = relationship("PedigreeRecord", back_populates="patients")
