from fastapi import FastAPI, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import List
import logging

from . import models, schemas, database
from .config import settings
from .logging_config import configure_logging
from .pedigree import Pedigree, PedigreeConverter, PedigreeFormatError
from .vocabulary import VocabularyFactory

from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, initialize database tables and build the converter on startup"""
    configure_logging(settings.log_level)
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database tables created")

    omim = VocabularyFactory.from_settings("omim")
    hpo = VocabularyFactory.from_settings("hpo")
    app.state.converter = PedigreeConverter(
        omim=omim,
        hpo=hpo,
        expected_version=settings.expected_pedigree_version,
    )
    try:
        yield
    finally:
        omim.close()
        hpo.close()

# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Converts pedigree editor JSON into patient records",
    version="1.0.0",
    lifespan=lifespan
)

def get_converter(request: Request) -> PedigreeConverter:
    """Converter built at startup from the configured vocabularies"""
    return request.app.state.converter

def _get_pedigree_or_404(db: Session, pedigree_id: int) -> models.PedigreeRecord:
    record = db.query(models.PedigreeRecord).filter(models.PedigreeRecord.id == pedigree_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="Pedigree not found")
    return record

def _parse_pedigree(request: schemas.PedigreeRequest) -> Pedigree:
    """Build a Pedigree from either a JSON object or JSON text"""
    if isinstance(request.pedigree, str):
        try:
            return Pedigree.from_json(request.pedigree, request.image)
        except PedigreeFormatError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return Pedigree(request.pedigree, request.image)

@app.get("/health", response_model=schemas.HealthResponse)
def health_check():
    """
    Health check endpoint - returns {"status": "ok"}
    """
    return {"status": "ok"}

@app.post("/convert", response_model=schemas.ConvertResponse)
def convert_pedigree(
    request: schemas.PedigreeRequest,
    converter: PedigreeConverter = Depends(get_converter)
):
    """
    Convert a pedigree to patient records without storing anything.

    Returns one record per individual, in pedigree order, along with the
    field groups that could not be converted.
    """
    result = converter.convert_with_report(_parse_pedigree(request))
    return {
        "patients": result.records,
        "count": result.count,
        "version": result.version,
        "version_mismatch": result.version_mismatch,
        "errors": [error.to_dict() for error in result.errors],
    }

@app.get("/pedigrees", response_model=List[int])
def list_pedigrees(db: Session = Depends(database.get_db)):
    """Fetch all stored pedigree IDs"""
    pedigrees = db.query(models.PedigreeRecord.id).all()
    return [pedigree.id for pedigree in pedigrees]

@app.post("/pedigrees", response_model=schemas.PedigreeCreateResponse, status_code=status.HTTP_201_CREATED)
def create_pedigree(
    request: schemas.PedigreeRequest,
    db: Session = Depends(database.get_db),
    converter: PedigreeConverter = Depends(get_converter)
):
    """
    Store a pedigree and the patient records converted from it.

    Accepts:
    - pedigree: Pedigree editor JSON
    - image: Optional SVG rendering

    Returns the pedigree ID, record count and any conversion errors.
    """
    pedigree = _parse_pedigree(request)
    result = converter.convert_with_report(pedigree)

    db_pedigree = models.PedigreeRecord(
        data=pedigree.data,
        image=pedigree.image,
        version=result.version,
    )
    for position, record in enumerate(result.records):
        db_pedigree.patients.append(models.ConvertedPatient(
            position=position,
            patient_id=record.get("id"),
            record=record,
        ))

    db.add(db_pedigree)
    db.commit()
    db.refresh(db_pedigree)

    logger.info("Stored pedigree %s with %d individuals", db_pedigree.id, result.count)
    return {
        "id": db_pedigree.id,
        "version": result.version,
        "count": result.count,
        "patient_ids": [record["id"] for record in result.records if record.get("id")],
        "errors": [error.to_dict() for error in result.errors],
    }

@app.get("/pedigrees/{pedigree_id}", response_model=schemas.PedigreeResponse)
def get_pedigree(pedigree_id: int, db: Session = Depends(database.get_db)):
    """
    Fetch a stored pedigree by ID

    Returns 404 if the pedigree doesn't exist.
    """
    return _get_pedigree_or_404(db, pedigree_id)

@app.get("/pedigrees/{pedigree_id}/patients", response_model=schemas.PatientsResponse)
def get_pedigree_patients(pedigree_id: int, db: Session = Depends(database.get_db)):
    """Fetch the patient records converted from a stored pedigree, in pedigree order"""
    db_pedigree = _get_pedigree_or_404(db, pedigree_id)
    patients = [patient.record for patient in db_pedigree.patients]
    return {"pedigree_id": db_pedigree.id, "patients": patients, "count": len(patients)}

@app.delete("/pedigrees/{pedigree_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pedigree(pedigree_id: int, db: Session = Depends(database.get_db)):
    """
    Delete a stored pedigree and its converted records

    Returns:
    - 204 No Content if successful
    - 404 error if pedigree doesn't exist
    """
    db_pedigree = _get_pedigree_or_404(db, pedigree_id)
    db.delete(db_pedigree)
    db.commit()
    return None
