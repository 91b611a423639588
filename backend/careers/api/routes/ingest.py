# careers/api/routes/ingest.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from careers.db.session import get_db
from careers.schemas.ingest import IngestBundle, IngestReport
from careers.services.ingest import ingest_bundle

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("", response_model=IngestReport)
def post_bundle(bundle: IngestBundle, db: Session = Depends(get_db)):
    """Apply an upstream bundle; safe to resend."""
    return ingest_bundle(db, bundle, source="api")
