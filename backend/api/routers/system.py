from fastapi import APIRouter, Depends
from sqlmodel import Session
from sqlalchemy import text
import duckdb

from infra.database.connection import get_session

router = APIRouter()

@router.get("/api/")
def health_check(session: Session = Depends(get_session)):
    # touches the database so a broken engine shows up here
    session.connection().execute(text("SELECT 1"))
    return {
        "status": "ok",
        "duckdb_version": duckdb.__version__,
    }
