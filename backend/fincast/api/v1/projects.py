"""
projects.py — Saved Projects API Endpoint

Purpose:
- List the names of all stored financial-data snapshots
- The list is unfiltered (every user's snapshots); unnamed snapshots are
  listed as "Untitled Project"
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fincast.core.database import get_db
from fincast.core.logging import get_logger
from fincast.services.persistence.repository import list_project_names

logger = get_logger(__name__)

router = APIRouter(
    prefix="/saved-projects",
    tags=["projects"]
)


@router.get("", response_model=List[str])
async def list_saved_projects(db: Session = Depends(get_db)):
    try:
        names = list_project_names(db)
        logger.info(f"Listed {len(names)} saved projects")
        return names
    except Exception as e:
        logger.error(f"Error listing saved projects: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to list saved projects: {str(e)}")
