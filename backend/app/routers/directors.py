"""
Director administration endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import (
    DirectorCreateRequest,
    DirectorListResponse,
    DirectorMutationResponse,
    DirectorResponse,
    DirectorUpdateRequest,
    MessageResponse,
)
from ..services import director_service

router = APIRouter(prefix="/admin/directors", tags=["directors"])


@router.get("", response_model=DirectorListResponse)
def list_directors(db: Session = Depends(get_db)):
    """List directors, newest first."""
    return DirectorListResponse(
        directors=[
            DirectorResponse.model_validate(d) for d in director_service.list_directors(db)
        ]
    )


@router.get("/{director_id}", response_model=DirectorResponse)
def get_director(director_id: int, db: Session = Depends(get_db)):
    return DirectorResponse.model_validate(director_service.get_director(db, director_id))


@router.post("", response_model=DirectorMutationResponse, status_code=201)
def create_director(request: DirectorCreateRequest, db: Session = Depends(get_db)):
    director = director_service.create_director(db, request)
    return DirectorMutationResponse(
        message="Director created", director=DirectorResponse.model_validate(director)
    )


@router.put("/{director_id}", response_model=DirectorMutationResponse)
def update_director(
    director_id: int,
    request: DirectorUpdateRequest,
    db: Session = Depends(get_db),
):
    director = director_service.update_director(db, director_id, request)
    return DirectorMutationResponse(
        message="Director updated", director=DirectorResponse.model_validate(director)
    )


@router.delete("/{director_id}", response_model=MessageResponse)
def delete_director(director_id: int, db: Session = Depends(get_db)):
    director_service.delete_director(db, director_id)
    return MessageResponse(message="Director deleted")
