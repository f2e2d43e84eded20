"""
Director service: account administration.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.logging import get_logger
from core.models import Director
from core.repositories import DirectorRepository
from core.security import hash_password

from ..schemas import DirectorCreateRequest, DirectorUpdateRequest

logger = get_logger("directors")


def _require_cities(cities: list[str]) -> None:
    if not cities:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one city is required",
        )


def list_directors(db: Session) -> list[Director]:
    return DirectorRepository(db).list_newest()


def get_director(db: Session, director_id: int) -> Director:
    director = DirectorRepository(db).get_by_id(director_id)
    if not director:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Director not found")
    return director


def create_director(db: Session, payload: DirectorCreateRequest) -> Director:
    _require_cities(payload.cities)
    repo = DirectorRepository(db)
    if repo.get_by_login(payload.login):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Director with this login already exists",
        )

    director = repo.create(
        password_hash=hash_password(payload.password),
        **payload.model_dump(exclude={"password"}),
    )
    db.commit()
    logger.info("director_created", director_id=director.id, login=director.login)
    return director


def update_director(db: Session, director_id: int, payload: DirectorUpdateRequest) -> Director:
    """
    Apply the fields present in the request.

    An explicit null clears the optional text fields; name and cities are
    only replaced by non-empty values.
    """
    get_director(db, director_id)
    data = payload.model_dump(exclude_unset=True, exclude={"password"})
    if data.get("name") is None:
        data.pop("name", None)
    if "cities" in data:
        if data["cities"] is None:
            data.pop("cities")
        else:
            _require_cities(data["cities"])
    if payload.password:
        data["password_hash"] = hash_password(payload.password)

    director = DirectorRepository(db).update(director_id, **data)
    db.commit()
    logger.info(
        "director_updated",
        director_id=director_id,
        fields=sorted(k for k in data if k != "password_hash"),
        password_changed="password_hash" in data,
    )
    return director


def delete_director(db: Session, director_id: int) -> None:
    get_director(db, director_id)
    DirectorRepository(db).delete(director_id)
    db.commit()
    logger.info("director_deleted", director_id=director_id)
