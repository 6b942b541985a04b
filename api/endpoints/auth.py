"""
User registration
"""
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import hash_password
from models.schemas import RegisterRequest
from models.team import Role, User, UserType
from utils.logging import get_logger
from utils.serializers import user_to_dict

logger = get_logger(__name__)
router = APIRouter()


@router.post("/register", status_code=201, response_model=Dict[str, Any])
async def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create a developer account"""
    if not all([payload.username, payload.password, payload.email, payload.name]):
        raise HTTPException(status_code=400, detail="Please fill in all required fields")

    try:
        existing = (
            db.query(User)
            .filter(or_(User.username == payload.username, User.email == payload.email))
            .first()
        )
        if existing:
            raise HTTPException(status_code=409, detail="Username or email already exists")

        user_type = payload.type if payload.type in (t.value for t in UserType) else UserType.NON_CORE.value
        user = User(
            username=payload.username,
            password=hash_password(payload.password),
            email=payload.email,
            name=payload.name,
            phone=payload.phone,
            type=user_type,
            roles=[Role.DEVELOPER.value],
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info("User registered", username=user.username)
        return {"message": "User registered successfully", "user": user_to_dict(user, include_roles=True)}

    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username or email already exists")
    except Exception as e:
        db.rollback()
        logger.error("Failed to register user", username=payload.username, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to register user: {str(e)}")
