"""
Administration endpoints
"""
from typing import Dict, Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import require_roles
from models.schemas import UpdateRoleRequest
from models.team import VALID_ROLES, Role, User
from utils.logging import get_logger
from utils.serializers import user_to_dict

logger = get_logger(__name__)
router = APIRouter()

admin_only = require_roles(Role.ADMIN.value)


@router.get("/users", response_model=List[Dict[str, Any]])
async def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(admin_only)
):
    """Every user with their roles"""
    try:
        users = db.query(User).order_by(User.username).all()
        return [user_to_dict(u, include_roles=True) for u in users]

    except Exception as e:
        logger.error("Failed to fetch users", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to fetch users: {str(e)}")


@router.put("/update-role", response_model=Dict[str, Any])
async def update_role(
    payload: UpdateRoleRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(admin_only)
):
    """Replace a user's roles"""
    invalid = [role for role in payload.new_roles if role not in VALID_ROLES]
    if invalid:
        raise HTTPException(status_code=400, detail=f"Invalid roles: {', '.join(invalid)}")

    if payload.user_id == admin.id and Role.ADMIN.value not in payload.new_roles:
        raise HTTPException(status_code=403, detail="You cannot remove your own ADMIN role")

    try:
        user = db.get(User, payload.user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        user.roles = list(dict.fromkeys(payload.new_roles))
        db.commit()
        db.refresh(user)

        logger.info("User roles updated", username=user.username, roles=",".join(user.roles), by=admin.username)
        return {"message": "Roles updated successfully", "user": user_to_dict(user, include_roles=True)}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error("Failed to update roles", user_id=str(payload.user_id), error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to update roles: {str(e)}")
