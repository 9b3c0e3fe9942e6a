from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import CredentialUser
from ...api.deps import get_admin_user
from ...services.admin_service import AdminService
from ...schemas.auth import UserResponse
from ...schemas.common import Message, MAX_ID
from ...schemas.doctor import DoctorApprovalResponse, DoctorProfileResponse

router = APIRouter(prefix="/admin", tags=["Admin"])

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    _: CredentialUser = Depends(get_admin_user)
):
    """List all users, without password hashes."""
    users = AdminService(db).list_users()
    return [UserResponse.model_validate(user) for user in users]

@router.put("/doctors/{user_id}/approve", response_model=DoctorApprovalResponse)
async def approve_doctor(
    user_id: int = Path(..., le=MAX_ID),
    db: Session = Depends(get_db),
    _: CredentialUser = Depends(get_admin_user)
):
    """Approve a doctor so customers can find and book them."""
    user, profile = AdminService(db).approve_doctor(user_id)

    return DoctorApprovalResponse(
        msg="Doctor approved successfully",
        user=UserResponse.model_validate(user),
        doctor_profile=DoctorProfileResponse.model_validate(profile)
    )

@router.delete("/users/{user_id}", response_model=Message)
async def delete_user(
    user_id: int = Path(..., le=MAX_ID),
    db: Session = Depends(get_db),
    admin: CredentialUser = Depends(get_admin_user)
):
    """Delete a user together with their profile and appointments."""
    AdminService(db).delete_user(user_id, acting_user_id=admin.id)
    return Message(msg="User and associated data removed")
