"""User and archive routes."""

from typing import Any, Dict, List

from fastapi import APIRouter, status

from core.dependencies import UserManagerDep
from schemas.user import CreateUserRequest

router = APIRouter(prefix="/api", tags=["Users"])


@router.post("/users/add", status_code=status.HTTP_201_CREATED, summary="Add a user")
def add_user(req: CreateUserRequest, user_manager: UserManagerDep) -> dict:
    """Register a user with a hashed password and a generated userId.

    Returns:
        Dictionary with success message and the user (without password).
    """
    user = user_manager.create_user(req)
    return {
        "success": True,
        "message": "User added successfully",
        "user": user.to_public(),
    }


@router.get("/users", summary="List users")
def list_users(user_manager: UserManagerDep) -> List[Dict[str, Any]]:
    return [u.to_public() for u in user_manager.list_users()]


@router.get("/users/{user_id}", summary="Get an active user")
def get_user(user_id: str, user_manager: UserManagerDep) -> Dict[str, Any]:
    return user_manager.get_active_user(user_id).to_public()


@router.patch("/users/{user_id}/archive", summary="Archive a user")
def archive_user(user_id: str, user_manager: UserManagerDep) -> dict:
    user = user_manager.archive_user(user_id)
    return {
        "success": True,
        "message": f"User {user_id} archived successfully.",
        "user": user.to_public(),
    }


@router.get("/archived-users", summary="List archived users")
def list_archived_users(user_manager: UserManagerDep) -> List[Dict[str, Any]]:
    return [u.to_public() for u in user_manager.list_archived_users()]


@router.patch("/archived-users/restore-all", summary="Restore all archived users")
def restore_all(user_manager: UserManagerDep) -> dict:
    restored = user_manager.restore_all()
    return {
        "success": True,
        "message": "All archived users restored successfully.",
        "restored": restored,
    }


@router.patch("/archived-users/restore/{user_id}", summary="Restore an archived user")
def restore_user(user_id: str, user_manager: UserManagerDep) -> dict:
    user = user_manager.restore_user(user_id)
    return {
        "success": True,
        "message": f"User {user_id} restored successfully.",
        "user": user.to_public(),
    }


# Declared before /{user_id} so "delete-all" is not taken as a userId
@router.delete("/archived-users/delete-all", summary="Delete all archived users")
def delete_all_archived(user_manager: UserManagerDep) -> dict:
    deleted = user_manager.purge_all_archived()
    return {
        "success": True,
        "message": "All archived users deleted permanently.",
        "deleted": deleted,
    }


@router.delete("/archived-users/{user_id}", summary="Delete an archived user")
def delete_archived_user(user_id: str, user_manager: UserManagerDep) -> dict:
    user_manager.purge_user(user_id)
    return {
        "success": True,
        "message": f"Archived user {user_id} deleted permanently.",
    }
