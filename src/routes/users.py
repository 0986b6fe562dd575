from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.conf.db import get_db
from src.models.user import User
from src.schemas.user import UserDb, ChangePasswordModel, MessageResponse
from src.services.auth import auth_service
from src.repository import users as repository_users

router = APIRouter(tags=["users"])


@router.get("/me", response_model=UserDb)
async def read_users_me(current_user: User = Depends(auth_service.get_current_user)):
    """
    Retrieve information about the current authenticated user.

    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The current user's information.
    :rtype: UserDb
    """
    return current_user


@router.put("/change-password", response_model=MessageResponse)
async def change_password(body: ChangePasswordModel, current_user: User = Depends(auth_service.get_current_user),
                          db: Session = Depends(get_db)):
    """
    Replace the current user's password after checking the current one.

    :param body: The current and the new password.
    :type body: ChangePasswordModel
    :param current_user: The currently authenticated user.
    :type current_user: User
    :param db: The database session.
    :type db: Session
    :raises HTTPException: 400 Bad Request if the user is gone or the current password is wrong.
    :return: A confirmation message.
    :rtype: MessageResponse
    """
    user = await repository_users.get_user_by_id(current_user.id, db)
    if user is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User not found.")
    if not auth_service.verify_password(body.current_password, user.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect.")

    hashed_password = auth_service.get_password_hash(body.new_password)
    await repository_users.update_password(user, hashed_password, db)
    return {"message": "Password successfully updated."}
