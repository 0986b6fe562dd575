import logging

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from src.conf.db import get_db
from src.schemas.user import UserModel, UserDb, LoginModel, LoginResponse
from src.repository import users as repository_users
from src.services.auth import auth_service

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserDb, status_code=status.HTTP_201_CREATED)
async def register(body: UserModel, db: Session = Depends(get_db)):
    """
    Registers a new user.

    :param body: The user registration data.
    :type body: UserModel
    :param db: The database session.
    :type db: Session
    :raises HTTPException: 400 Bad Request if an account with the given email already exists.
    :return: The created user, without the password.
    :rtype: UserDb
    """
    exist_user = await repository_users.get_user_by_email(body.email, db)
    if exist_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"a user with that email [{body.email}] already exists so please try another one.",
        )
    body.password = auth_service.get_password_hash(body.password)
    new_user = await repository_users.create_user(body, db)
    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginModel, db: Session = Depends(get_db)):
    """
    Authenticates a user and returns a one-hour access token.

    :param body: The login credentials.
    :type body: LoginModel
    :param db: The database session.
    :type db: Session
    :raises HTTPException: 400 Bad Request if the email is unknown or the password is wrong.
    :return: The access token and the sanitized user.
    :rtype: LoginResponse
    """
    user = await repository_users.get_user_by_email(body.email, db)
    if user is None or not auth_service.verify_password(body.password, user.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password!")
    token = await auth_service.create_access_token(data={"_id": str(user.id)})
    return {"token": token, "user": user}
