import logging
import uuid

from sqlalchemy.orm import Session

from src.models.user import User
from src.schemas.user import UserModel
from libgravatar import Gravatar

logger = logging.getLogger(__name__)


async def get_user_by_email(email: str, db: Session) -> User:
    """
    Retrieves a user by their email address.

    :param email: The email address of the user to retrieve.
    :type email: str
    :param db: The database session.
    :type db: Session
    :return: The user object if found, otherwise None.
    :rtype: User
    """
    return db.query(User).filter(User.email == email).first()


async def get_user_by_id(user_id: uuid.UUID, db: Session) -> User:
    """
    Retrieves a user by their identifier.

    :param user_id: The identifier embedded in the access token.
    :type user_id: uuid.UUID
    :param db: The database session.
    :type db: Session
    :return: The user object if found, otherwise None.
    :rtype: User
    """
    return db.query(User).filter(User.id == user_id).first()


async def create_user(body: UserModel, db: Session) -> User:
    """
    Creates a new user in the database.

    The password in ``body`` must already be hashed.

    :param body: The user data to create.
    :type body: UserModel
    :param db: The database session.
    :type db: Session
    :return: The newly created user object.
    :rtype: User
    """
    try:
        g = Gravatar(body.email)
        avatar = g.get_image()
    except Exception as e:
        logger.warning("Could not build gravatar for %s: %s", body.email, e)
        avatar = None
    new_user = User(**body.model_dump(), avatar=avatar)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


async def update_password(user: User, password: str, db: Session) -> None:
    """
    Updates a user's password.

    :param user: The user object to update.
    :type user: User
    :param password: The new hashed password.
    :type password: str
    :param db: The database session.
    :type db: Session
    :return: None
    """
    user.password = password
    db.commit()
