import logging
import uuid
from typing import Optional

from jose import JWTError, jwt
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import redis.asyncio as redis

from src.conf.config import settings
from src.repository import users as repository_users
from src.conf.db import get_db
from src.models.user import User
from src.schemas.user import UserDb

logger = logging.getLogger(__name__)

# A missing header is answered with 403 by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


class Auth:
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)
    SECRET_KEY = settings.secret_key
    ALGORITHM = settings.algorithm
    TOKEN_TTL = settings.access_token_expire_seconds
    r = redis.Redis(host=settings.redis_host, port=settings.redis_port, db=0)

    def verify_password(self, plain_password, hashed_password):
        """
        Verifies a plain-text password against a hashed password.

        :param plain_password: The plain-text password.
        :type plain_password: str
        :param hashed_password: The hashed password.
        :type hashed_password: str
        :return: True if the passwords match, False otherwise.
        :rtype: bool
        """
        return self.pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str):
        """
        Hashes a plain-text password with bcrypt, cost factor 12.

        :param password: The plain-text password.
        :type password: str
        :return: The hashed password.
        :rtype: str
        """
        return self.pwd_context.hash(password)

    async def create_access_token(self, data: dict, expires_delta: Optional[float] = None):
        """
        Creates a new access token.

        :param data: The data to encode into the token, e.g. ``{"_id": "<user id>"}``.
        :type data: dict
        :param expires_delta: Optional expiry time in seconds. Defaults to one hour.
        :type expires_delta: Optional[float]
        :return: The encoded access token.
        :rtype: str
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc).replace(microsecond=0)
        expire = now + timedelta(seconds=expires_delta or self.TOKEN_TTL)
        to_encode.update({"iat": now, "exp": expire})
        encoded_access_token = jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)
        return encoded_access_token

    def decode_access_token(self, token: str) -> uuid.UUID:
        """
        Verifies an access token and returns the user id it carries.

        :param token: The encoded access token.
        :type token: str
        :raises HTTPException: 401 Unauthorized if the signature, expiry or payload is invalid.
        :return: The user id embedded in the token.
        :rtype: uuid.UUID
        """
        unauthorized = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized!",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
            return uuid.UUID(str(payload["_id"]))
        except (JWTError, KeyError, ValueError) as e:
            logger.info("JWT verification failed: %s", e)
            raise unauthorized

    async def get_current_user(self, credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
                               db: Session = Depends(get_db)):
        """
        Retrieves the current authenticated user from the bearer token.

        :param credentials: The bearer credentials from the ``Authorization`` header.
        :type credentials: HTTPAuthorizationCredentials | None
        :param db: The database session.
        :type db: Session
        :raises HTTPException: 403 Forbidden if no bearer token was sent.
        :raises HTTPException: 401 Unauthorized if the token is invalid or the user does not exist.
        :raises HTTPException: 500 Internal Server Error if the user lookup fails.
        :return: The authenticated user object.
        :rtype: User
        """
        if credentials is None or not credentials.credentials:
            logger.info("No token provided")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: No token provided!")

        user_id = self.decode_access_token(credentials.credentials)

        cached = await self._get_cached_user(user_id)
        if cached is not None:
            return cached

        try:
            user = await repository_users.get_user_by_id(user_id, db)
        except SQLAlchemyError:
            logger.exception("Error while finding user %s", user_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")
        if user is None:
            logger.info("User %s not found", user_id)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized!",
                headers={"WWW-Authenticate": "Bearer"},
            )
        await self._cache_user(user)
        return user

    async def _get_cached_user(self, user_id: uuid.UUID) -> User | None:
        try:
            raw = await self.r.get(f"user:{user_id}")
        except redis.RedisError as e:
            logger.warning("User cache unavailable: %s", e)
            return None
        if raw is None:
            return None
        return User(**UserDb.model_validate_json(raw).model_dump())

    async def _cache_user(self, user: User) -> None:
        try:
            await self.r.set(f"user:{user.id}", UserDb.model_validate(user).model_dump_json(), ex=3600)
        except redis.RedisError as e:
            logger.warning("User cache unavailable: %s", e)

auth_service = Auth()
