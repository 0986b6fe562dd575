import unittest
import uuid
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime, timedelta, timezone

from jose import jwt
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
import redis

from src.services.auth import Auth
from src.models.user import User
from src.schemas.user import UserDb


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAuthService(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)
        with patch('src.services.auth.Auth.pwd_context', self.pwd_context):
            self.auth = Auth()
            hashed_password = self.auth.get_password_hash("testpass")
        self.user = User(id=uuid.uuid4(), name="Test User", email="test@example.com", password=hashed_password,
                         avatar="http://example.com/avatar.jpg")
        self.session = MagicMock(spec=Session)

        patcher_secret = patch('src.services.auth.Auth.SECRET_KEY', "super_secret_key")
        patcher_algorithm = patch('src.services.auth.Auth.ALGORITHM', "HS256")
        self.mock_secret = patcher_secret.start()
        self.mock_algorithm = patcher_algorithm.start()
        self.addCleanup(patcher_secret.stop)
        self.addCleanup(patcher_algorithm.stop)

        # Patch Redis methods
        self.patch_redis_get = patch('src.services.auth.Auth.r.get', new_callable=AsyncMock, return_value=None)
        self.mock_redis_get = self.patch_redis_get.start()
        self.addCleanup(self.patch_redis_get.stop)

        self.patch_redis_set = patch('src.services.auth.Auth.r.set', new_callable=AsyncMock, return_value=None)
        self.mock_redis_set = self.patch_redis_set.start()
        self.addCleanup(self.patch_redis_set.stop)

    def test_verify_password(self):
        self.assertTrue(self.auth.verify_password("testpass", self.user.password))
        self.assertFalse(self.auth.verify_password("wrongpass", self.user.password))

    def test_password_hash_uses_cost_12(self):
        self.assertTrue(self.user.password.startswith("$2b$12$"))

    async def test_create_access_token_expires_in_one_hour(self):
        token = await self.auth.create_access_token({"_id": str(self.user.id)})
        decoded = jwt.decode(token, "super_secret_key", algorithms=["HS256"])
        self.assertEqual(decoded["_id"], str(self.user.id))
        self.assertEqual(decoded["exp"] - decoded["iat"], 3600)

    async def test_decode_access_token_valid(self):
        token = await self.auth.create_access_token({"_id": str(self.user.id)})
        self.assertEqual(self.auth.decode_access_token(token), self.user.id)

    def test_decode_access_token_expired(self):
        expired_token = jwt.encode({"_id": str(self.user.id), "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
                                   "super_secret_key", algorithm="HS256")
        with self.assertRaises(HTTPException) as cm:
            self.auth.decode_access_token(expired_token)
        self.assertEqual(cm.exception.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(cm.exception.detail, "Unauthorized!")

    def test_decode_access_token_wrong_signature(self):
        token = jwt.encode({"_id": str(self.user.id)}, "another_key", algorithm="HS256")
        with self.assertRaises(HTTPException) as cm:
            self.auth.decode_access_token(token)
        self.assertEqual(cm.exception.status_code, status.HTTP_401_UNAUTHORIZED)

    async def test_decode_access_token_without_id(self):
        token = await self.auth.create_access_token({"sub": "test@example.com"})
        with self.assertRaises(HTTPException) as cm:
            self.auth.decode_access_token(token)
        self.assertEqual(cm.exception.status_code, status.HTTP_401_UNAUTHORIZED)

    async def test_get_current_user_without_token(self):
        with self.assertRaises(HTTPException) as cm:
            await self.auth.get_current_user(credentials=None, db=self.session)
        self.assertEqual(cm.exception.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(cm.exception.detail, "Forbidden: No token provided!")

    @patch('src.repository.users.get_user_by_id')
    async def test_get_current_user_valid_token(self, mock_get_user_by_id):
        mock_get_user_by_id.return_value = self.user
        token = await self.auth.create_access_token({"_id": str(self.user.id)})

        result = await self.auth.get_current_user(credentials=bearer(token), db=self.session)
        self.assertEqual(result.email, self.user.email)
        mock_get_user_by_id.assert_awaited_once_with(self.user.id, self.session)
        self.mock_redis_get.assert_awaited_with(f"user:{self.user.id}")
        self.mock_redis_set.assert_awaited_with(f"user:{self.user.id}",
                                               UserDb.model_validate(self.user).model_dump_json(), ex=3600)

    @patch('src.repository.users.get_user_by_id')
    async def test_get_current_user_from_cache(self, mock_get_user_by_id):
        self.mock_redis_get.return_value = UserDb.model_validate(self.user).model_dump_json()
        token = await self.auth.create_access_token({"_id": str(self.user.id)})

        result = await self.auth.get_current_user(credentials=bearer(token), db=self.session)
        self.assertEqual(result.id, self.user.id)
        self.assertIsNone(result.password)
        mock_get_user_by_id.assert_not_called()

    @patch('src.repository.users.get_user_by_id')
    async def test_get_current_user_cache_down(self, mock_get_user_by_id):
        self.mock_redis_get.side_effect = redis.ConnectionError("refused")
        self.mock_redis_set.side_effect = redis.ConnectionError("refused")
        mock_get_user_by_id.return_value = self.user
        token = await self.auth.create_access_token({"_id": str(self.user.id)})

        result = await self.auth.get_current_user(credentials=bearer(token), db=self.session)
        self.assertEqual(result, self.user)

    @patch('src.repository.users.get_user_by_id')
    async def test_get_current_user_invalid_token(self, mock_get_user_by_id):
        with self.assertRaises(HTTPException) as cm:
            await self.auth.get_current_user(credentials=bearer("not-a-jwt"), db=self.session)
        self.assertEqual(cm.exception.status_code, status.HTTP_401_UNAUTHORIZED)
        mock_get_user_by_id.assert_not_called()

    @patch('src.repository.users.get_user_by_id')
    async def test_get_current_user_user_not_found(self, mock_get_user_by_id):
        mock_get_user_by_id.return_value = None
        token = await self.auth.create_access_token({"_id": str(uuid.uuid4())})

        with self.assertRaises(HTTPException) as cm:
            await self.auth.get_current_user(credentials=bearer(token), db=self.session)
        self.assertEqual(cm.exception.status_code, status.HTTP_401_UNAUTHORIZED)

    @patch('src.repository.users.get_user_by_id')
    async def test_get_current_user_lookup_error(self, mock_get_user_by_id):
        mock_get_user_by_id.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        token = await self.auth.create_access_token({"_id": str(self.user.id)})

        with self.assertRaises(HTTPException) as cm:
            await self.auth.get_current_user(credentials=bearer(token), db=self.session)
        self.assertEqual(cm.exception.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(cm.exception.detail, "Internal Server Error")
