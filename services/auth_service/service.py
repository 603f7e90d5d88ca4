from fastapi import HTTPException, status
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import ConflictError, NotFoundError
from shared.security.jwt_handler import create_access_token

from .models import Account
from .repository import AccountRepository
from .schemas import AccountCreate, AccountLogin, TokenResponse

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    async def register(db: AsyncSession, data: AccountCreate) -> Account:
        try:
            async with unit_of_work(db):
                if await AccountRepository.get_by_email(db, data.email):
                    raise ConflictError("User already exists")
                account = Account(
                    email=data.email.lower(),
                    full_name=data.full_name.strip(),
                    hashed_password=AuthService._hash_password(data.password),
                )
                await AccountRepository.add(db, account)
        except ConflictError as exc:
            # A concurrent registration can still trip the unique index
            raise ConflictError("User already exists") from exc
        return account

    @staticmethod
    async def login(db: AsyncSession, data: AccountLogin) -> TokenResponse:
        account = await AccountRepository.get_by_email(db, data.email)
        if not account or not AuthService._verify_password(data.password, account.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not account.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled",
            )
        token = create_access_token(data={"sub": str(account.id)})
        return TokenResponse(access_token=token)

    @staticmethod
    async def get_account(db: AsyncSession, account_id: int) -> Account:
        account = await AccountRepository.get_by_id(db, account_id)
        if not account:
            raise NotFoundError("User not found")
        return account
