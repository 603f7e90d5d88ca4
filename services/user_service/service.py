from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import ConflictError, NotFoundError
from .models import User
from .repository import UserRepository
from .schemas import UserCreate, UserUpdate


class UserService:

    @staticmethod
    async def create_user(db: AsyncSession, data: UserCreate) -> User:
        try:
            async with unit_of_work(db):
                return await UserRepository.create(db, User(name=data.name, email=data.email.lower()))
        except ConflictError as exc:
            raise ConflictError("Email already exists") from exc

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> User:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    async def list_users(db: AsyncSession):
        return await UserRepository.list_all(db)

    @staticmethod
    async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> User:
        try:
            async with unit_of_work(db):
                user = await UserRepository.get_by_id(db, user_id)
                if not user:
                    raise NotFoundError("User not found")
                if data.name is not None:
                    user.name = data.name
                if data.email is not None:
                    user.email = data.email.lower()
                return await UserRepository.update(db, user)
        except ConflictError as exc:
            raise ConflictError("Email already exists") from exc

    @staticmethod
    async def delete_user(db: AsyncSession, user_id: int) -> None:
        async with unit_of_work(db):
            if not await UserRepository.delete(db, user_id):
                raise NotFoundError("User not found")
