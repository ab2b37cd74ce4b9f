from typing import Any, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncSession
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T", bound="Base")


class Base(AsyncAttrs, DeclarativeBase):
    __abstract__ = True

    @classmethod
    async def get(cls: Type[T], db: AsyncSession, **kwargs: Any) -> Optional[T]:
        """Fetch the single row whose columns equal ``kwargs``.

        ``None`` values are compared with ``IS NULL`` so nullable natural-key
        columns match the way the unique constraints treat them.
        """
        q = select(cls)
        for field, value in kwargs.items():
            column = getattr(cls, field)
            q = q.where(column.is_(None) if value is None else column == value)

        return (await db.execute(q)).scalar_one_or_none()

    @classmethod
    async def get_or_create(
        cls: Type[T], db: AsyncSession, **kwargs: Any
    ) -> tuple[T, bool]:
        """Find-or-create by natural key.

        The insert runs inside a savepoint. Natural keys carry unique
        constraints, so a concurrent insert of the same key surfaces as an
        IntegrityError; the savepoint is rolled back and the winner's row is
        returned instead.
        """
        obj = await cls.get(db, **kwargs)
        if obj is not None:
            return obj, False

        try:
            async with db.begin_nested():
                obj = cls(**kwargs)
                await obj._asave(db)
        except IntegrityError:
            obj = await cls.get(db, **kwargs)
            if obj is None:
                raise
            return obj, False

        return obj, True

    async def _asave(self, db: AsyncSession) -> None:
        db.add(self)
        await db.flush()
