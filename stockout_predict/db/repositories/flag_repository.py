"""Flag repository for database operations."""

import json
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockout_predict.db.models import Flag


class FlagRepository:
    """Repository for Flag rows keyed by flag code."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_code(self, flag_code: str) -> Flag | None:
        """Get flag by code."""
        result = await self.session.execute(
            select(Flag).where(Flag.flag_code == flag_code)
        )
        return result.scalar_one_or_none()

    async def updated_since(self, flag_code: str, cutoff: datetime) -> bool:
        """Check whether the flag was touched at or after the cutoff."""
        result = await self.session.execute(
            select(Flag.last_update)
            .where(Flag.flag_code == flag_code, Flag.last_update >= cutoff)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def upsert(
        self,
        flag_code: str,
        flag_data: dict,
        last_update: datetime,
        state: int = 1,
    ) -> Flag:
        """Insert the flag, or update state, data and timestamp if it exists."""
        flag = await self.get_by_code(flag_code)
        if flag:
            flag.state = state
            flag.flag_data = json.dumps(flag_data)
            flag.last_update = last_update
        else:
            flag = Flag(
                flag_code=flag_code,
                state=state,
                flag_data=json.dumps(flag_data),
                last_update=last_update,
            )
            self.session.add(flag)
        await self.session.flush()
        return flag
