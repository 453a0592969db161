from __future__ import annotations

import asyncio

from sqlalchemy.exc import SQLAlchemyError

# asyncpg surfaces refused/dropped connections as bare OSError or timeouts,
# which SQLAlchemy does not wrap.
STORE_ERRORS: tuple[type[BaseException], ...] = (
    SQLAlchemyError,
    OSError,
    asyncio.TimeoutError,
)
