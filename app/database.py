from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from app.config import get_settings

settings = get_settings()


def normalize_database_url(url: str) -> str:
    """Map plain driver URLs onto their async drivers."""
    if url.startswith("mysql://"):
        return "mysql+aiomysql://" + url[8:]
    if url.startswith("sqlite:///"):
        return "sqlite+aiosqlite:///" + url[10:]
    url = url.replace("mysql+mysqldb://", "mysql+aiomysql://")
    url = url.replace("mysql+pymysql://", "mysql+aiomysql://")
    return url


database_url = normalize_database_url(settings.database_url)

engine_kwargs = {"echo": settings.database_echo}
if not database_url.startswith("sqlite"):
    engine_kwargs["pool_pre_ping"] = True  # Reconnect on stale connections

engine = create_async_engine(database_url, **engine_kwargs)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
