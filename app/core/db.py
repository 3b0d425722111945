from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from .config import settings
from .base import Base

engine = create_async_engine(settings.POSTGRES_DSN, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session():
    async with SessionLocal() as session:
        yield session

def _import_models():
    # register every table on Base.metadata
    from app.modules.animals import models as _animals  # noqa: F401
    from app.modules.health_events import models as _health_events  # noqa: F401
    from app.modules.measurements import models as _measurements  # noqa: F401
    from app.modules.media import models as _media  # noqa: F401
    from app.modules.notifications import models as _notifications  # noqa: F401

async def init_models():
    ## In dev-only "create_all" mode, create tables at startup; otherwise, migrations own the schema.
    if settings.DB_MANAGE.lower() == "create_all":
        _import_models()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
