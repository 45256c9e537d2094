from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from canonkeeper.config import get_settings

settings = get_settings()

# Create the async engine
# echo=True will log SQL queries, helpful for debugging
engine = create_async_engine(settings.database_url, echo=settings.database_echo)

# Create a session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency for providing the session factory engine operations run on.

    Each engine operation opens its own session and transaction from this
    factory, so nothing is shared between requests.
    """
    return AsyncSessionLocal
