"""Infrastructure resources: database and local file storage.

This module is part of the infra layer and must not import from application features.
"""
from pathlib import Path, PurePosixPath

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker


class DatabaseResource:
    """Database resource for dependency injection."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine = None
        self.session_factory = None

    async def init(self):
        """Initialize database connection."""
        engine_kwargs = {"echo": False, "pool_pre_ping": True}
        if not self.database_url.startswith("sqlite"):
            engine_kwargs["pool_recycle"] = 3600
        self.engine = create_async_engine(self.database_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    def get_session(self) -> AsyncSession:
        """Get database session (synchronous accessor)."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def shutdown(self):
        """Shutdown database connection."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None


class LocalStorageResource:
    """Disk-backed object storage rooted at a single directory.

    Objects are addressed by relative POSIX keys (``<folder>/<name>``) and are
    published under ``url_prefix`` by the static files mount.
    """

    def __init__(self, root_dir: str, url_prefix: str = "/uploads"):
        self.root_dir = Path(root_dir)
        self.url_prefix = "/" + url_prefix.strip("/")

    async def init(self):
        """Create the storage root."""
        await self.ensure_root()
        return self

    async def ensure_root(self):
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, object_name: str) -> Path:
        path = (self.root_dir / PurePosixPath(object_name)).resolve()
        if not path.is_relative_to(self.root_dir.resolve()):
            raise ValueError(f"Object key escapes storage root: {object_name}")
        return path

    async def put_object_bytes(self, object_name: str, data: bytes) -> str:
        """Write object bytes, creating parent folders on demand; returns its URL."""
        path = self._resolve(object_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise RuntimeError(f"Failed to write object {object_name}: {e}") from e
        return self.public_url(object_name)

    async def remove_object(self, object_name: str) -> bool:
        path = self._resolve(object_name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def public_url(self, object_name: str) -> str:
        return f"{self.url_prefix}/{object_name}"

    async def shutdown(self):
        return self
