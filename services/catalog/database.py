"""
Database connection and management
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import declarative_base, relationship

from catalog.models import DEFAULT_POSTER

logger = logging.getLogger(__name__)

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class PersonMixin(TimestampMixin):
    """Columns shared by directors and actors"""
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, index=True)
    birth_year = Column(Integer)
    bio = Column(Text)
    # Back-reference list of movie ids, kept in step with the movie write paths
    movie_ids = Column(MutableList.as_mutable(JSON), default=list, nullable=False)


class DirectorModel(PersonMixin, Base):
    """SQLAlchemy model for directors"""
    __tablename__ = "directors"

    def __repr__(self):
        return f"<Director(id='{self.id}', name='{self.name}')>"


class ActorModel(PersonMixin, Base):
    """SQLAlchemy model for actors"""
    __tablename__ = "actors"

    def __repr__(self):
        return f"<Actor(id='{self.id}', name='{self.name}')>"


class GenreModel(TimestampMixin, Base):
    """SQLAlchemy model for genres"""
    __tablename__ = "genres"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)
    movie_ids = Column(MutableList.as_mutable(JSON), default=list, nullable=False)

    def __repr__(self):
        return f"<Genre(id='{self.id}', name='{self.name}')>"


class MovieActorModel(Base):
    """Ordered link between a movie and one of its actors"""
    __tablename__ = "movie_actors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    movie_id = Column(String(36), ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    actor_id = Column(String(36), ForeignKey("actors.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    actor = relationship(ActorModel, lazy="selectin")


class MovieGenreModel(Base):
    """Ordered link between a movie and one of its genres"""
    __tablename__ = "movie_genres"

    id = Column(Integer, primary_key=True, autoincrement=True)
    movie_id = Column(String(36), ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    genre_id = Column(String(36), ForeignKey("genres.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    genre = relationship(GenreModel, lazy="selectin")


class MovieModel(TimestampMixin, Base):
    """SQLAlchemy model for movies"""
    __tablename__ = "movies"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(500), nullable=False, index=True)
    release_year = Column(Integer, nullable=False, index=True)
    plot = Column(Text, nullable=False)
    runtime = Column(Integer, nullable=False)
    director_id = Column(String(36), ForeignKey("directors.id"), nullable=False, index=True)
    poster = Column(String(500), nullable=False, default=DEFAULT_POSTER)

    director = relationship(DirectorModel, lazy="selectin")
    actor_links = relationship(
        MovieActorModel,
        order_by=MovieActorModel.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    genre_links = relationship(
        MovieGenreModel,
        order_by=MovieGenreModel.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def actor_ids(self):
        return [link.actor_id for link in self.actor_links]

    @property
    def genre_ids(self):
        return [link.genre_id for link in self.genre_links]

    def __repr__(self):
        return f"<Movie(id='{self.id}', title='{self.title}', release_year={self.release_year})>"


class UserModel(Base):
    """SQLAlchemy model for API users"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(100), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id='{self.id}', username='{self.username}', role='{self.role}')>"


class Database:
    """Database connection manager"""

    def __init__(self, config):
        self.config = config
        self.engine = None
        self.session_factory = None

    async def connect(self):
        """Initialize database connection"""
        try:
            engine_options = {"echo": False}  # Set to True for SQL debugging
            if not self.config.url.startswith("sqlite"):
                engine_options.update(
                    pool_size=self.config.pool_size,
                    max_overflow=self.config.max_overflow,
                )
            self.engine = create_async_engine(self.config.url, **engine_options)

            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False
            )

            # Create tables if they don't exist
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            logger.info("✅ Database connected successfully")

        except Exception as e:
            logger.error(f"❌ Database connection failed: {str(e)}")
            raise

    async def disconnect(self):
        """Close database connection"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database disconnected")

    def session(self) -> AsyncSession:
        """Get database session"""
        if not self.session_factory:
            raise RuntimeError("Database not connected")
        return self.session_factory()

    async def reset(self):
        """Drop and recreate every table"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database reset")

    async def health_check(self) -> bool:
        """Check database health"""
        try:
            async with self.session() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False
