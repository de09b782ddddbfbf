"""
Database models and operations for NewsLens.
"""

from sqlalchemy import (
    create_engine, Column, Integer, String, Text, DateTime, ForeignKey, Index, CheckConstraint, func, text
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, relationship, selectinload, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from datetime import datetime
from typing import List, Optional, Dict, Any, Iterable, Union
from loguru import logger

from config.settings import DATABASE_CONFIG, SQLITE_URL
from newslens.exceptions import PersistenceError
from newslens.utils.time_utils import cutoff, to_naive_utc, as_utc
from .article import NormalizedArticle, WordFrequencyEntry, TimeWindow

Base = declarative_base()


class ArticleDB(Base):
    """SQLAlchemy model for normalized articles."""
    __tablename__ = 'articles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False, default='')
    description = Column(Text, nullable=False, default='')
    source_name = Column(Text, nullable=False, index=True)
    author = Column(Text, nullable=True)
    url = Column(Text, nullable=False)  # Not unique: the store is append-only
    published_at = Column(String(16), nullable=False, index=True)  # 'HH:MM:SS+00'
    published_datetime = Column(DateTime, nullable=True, index=True)  # Naive UTC
    content = Column(Text, nullable=False, default='')
    category = Column(Text, nullable=True, index=True)
    word_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=datetime.now, nullable=False)

    word_frequencies = relationship(
        'WordFrequencyDB',
        back_populates='article',
        order_by='WordFrequencyDB.id',
        cascade='all, delete-orphan'
    )

    __table_args__ = (
        CheckConstraint('word_count >= 0', name='ck_articles_word_count'),
        Index('idx_articles_source_published', 'source_name', 'published_datetime'),
        Index('idx_articles_category_published', 'category', 'published_datetime'),
    )

    def to_article(self) -> NormalizedArticle:
        """Convert database record to NormalizedArticle model."""
        return NormalizedArticle(
            id=self.id,
            title=self.title,
            description=self.description,
            source_name=self.source_name,
            author=self.author,
            url=self.url,
            published_at=self.published_at,
            content=self.content,
            category=self.category,
            word_count=self.word_count,
            word_frequencies=tuple(
                WordFrequencyEntry(word=row.word, frequency=row.frequency)
                for row in self.word_frequencies
            ),
            published_datetime=as_utc(self.published_datetime),
        )

    @classmethod
    def from_article(cls, article: NormalizedArticle) -> 'ArticleDB':
        """Create database record from NormalizedArticle model (without frequencies)."""
        return cls(
            title=article.title,
            description=article.description,
            source_name=article.source_name,
            author=article.author,
            url=article.url,
            published_at=article.published_at,
            published_datetime=to_naive_utc(article.published_datetime),
            content=article.content,
            category=article.category,
            word_count=article.word_count,
        )


class WordFrequencyDB(Base):
    """SQLAlchemy model for one entry of an article's word-frequency table."""
    __tablename__ = 'word_frequencies'

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(Integer, ForeignKey('articles.id', ondelete='CASCADE'), nullable=False, index=True)
    word = Column(Text, nullable=False, index=True)
    frequency = Column(Integer, nullable=False)

    article = relationship('ArticleDB', back_populates='word_frequencies')

    __table_args__ = (
        CheckConstraint('frequency >= 1', name='ck_word_frequencies_frequency'),
    )


class DatabaseManager:
    """
    Article store with PostgreSQL support and SQLite fallback.

    From the pipeline's point of view the store is append-only: articles
    and their word frequencies are inserted one at a time and read back by
    time window. Every insert commits on its own, so a failure leaves the
    earlier inserts of the same batch in place.
    """

    def __init__(self, database_config: Dict[str, Any] = None):
        """
        Initialize database manager.

        Args:
            database_config: Database configuration dict. Uses DATABASE_CONFIG if None.
        """
        self.config = database_config or DATABASE_CONFIG
        self.engine = None
        self.SessionLocal = None
        self.database_type = None
        self._initialize_database()
        self.create_tables()

    def _initialize_database(self):
        """Initialize database connection with fallback logic."""
        try:
            self._connect(self.config['url'])
        except (SQLAlchemyError, ImportError) as primary_error:
            logger.warning(f"Primary database connection failed: {primary_error}")
            logger.info("Falling back to SQLite...")
            try:
                self._connect(self.config.get('sqlite_fallback', SQLITE_URL))
            except SQLAlchemyError as sqlite_error:
                logger.error(f"SQLite connection also failed: {sqlite_error}")
                raise PersistenceError("Could not connect to any database") from sqlite_error

    def _connect(self, url: str):
        """Create the engine for ``url`` and test the connection."""
        if url.startswith('sqlite'):
            engine_args = {
                'echo': self.config.get('echo', False),
                'connect_args': {'check_same_thread': False},  # SQLite specific
            }
            if url in ('sqlite://', 'sqlite:///:memory:'):
                # Share the single in-memory database across sessions
                engine_args['poolclass'] = StaticPool
        else:
            # Connection pooling for PostgreSQL
            engine_args = {
                'pool_size': self.config.get('pool_size', 10),
                'max_overflow': self.config.get('max_overflow', 20),
                'pool_timeout': self.config.get('pool_timeout', 30),
                'pool_recycle': self.config.get('pool_recycle', 3600),
                'echo': self.config.get('echo', False),
            }

        engine = create_engine(url, **engine_args)

        # Test connection
        with engine.connect() as conn:
            conn.execute(text('SELECT 1'))

        self.engine = engine
        self.database_type = engine.dialect.name
        logger.info(f"Connected to {self.database_type} database")

    def _initialize_session(self):
        """Initialize session maker."""
        if not self.SessionLocal:
            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine,
                expire_on_commit=False
            )

    def create_tables(self):
        """Create all database tables."""
        if not self.engine:
            raise PersistenceError("Database not initialized")

        self._initialize_session()

        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info(f"Database tables created successfully ({self.database_type})")
        except SQLAlchemyError as e:
            logger.error(f"Error creating tables: {e}")
            raise PersistenceError(f"Could not create tables: {e}") from e

    def get_database_info(self) -> Dict[str, Any]:
        """Get database connection information."""
        return {
            'type': self.database_type,
            'url': self.engine.url.render_as_string(hide_password=True) if self.engine else None,
            'pool_size': getattr(self.engine.pool, 'size', lambda: None)() if self.engine else None,
            'checked_out': getattr(self.engine.pool, 'checkedout', lambda: None)() if self.engine else None,
        }

    def get_session(self) -> Session:
        """Get a database session."""
        if not self.SessionLocal:
            self._initialize_session()
        return self.SessionLocal()

    def insert_article(self, article: NormalizedArticle) -> int:
        """
        Insert one article and return its id.

        Raises:
            PersistenceError: If the insert fails
        """
        session = self.get_session()
        try:
            db_article = ArticleDB.from_article(article)
            session.add(db_article)
            session.commit()
            logger.debug(f"Inserted article {db_article.id}: {article.title[:50]}")
            return db_article.id
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error inserting article {article.url}: {e}")
            raise PersistenceError(f"Could not insert article {article.url}: {e}") from e
        finally:
            session.close()

    def insert_word_frequencies(self, article_id: int, entries: Iterable[WordFrequencyEntry]) -> None:
        """
        Insert the word-frequency entries of an article.

        Raises:
            PersistenceError: If the insert fails
        """
        rows = [
            WordFrequencyDB(article_id=article_id, word=entry.word, frequency=entry.frequency)
            for entry in entries
        ]
        if not rows:
            return

        session = self.get_session()
        try:
            session.add_all(rows)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error inserting word frequencies for article {article_id}: {e}")
            raise PersistenceError(f"Could not insert word frequencies for article {article_id}: {e}") from e
        finally:
            session.close()

    def query_by_window(self,
                        window: Union[TimeWindow, str],
                        now: Optional[datetime] = None) -> List[NormalizedArticle]:
        """
        Retrieve articles published within a time window.

        Args:
            window: TimeWindow or its string value
            now: Reference instant for the cutoff. Defaults to the current time.

        Returns:
            Articles with their word frequencies, most recent published_at first
        """
        lower_bound = cutoff(window, now)
        session = self.get_session()
        try:
            query = session.query(ArticleDB).options(selectinload(ArticleDB.word_frequencies))

            if lower_bound is not None:
                query = query.filter(ArticleDB.published_datetime >= to_naive_utc(lower_bound))

            query = query.order_by(ArticleDB.published_at.desc(), ArticleDB.id.desc())

            return [db_article.to_article() for db_article in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error querying articles for window {window}: {e}")
            raise PersistenceError(f"Could not query articles: {e}") from e
        finally:
            session.close()

    def get_stats(self) -> Dict[str, Any]:
        """Get article store statistics."""
        session = self.get_session()
        try:
            total_articles = session.query(ArticleDB).count()
            total_frequencies = session.query(WordFrequencyDB).count()
            source_count = session.query(func.count(func.distinct(ArticleDB.source_name))).scalar() or 0

            category_counts = {}
            rows = (
                session.query(ArticleDB.category, func.count(ArticleDB.id))
                .filter(ArticleDB.category.isnot(None))
                .group_by(ArticleDB.category)
                .all()
            )
            for category, count in rows:
                category_counts[category] = count

            return {
                'total_articles': total_articles,
                'total_word_frequencies': total_frequencies,
                'source_count': source_count,
                'category_distribution': category_counts
            }
        finally:
            session.close()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Return the shared database manager, connecting on first use."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager
