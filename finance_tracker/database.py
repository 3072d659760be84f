import structlog
from sqlmodel import SQLModel, create_engine, Session, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool

from .config import settings


logger = structlog.get_logger()


if settings.database_url.startswith("sqlite"):
    engine = create_engine(
        settings.database_url,
        echo=settings.sql_echo,
        connect_args={"check_same_thread": False, "timeout": 60},
        poolclass=NullPool,  # avoid multiple pooled connections holding write locks
    )
    # Configure SQLite pragmas to reduce locking
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL;")
            conn.exec_driver_sql("PRAGMA busy_timeout=60000;")
    except OperationalError:
        # If the database is momentarily locked (e.g., during reloader startup), continue without failing.
        logger.warning("sqlite_pragmas_skipped", database_url=settings.database_url)
else:
    engine = create_engine(
        settings.database_url,
        echo=settings.sql_echo,
    )


DEFAULT_CATEGORIES = [
    {"name": "Food", "icon": "🍔", "keywords": ["restaurant", "food", "grocery", "supermarket", "cafe", "coffee", "pizza", "burger", "lunch", "dinner", "mcdonalds", "kfc", "lidl", "kaufland", "mega image", "carrefour", "auchan", "profi", "penny", "glovo", "tazz", "bolt food", "uber eats"]},
    {"name": "Transport", "icon": "🚗", "keywords": ["uber", "bolt", "taxi", "fuel", "gas", "petrol", "parking", "metro", "bus", "train", "omv", "petrom", "mol", "lukoil", "rompetol"]},
    {"name": "Rent", "icon": "🏠", "keywords": ["rent", "chirie", "mortgage", "landlord"]},
    {"name": "Utilities", "icon": "💡", "keywords": ["electric", "electricity", "water", "gas", "internet", "phone", "enel", "digi", "vodafone", "orange", "telekom", "engie"]},
    {"name": "Entertainment", "icon": "🎬", "keywords": ["netflix", "spotify", "cinema", "movie", "game", "steam", "playstation", "hbo", "disney", "youtube", "subscription"]},
    {"name": "Shopping", "icon": "🛍️", "keywords": ["amazon", "emag", "altex", "zara", "h&m", "ikea", "decathlon", "fashion", "clothes", "shoes"]},
    {"name": "Health", "icon": "🏥", "keywords": ["pharmacy", "doctor", "hospital", "medical", "dentist", "gym", "fitness", "farmacia", "catena", "sensiblu"]},
    {"name": "Education", "icon": "📚", "keywords": ["school", "university", "course", "udemy", "book", "tuition", "training"]},
    {"name": "Salary", "icon": "💰", "keywords": ["salary", "salariu", "wage", "payroll", "income"]},
    {"name": "Freelance", "icon": "💻", "keywords": ["freelance", "consulting", "contract", "project", "client payment"]},
    {"name": "Other", "icon": "📦", "keywords": []},
]


def get_session():
    with Session(engine) as session:
        yield session


def seed_default_categories(session: Session) -> int:
    """Insert the shared default categories, refreshing keywords of existing ones."""
    from .models.category import Category

    for entry in DEFAULT_CATEGORIES:
        existing = session.exec(
            select(Category).where(
                Category.name == entry["name"],
                Category.is_default == True,  # noqa: E712
            )
        ).first()
        if existing is None:
            session.add(
                Category(
                    name=entry["name"],
                    icon=entry["icon"],
                    keywords=list(entry["keywords"]),
                    is_default=True,
                    user_id=None,
                )
            )
        else:
            existing.keywords = list(entry["keywords"])
            session.add(existing)
    session.commit()
    return len(DEFAULT_CATEGORIES)


def init_db():
    from .models import user, account, category, transaction, budget, goal  # noqa: F401

    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seeded = seed_default_categories(session)
    logger.info("database_initialized", default_categories=seeded)
