# =============================================================
# 🗄️ DATABASE — Configuration SQLModel & stockage des snippets
# =============================================================
from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy import func
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv
from typing import Optional
import logging
import os
import random
import time

from models import Snippet, SEED_CONTENT, DEFAULT_CATEGORY

# Charger les variables d'environnement
load_dotenv()

logger = logging.getLogger("uvicorn")

REQUIRED_ENV = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME")
ENGINE_KW = {"pool_pre_ping": True, "pool_recycle": 1800}


# -------------------------------------------------------------
# ⚠️ ERREURS
# -------------------------------------------------------------
class ConfigurationError(RuntimeError):
    """Variables d'environnement absentes ou invalides."""


class StoreError(Exception):
    pass


class DatabaseConnectionError(StoreError):
    pass


class QueryError(StoreError):
    pass


class NotFoundError(QueryError):
    pass


class WriteError(StoreError):
    pass


# -------------------------------------------------------------
# 🔧 CONFIGURATION
# -------------------------------------------------------------
def _normalize_pg_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


def database_url_from_env(environ=None) -> str:
    """
    Construit l'URL de connexion à partir de DB_HOST, DB_PORT, DB_USER,
    DB_PASSWORD et DB_NAME. DATABASE_URL, si présente, est prioritaire.
    """
    env = os.environ if environ is None else environ

    raw_url = (env.get("DATABASE_URL") or "").strip()
    if raw_url:
        return _normalize_pg_url(raw_url)

    missing = [name for name in REQUIRED_ENV if not env.get(name)]
    if missing:
        raise ConfigurationError(f"Variables manquantes : {', '.join(missing)}")

    try:
        port = int(env["DB_PORT"])
    except ValueError:
        raise ConfigurationError(f"DB_PORT invalide : {env['DB_PORT']!r}")

    url = URL.create(
        "postgresql+psycopg2",
        username=env["DB_USER"],
        password=env["DB_PASSWORD"],
        host=env["DB_HOST"],
        port=port,
        database=env["DB_NAME"],
        query={"sslmode": env.get("DB_SSLMODE") or "disable"},
    )
    return url.render_as_string(hide_password=False)


def make_engine(url: Optional[str] = None) -> Engine:
    url = url or database_url_from_env()
    if url.startswith("sqlite"):
        return create_engine(url, echo=False)
    return create_engine(url, echo=False, **ENGINE_KW)


# -------------------------------------------------------------
# 📦 STORE — Table unique des snippets
# -------------------------------------------------------------
class SnippetStore:
    """
    Accès à la table `markdown`. Sans `rng`, le tirage est fait par la base
    (ORDER BY random()); avec un `random.Random` injecté, il est fait ici
    parmi les identifiants correspondants.
    """

    def __init__(self, engine: Engine, rng: Optional[random.Random] = None):
        self.engine = engine
        self.rng = rng

    def initialize(self) -> None:
        """Crée la table si besoin et insère le snippet de départ si elle est vide."""
        try:
            SQLModel.metadata.create_all(self.engine)
            with Session(self.engine) as session:
                count = session.exec(select(func.count()).select_from(Snippet)).one()
                if count == 0:
                    session.add(Snippet(content=SEED_CONTENT, category=DEFAULT_CATEGORY))
                    session.commit()
                    logger.info("🌱 Table vide : snippet de départ inséré.")
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Initialisation impossible : {e}") from e

    def fetch_random(self, category: str) -> Snippet:
        try:
            with Session(self.engine) as session:
                if self.rng is None:
                    snippet = session.exec(
                        select(Snippet)
                        .where(Snippet.category == category)
                        .order_by(func.random())
                        .limit(1)
                    ).first()
                else:
                    ids = session.exec(
                        select(Snippet.id).where(Snippet.category == category)
                    ).all()
                    snippet = session.get(Snippet, self.rng.choice(ids)) if ids else None
        except SQLAlchemyError as e:
            raise QueryError(str(e)) from e

        if snippet is None:
            raise NotFoundError(f"Aucun snippet pour la catégorie {category!r}")
        return snippet

    def insert(self, content: str, category: str) -> Snippet:
        snippet = Snippet(content=content, category=category)
        try:
            with Session(self.engine) as session:
                session.add(snippet)
                session.commit()
                session.refresh(snippet)
        except SQLAlchemyError as e:
            raise WriteError(str(e)) from e
        return snippet

    def count(self, category: Optional[str] = None) -> int:
        statement = select(func.count()).select_from(Snippet)
        if category is not None:
            statement = statement.where(Snippet.category == category)
        try:
            with Session(self.engine) as session:
                return session.exec(statement).one()
        except SQLAlchemyError as e:
            raise QueryError(str(e)) from e


def init_db_with_retry(store: SnippetStore, max_attempts: int = 1, delay_sec: float = 5) -> None:
    """Essaye plusieurs connexions avant d'abandonner le démarrage."""
    for attempt in range(1, max_attempts + 1):
        try:
            store.initialize()
            logger.info(f"✅ Database ready (attempt {attempt}/{max_attempts}).")
            return
        except DatabaseConnectionError as e:
            logger.warning(f"⚠️ DB not ready (attempt {attempt}/{max_attempts}): {e}")
            if attempt == max_attempts:
                logger.error(f"❌ Database still unreachable after {max_attempts} attempts.")
                raise
            time.sleep(max(0, delay_sec))
