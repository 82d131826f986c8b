# =============================================================
# 🧱 MODELS — Schémas de données SQLModel (snippets Markdown)
# =============================================================

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text
from typing import Optional

SEED_CONTENT = "# Hello, World!"
DEFAULT_CATEGORY = "default"


# -------------------------------------------------------------
# 📝 Modèle Snippet
# -------------------------------------------------------------
class Snippet(SQLModel, table=True):
    __tablename__ = "markdown"

    id: Optional[int] = Field(default=None, primary_key=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    category: str = Field(sa_column=Column(Text, nullable=False))
