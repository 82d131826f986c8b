"""
rendering.py
------------
Conversion Markdown -> HTML sûr pour l'affichage.

- `markdown2` pour le parsing Markdown.
- `bleach` pour nettoyer la sortie avec une liste blanche (contenu utilisateur).
"""

import markdown2
import bleach
from markupsafe import Markup

MARKDOWN_EXTRAS = ["fenced-code-blocks", "tables", "strike"]

ALLOWED_TAGS = [
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "br", "hr", "blockquote", "pre", "code",
    "em", "strong", "b", "i", "del", "s", "sup", "sub",
    "ul", "ol", "li", "dl", "dt", "dd",
    "a", "img",
    "table", "thead", "tbody", "tr", "th", "td",
]
ALLOWED_ATTRS = {
    "a": ["href", "title"],
    "img": ["src", "alt", "title"],
    "th": ["align"],
    "td": ["align"],
}
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


class SafeHTML(Markup):
    """Fragment HTML déjà nettoyé : Jinja2 l'insère sans ré-échappement."""

    __slots__ = ()


def to_safe_html(raw: str) -> SafeHTML:
    """
    Rend le Markdown avec markdown2, puis nettoie le HTML avec bleach.
    Les balises hors liste blanche sont supprimées, pas échappées.
    """
    html = markdown2.markdown(raw or "", extras=MARKDOWN_EXTRAS)
    cleaned = bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
    return SafeHTML(cleaned)
