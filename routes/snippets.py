# =============================================================
# 🔀 ROUTES SNIPPETS — Affichage aléatoire & ajout de Markdown
# =============================================================

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pathlib import Path
import logging

from database import SnippetStore, StoreError
from models import DEFAULT_CATEGORY
from rendering import SafeHTML, to_safe_html

logger = logging.getLogger("uvicorn")

# -------------------------------------------------------------
# 🧩 INITIALISATION
# -------------------------------------------------------------
router = APIRouter(tags=["Snippets"])

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_store(request: Request) -> SnippetStore:
    return request.app.state.store


# -------------------------------------------------------------
# 🖼️ COMPOSITION DES PAGES
# -------------------------------------------------------------
def render_page(request: Request, html_content: SafeHTML, category: str):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"html_content": html_content, "category": category},
    )


def render_form(request: Request):
    return templates.TemplateResponse(request, "new.html", {})


def _show_random(request: Request, store: SnippetStore, category: str):
    try:
        snippet = store.fetch_random(category)
    except StoreError as e:
        logger.error(f"❌ Erreur récupération snippet ({category!r}) : {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Erreur lors de la récupération du Markdown : {e}",
        )
    return render_page(request, to_safe_html(snippet.content), category)


# -------------------------------------------------------------
# 🎲 SNIPPET ALÉATOIRE
# -------------------------------------------------------------
@router.get("/")
def show_random(
    request: Request,
    category: str = Query(DEFAULT_CATEGORY),
    store: SnippetStore = Depends(get_store),
):
    """
    Affiche un snippet tiré au hasard dans la catégorie demandée
    (« default » si aucune n'est précisée).
    """
    return _show_random(request, store, category)


@router.post("/shuffle")
def shuffle(
    request: Request,
    category: str = Form(""),
    store: SnippetStore = Depends(get_store),
):
    """
    Même chose que « / », mais la catégorie vient du formulaire.
    Aucune catégorie par défaut n'est appliquée ici.
    """
    return _show_random(request, store, category)


# -------------------------------------------------------------
# ➕ AJOUT D'UN SNIPPET
# -------------------------------------------------------------
@router.get("/new")
def new_form(request: Request):
    return render_form(request)


@router.post("/new")
def add_snippet(
    content: str = Form(""),
    category: str = Form(""),
    store: SnippetStore = Depends(get_store),
):
    """
    Enregistre un nouveau snippet puis redirige vers l'accueil.
    """
    if content == "" or category == "":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Le contenu et la catégorie ne peuvent pas être vides",
        )

    try:
        snippet = store.insert(content, category)
    except StoreError as e:
        logger.error(f"❌ Erreur ajout snippet : {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Erreur lors de l'ajout du Markdown : {e}",
        )

    logger.info(f"✅ Snippet {snippet.id} ajouté (catégorie {category!r}).")
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
