"""Presence-of-text heuristics against SIGAA pages.

The portal exposes no structured signal for "logged in" or "empty listing",
so these checks look for known strings in the visible page text. Extend the
marker tuples when the portal wording changes; callers only use the
predicate functions.
"""

# Any of these in the page text means the student portal is on screen
LOGIN_MARKERS: tuple[str, ...] = (
    "Portal do Discente",
    "Módulos",
    "Bem-vindo",
    "Tempo de Sessão",
    "SAIR",
)

# Interstitial shown after some logins; has to be dismissed with "Continuar >>"
ANNOUNCEMENT_URL_FRAGMENT = "telaAvisoLogon"
ANNOUNCEMENT_MARKERS: tuple[str, ...] = (
    "Continuar >>",
    "Sondagem Cultural UFC",
)

NO_ITEMS_MARKERS: tuple[str, ...] = ("Nenhum item foi encontrado",)


def is_logged_in(page_text: str) -> bool:
    """True iff at least one login marker occurs in the page text."""
    return any(marker in page_text for marker in LOGIN_MARKERS)


def is_announcement_page(url: str, page_text: str) -> bool:
    """True on the post-login notice that must be dismissed with "Continuar >>"."""
    if ANNOUNCEMENT_URL_FRAGMENT in url:
        return True
    return any(marker in page_text for marker in ANNOUNCEMENT_MARKERS)


def has_no_items_marker(page_text: str) -> bool:
    """True when the portal states that a listing has no entries."""
    return any(marker in page_text for marker in NO_ITEMS_MARKERS)
