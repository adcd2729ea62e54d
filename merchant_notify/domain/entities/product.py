"""
Entités produit - Un magasin et un lien vers un produit suivi.

Ce sont les données transmises par le moteur de suivi des stocks
quand un produit redevient disponible.

UTILISATION:
    from merchant_notify.domain.entities.product import Link, Store

    store = Store(name="bestbuy", currency="$")
    link = Link(series="3080", url="https://...", price=699.99)
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Store:
    """Magasin surveillé."""

    name: str
    currency: str = ""


@dataclass(frozen=True)
class Link:
    """
    Lien vers une page produit.

    Attributs:
        series: Série du produit (ex: "3080"), utilisée pour les mentions
        url: Page produit
        cart_url: Lien d'ajout direct au panier, si connu
        price: Prix relevé, si connu
    """

    series: str
    url: str
    cart_url: Optional[str] = None
    price: Optional[Union[float, str]] = None
