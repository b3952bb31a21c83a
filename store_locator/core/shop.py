"""Shop identifier normalization.

Shops are stored under their bare name ("acme"). Callers may pass either the
bare name or the full admin domain ("acme.myshopify.com"), so every boundary
normalizes exactly once.
"""

SHOPIFY_DOMAIN_SUFFIX = ".myshopify.com"


def normalize_shop_domain(shop: str) -> str:
    """Reduce a shop identifier to its bare form.

    >>> normalize_shop_domain("https://Acme.myshopify.com/")
    'acme'
    >>> normalize_shop_domain("acme")
    'acme'
    """
    value = shop.strip().lower()
    for scheme in ("https://", "http://"):
        if value.startswith(scheme):
            value = value[len(scheme) :]
    value = value.rstrip("/")
    if value.endswith(SHOPIFY_DOMAIN_SUFFIX):
        value = value[: -len(SHOPIFY_DOMAIN_SUFFIX)]
    return value


def shop_admin_domain(shop: str) -> str:
    """Full myshopify domain for Admin API calls."""
    return f"{normalize_shop_domain(shop)}{SHOPIFY_DOMAIN_SUFFIX}"
