"""Register (or re-register) a shop's offline Admin API access token.

Stores the encrypted token in shop_installations, which gives the admin
and the storefront feed access to the shop's metafields. Also used for token
rotation and for marking a shop uninstalled.

Usage:
    python -m scripts.register_shop acme.myshopify.com shpat_xxx --scope write_metafields
    python -m scripts.register_shop acme --deactivate
"""

import argparse
import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from store_locator.core.database import async_session_maker
from store_locator.core.encryption import encrypt_access_token
from store_locator.core.shop import normalize_shop_domain
from store_locator.models.installation import ShopInstallation


async def register(
    session: AsyncSession,
    shop: str,
    access_token: str | None,
    scope: str | None,
    deactivate: bool,
) -> ShopInstallation:
    """Upsert the installation row for a shop."""
    result = await session.execute(select(ShopInstallation).where(ShopInstallation.shop == shop))
    installation = result.scalar_one_or_none()

    if installation is None:
        if access_token is None:
            raise SystemExit(f"Shop {shop} is not registered; an access token is required")
        installation = ShopInstallation(shop=shop, access_token="")
        session.add(installation)

    if access_token is not None:
        installation.access_token = encrypt_access_token(access_token)
    if scope is not None:
        installation.scope = scope
    installation.is_active = not deactivate

    await session.commit()
    await session.refresh(installation)
    return installation


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("shop", help="Shop domain (acme.myshopify.com) or bare name (acme)")
    parser.add_argument("access_token", nargs="?", help="Offline Admin API access token")
    parser.add_argument("--scope", help="Granted access scopes, comma separated")
    parser.add_argument("--deactivate", action="store_true", help="Mark the shop uninstalled")
    args = parser.parse_args()

    shop = normalize_shop_domain(args.shop)
    async with async_session_maker() as session:
        installation = await register(
            session, shop, args.access_token, args.scope, args.deactivate
        )

    state = "active" if installation.is_active else "inactive"
    print(f"Shop {installation.shop} registered ({state}), id={installation.id}")


if __name__ == "__main__":
    asyncio.run(main())
