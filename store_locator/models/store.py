"""Store location model for the per-shop store directory."""

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from store_locator.models.base import Base, ShopOwnedMixin


class StoreLocation(ShopOwnedMixin, Base):
    """A physical store shown by the storefront locator widget.

    Coordinates are independently nullable and stored as given; there is no
    geocoding or bounds check. A location may link to one catalog product or
    one collection (Shopify GIDs); the admin UI keeps them exclusive, the
    table does not.
    """

    __tablename__ = "store_locations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)

    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Linked catalog item, e.g. "gid://shopify/Product/123"
    product_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    collection_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<StoreLocation {self.name} ({self.shop})>"
