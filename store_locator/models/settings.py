"""Per-shop locator settings model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from store_locator.models.base import Base, ShopUniqueMixin


class ShopSettings(ShopUniqueMixin, Base):
    """Locator settings for one shop.

    A missing row is equivalent to a row with every field NULL.
    ``google_maps_api_key`` is only written when the deployment keeps the
    key locally (``maps_key_storage = "local"``).
    """

    __tablename__ = "shop_settings"

    store_locator_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_maps_api_key: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<ShopSettings {self.shop}>"
