"""Shop installation model holding the offline Admin API credentials."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from store_locator.models.base import Base, ShopUniqueMixin


class ShopInstallation(ShopUniqueMixin, Base):
    """An installed shop and its encrypted offline access token.

    Both admin and public requests use this token to reach the shop's
    metafields. Rows are written by ``scripts.register_shop``.
    """

    __tablename__ = "shop_installations"

    # Fernet-encrypted, see store_locator.core.encryption
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    scope: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ShopInstallation {self.shop} active={self.is_active}>"
