"""
Adapter: Asset repository.

Implements AssetRepository port. One row per (user, symbol) position.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import Asset
from app.domain.exchange.ports import AssetRepository
from app.infrastructure.exchange.models import AssetRow


def _to_entity(row: AssetRow) -> Asset:
    return Asset(
        id=row.id,
        user_id=row.user_id,
        symbol=row.symbol,
        quantity=Decimal(row.quantity),
        average_price=Decimal(row.average_price),
        created_at=row.created_at,
    )


class SqlAlchemyAssetRepository(AssetRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_user(self, user_id: str) -> list[Asset]:
        rows = self._session.scalars(
            select(AssetRow)
            .where(AssetRow.user_id == user_id)
            .order_by(AssetRow.symbol)
        )
        return [_to_entity(row) for row in rows]

    def get_for_user(self, user_id: str, symbol: str) -> Optional[Asset]:
        row = self._session.scalars(
            select(AssetRow).where(
                AssetRow.user_id == user_id, AssetRow.symbol == symbol
            )
        ).first()
        return _to_entity(row) if row else None

    def add(self, asset: Asset) -> None:
        self._session.add(
            AssetRow(
                id=asset.id,
                user_id=asset.user_id,
                symbol=asset.symbol,
                quantity=asset.quantity,
                average_price=asset.average_price,
                created_at=asset.created_at,
            )
        )
        self._session.flush()

    def save(self, asset: Asset) -> None:
        row = self._session.get(AssetRow, asset.id)
        if row is None:
            raise LookupError(f"assets row missing: {asset.id}")
        row.quantity = asset.quantity
        row.average_price = asset.average_price
        self._session.flush()

    def delete(self, asset_id: str) -> None:
        self._session.execute(delete(AssetRow).where(AssetRow.id == asset_id))
        self._session.flush()
