"""Disputes raised by buyers against an order.

The dispute is routed to the seller of the order's first line. Only admins
resolve disputes; resolution is a flag and moves no money (refunds go through
the payout endpoint).
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.errors import DisputeNotFoundError, ForbiddenError, OrderNotFoundError
from src.ct_common.id_generator import generate_id
from src.ct_dispute.application.schemas import DisputeCreateRequest, DisputeResponse
from src.ct_order.domain.repository import OrderRepositoryProtocol
from src.ct_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)

_COLUMNS = "id, order_id, buyer_id, seller_id, message, resolved, created_at, updated_at"

_INSERT_SQL = text(f"""
    INSERT INTO disputes (id, order_id, buyer_id, seller_id, message)
    VALUES (:id, :order_id, :buyer_id, :seller_id, :message)
    RETURNING {_COLUMNS}
""")

_LIST_SQL_TEMPLATE = """
    SELECT d.id, d.order_id, d.buyer_id, d.seller_id, d.message, d.resolved,
           d.created_at, d.updated_at, o.status AS order_status
    FROM disputes d
    LEFT JOIN orders o ON o.id = d.order_id
    {where}
    ORDER BY d.created_at DESC, d.id DESC
"""
_LIST_BY_BUYER_SQL = text(_LIST_SQL_TEMPLATE.format(where="WHERE d.buyer_id = :user_id"))
_LIST_BY_SELLER_SQL = text(_LIST_SQL_TEMPLATE.format(where="WHERE d.seller_id = :user_id"))
_LIST_ALL_SQL = text(_LIST_SQL_TEMPLATE.format(where=""))

_RESOLVE_SQL = text(f"""
    UPDATE disputes SET resolved = TRUE, updated_at = NOW()
    WHERE id = :id
    RETURNING {_COLUMNS}
""")


class DisputeService:
    def __init__(self, orders: OrderRepositoryProtocol | None = None) -> None:
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()

    async def create_dispute(
        self, db: AsyncSession, buyer_id: str, req: DisputeCreateRequest
    ) -> DisputeResponse:
        order = await self._orders.get_by_id(db, req.order_id)
        if order is None or not order.items:
            raise OrderNotFoundError(req.order_id)
        if order.user_id != buyer_id:
            raise ForbiddenError("You can only dispute your own orders")
        try:
            result = await db.execute(
                _INSERT_SQL,
                {
                    "id": generate_id(),
                    "order_id": order.id,
                    "buyer_id": buyer_id,
                    "seller_id": order.items[0].seller_id,
                    "message": req.message,
                },
            )
            row = result.fetchone()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Dispute %s opened on order %s by buyer %s", row.id, order.id, buyer_id)
        return DisputeResponse.from_row(row)

    async def list_for_buyer(self, db: AsyncSession, buyer_id: str) -> list[DisputeResponse]:
        result = await db.execute(_LIST_BY_BUYER_SQL, {"user_id": buyer_id})
        return [DisputeResponse.from_row(r) for r in result.fetchall()]

    async def list_for_seller(self, db: AsyncSession, seller_id: str) -> list[DisputeResponse]:
        result = await db.execute(_LIST_BY_SELLER_SQL, {"user_id": seller_id})
        return [DisputeResponse.from_row(r) for r in result.fetchall()]

    async def list_all(self, db: AsyncSession) -> list[DisputeResponse]:
        result = await db.execute(_LIST_ALL_SQL)
        return [DisputeResponse.from_row(r) for r in result.fetchall()]

    async def resolve(self, db: AsyncSession, dispute_id: str) -> DisputeResponse:
        try:
            row = (await db.execute(_RESOLVE_SQL, {"id": dispute_id})).fetchone()
            if row is None:
                raise DisputeNotFoundError(dispute_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Dispute %s resolved", dispute_id)
        return DisputeResponse.from_row(row)
