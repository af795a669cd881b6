"""Admin application service: marketplace stats, moderation, invariant report."""

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.repository import AccountRepositoryProtocol
from src.ct_account.infrastructure.persistence import AccountRepository
from src.ct_catalog.domain.repository import CatalogRepositoryProtocol
from src.ct_catalog.infrastructure.persistence import CatalogRepository
from src.ct_common.cents import cents_to_display
from src.ct_common.errors import ProductNotFoundError

logger = logging.getLogger(__name__)

_USER_COUNTS_SQL = text("""
    SELECT COUNT(*) FILTER (WHERE role <> 'admin') AS user_count,
           COUNT(*) FILTER (WHERE role = 'admin')  AS admin_count
    FROM users
""")
_REVENUE_SQL = text("SELECT COALESCE(SUM(total_amount), 0) AS revenue FROM orders")
_TOP_PRODUCTS_SQL = text("""
    SELECT i.product_id, MAX(i.name) AS name,
           COALESCE(MAX(p.category), 'Uncategorized') AS category,
           SUM(i.quantity) AS quantity
    FROM order_items i
    LEFT JOIN products p ON p.id = i.product_id
    GROUP BY i.product_id
    ORDER BY quantity DESC, i.product_id
    LIMIT :limit
""")
_NEGATIVE_PENDING_SQL = text("""
    SELECT user_id, pending_balance FROM accounts WHERE pending_balance < 0 ORDER BY user_id
""")


class AdminService:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol | None = None,
        catalog: CatalogRepositoryProtocol | None = None,
    ) -> None:
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._catalog: CatalogRepositoryProtocol = catalog or CatalogRepository()

    async def get_stats(self, db: AsyncSession, top_n: int = 5) -> dict[str, Any]:
        counts = (await db.execute(_USER_COUNTS_SQL)).fetchone()
        revenue = int((await db.execute(_REVENUE_SQL)).scalar_one())
        top = (await db.execute(_TOP_PRODUCTS_SQL, {"limit": top_n})).fetchall()
        return {
            "total_users": int(counts.user_count) if counts else 0,
            "admin_count": int(counts.admin_count) if counts else 0,
            "total_revenue_cents": revenue,
            "total_revenue_display": cents_to_display(revenue),
            "top_products": [
                {
                    "product_id": r.product_id,
                    "name": r.name,
                    "category": r.category,
                    "quantity": int(r.quantity),
                }
                for r in top
            ],
        }

    async def delete_product(self, db: AsyncSession, product_id: str) -> None:
        try:
            if not await self._catalog.delete_product(db, product_id):
                raise ProductNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Admin deleted product %s", product_id)

    async def verify_invariants(self, db: AsyncSession) -> dict[str, object]:
        """Funds conservation: every cent in an account entered through a deposit.

        Settlement only moves money between accounts, so the sum of available
        plus pending balances must equal the sum of all deposits. Negative
        pending balances are reported separately; they arise when payouts are
        computed from prices that rose after placement.
        """
        violations: list[str] = []
        total_funds = await self._accounts.total_funds(db)
        total_deposits = await self._accounts.total_deposits(db)
        if total_funds != total_deposits:
            violations.append(
                f"Funds not conserved: accounts hold {total_funds} cents, "
                f"deposits total {total_deposits} cents "
                f"(difference {total_funds - total_deposits})"
            )
        for row in (await db.execute(_NEGATIVE_PENDING_SQL)).fetchall():
            violations.append(
                f"Account {row.user_id} has negative pending balance {row.pending_balance}"
            )
        if violations:
            logger.warning("Invariant check found %d violation(s)", len(violations))
        return {
            "ok": not violations,
            "total_funds_cents": total_funds,
            "total_deposits_cents": total_deposits,
            "violations": violations,
        }
