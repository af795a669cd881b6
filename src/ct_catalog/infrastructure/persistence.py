"""CatalogRepository — raw SQL persistence for products.

Stock decrements are a single guarded UPDATE (`stock >= :quantity`), so two
concurrent placements can never drive stock below zero even without the
row locks the settlement engine also takes.
"""

from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_catalog.domain.models import Product, ProductFilter
from src.ct_common.errors import InsufficientStockError, ProductNotFoundError

_COLUMNS = (
    "id, seller_id, name, description, price, category, stock, image, created_at, updated_at"
)

# Only these column names are ever interpolated into SQL
_SORT_COLUMNS = {"price": "price", "stock": "stock", "name": "name", "created_at": "created_at"}
_UPDATABLE = ("name", "description", "price", "category", "stock", "image")

_GET_PRODUCT_SQL = text(f"SELECT {_COLUMNS} FROM products WHERE id = :id")

_LOCK_PRODUCTS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM products
    WHERE id IN :ids
    ORDER BY id
    FOR UPDATE
""").bindparams(bindparam("ids", expanding=True))

_DECREMENT_STOCK_SQL = text(f"""
    UPDATE products
    SET stock = stock - :quantity, updated_at = NOW()
    WHERE id = :id AND stock >= :quantity
    RETURNING {_COLUMNS}
""")

_INCREMENT_STOCK_SQL = text(f"""
    UPDATE products
    SET stock = stock + :quantity, updated_at = NOW()
    WHERE id = :id
    RETURNING {_COLUMNS}
""")

_INSERT_PRODUCT_SQL = text(f"""
    INSERT INTO products (id, seller_id, name, description, price, category, stock, image)
    VALUES (:id, :seller_id, :name, :description, :price, :category, :stock, :image)
    RETURNING {_COLUMNS}
""")

_DELETE_PRODUCT_SQL = text("DELETE FROM products WHERE id = :id RETURNING id")

_LOW_STOCK_SQL = text(f"""
    SELECT {_COLUMNS} FROM products WHERE stock < :threshold ORDER BY stock ASC, id
""")

_BY_SELLER_SQL = text(f"""
    SELECT {_COLUMNS} FROM products WHERE seller_id = :seller_id ORDER BY id DESC
""")

_LIST_WHERE = """
    WHERE (CAST(:pattern AS TEXT) IS NULL OR name ILIKE :pattern ESCAPE '\\')
      AND (CAST(:category AS TEXT) IS NULL OR category = :category)
      AND (CAST(:min_price AS BIGINT) IS NULL OR price >= :min_price)
      AND (CAST(:max_price AS BIGINT) IS NULL OR price <= :max_price)
      AND (CAST(:min_stock AS INTEGER) IS NULL OR stock >= :min_stock)
      AND (CAST(:max_stock AS INTEGER) IS NULL OR stock <= :max_stock)
"""


def _row_to_product(row: Any) -> Product:
    return Product(
        id=row.id,
        seller_id=row.seller_id,
        name=row.name,
        description=row.description,
        price=row.price,
        category=row.category,
        stock=row.stock,
        image=row.image or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _like_pattern(search: str | None) -> str | None:
    """Case-insensitive substring pattern with LIKE metacharacters escaped."""
    if not search:
        return None
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CatalogRepository:
    """Concrete implementation of CatalogRepositoryProtocol using raw SQL."""

    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None:
        result = await db.execute(_GET_PRODUCT_SQL, {"id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def lock_products(
        self, db: AsyncSession, product_ids: list[str]
    ) -> dict[str, Product]:
        """SELECT ... FOR UPDATE in id order. Missing ids are simply absent."""
        if not product_ids:
            return {}
        result = await db.execute(_LOCK_PRODUCTS_SQL, {"ids": sorted(set(product_ids))})
        return {row.id: _row_to_product(row) for row in result.fetchall()}

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> Product:
        result = await db.execute(_DECREMENT_STOCK_SQL, {"id": product_id, "quantity": quantity})
        row = result.fetchone()
        if row is None:
            current = await self.get_product(db, product_id)
            if current is None:
                raise ProductNotFoundError(product_id)
            raise InsufficientStockError(current.name, quantity, current.stock)
        return _row_to_product(row)

    async def increment_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> Product | None:
        """Return stock to a product. None if the product has since been deleted."""
        result = await db.execute(_INCREMENT_STOCK_SQL, {"id": product_id, "quantity": quantity})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def create_product(self, db: AsyncSession, product: Product) -> Product:
        result = await db.execute(
            _INSERT_PRODUCT_SQL,
            {
                "id": product.id,
                "seller_id": product.seller_id,
                "name": product.name,
                "description": product.description,
                "price": product.price,
                "category": product.category,
                "stock": product.stock,
                "image": product.image,
            },
        )
        return _row_to_product(result.fetchone())

    async def update_product(
        self, db: AsyncSession, product_id: str, changes: dict[str, Any]
    ) -> Product | None:
        fields = [f for f in _UPDATABLE if f in changes]
        if not fields:
            return await self.get_product(db, product_id)
        assignments = ", ".join(f"{f} = :{f}" for f in fields)
        sql = text(
            f"UPDATE products SET {assignments}, updated_at = NOW() "
            f"WHERE id = :id RETURNING {_COLUMNS}"
        )
        params = {f: changes[f] for f in fields}
        params["id"] = product_id
        result = await db.execute(sql, params)
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def delete_product(self, db: AsyncSession, product_id: str) -> bool:
        result = await db.execute(_DELETE_PRODUCT_SQL, {"id": product_id})
        return result.fetchone() is not None

    async def list_products(
        self, db: AsyncSession, filters: ProductFilter, limit: int
    ) -> list[Product]:
        sort_column = _SORT_COLUMNS.get(filters.sort, "created_at")
        direction = "DESC" if filters.descending else "ASC"
        sql = text(
            f"SELECT {_COLUMNS} FROM products {_LIST_WHERE} "
            f"ORDER BY {sort_column} {direction}, id {direction} LIMIT :limit"
        )
        result = await db.execute(
            sql,
            {
                "pattern": _like_pattern(filters.search),
                "category": filters.category,
                "min_price": filters.min_price,
                "max_price": filters.max_price,
                "min_stock": filters.min_stock,
                "max_stock": filters.max_stock,
                "limit": limit,
            },
        )
        return [_row_to_product(row) for row in result.fetchall()]

    async def list_low_stock(self, db: AsyncSession, threshold: int) -> list[Product]:
        result = await db.execute(_LOW_STOCK_SQL, {"threshold": threshold})
        return [_row_to_product(row) for row in result.fetchall()]

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> list[Product]:
        result = await db.execute(_BY_SELLER_SQL, {"seller_id": seller_id})
        return [_row_to_product(row) for row in result.fetchall()]
