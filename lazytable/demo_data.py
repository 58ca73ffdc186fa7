"""Sample datasets and column sets for the demo command."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass

from .datasource import DataSource, InMemoryDataSource, LazyDataSource
from .render import ALIGN_CENTER, ALIGN_RIGHT, Column


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    role: str
    status: str


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    category: str
    price: float
    stock: int


@dataclass(frozen=True)
class LogEntry:
    id: int
    timestamp: str
    level: str
    message: str


ROLES = ("Admin", "Developer", "Designer", "Manager", "QA", "DevOps")
STATUSES = ("Active", "Away", "Offline")
CATEGORIES = ("Electronics", "Accessories", "Office", "Furniture")
LEVELS = ("INFO", "WARN", "ERROR", "DEBUG")
MESSAGES = (
    "Application started successfully",
    "Database connection established",
    "User authentication failed",
    "API request received",
    "Cache invalidated",
    "Background job completed",
    "Configuration reloaded",
    "Memory usage: high",
    "Network timeout occurred",
    "File upload processed",
)


def make_user(i: int) -> User:
    return User(
        id=i,
        name=f"User {i}",
        email=f"user{i}@example.com",
        role=ROLES[(i - 1) % len(ROLES)],
        status=STATUSES[(i - 1) % len(STATUSES)],
    )


def make_product(i: int) -> Product:
    # Seeded per row so lazy and eager sources agree.
    rng = random.Random(i)
    return Product(
        id=i,
        name=f"Product {i}",
        category=CATEGORIES[(i - 1) % len(CATEGORIES)],
        price=rng.randint(10, 1000) + rng.randint(0, 99) / 100.0,
        stock=rng.randint(0, 500),
    )


def make_log_entry(i: int) -> LogEntry:
    return LogEntry(
        id=i,
        timestamp=f"2025-01-{(i % 31) + 1:02d} {i % 24:02d}:{(i * 7) % 60:02d}:{(i * 13) % 60:02d}",
        level=LEVELS[(i - 1) % len(LEVELS)],
        message=MESSAGES[(i - 1) % len(MESSAGES)],
    )


USER_COLUMNS = (
    Column("ID", lambda u: u.id, width=6, align=ALIGN_RIGHT),
    Column("Name", lambda u: u.name, width=20),
    Column("Email", lambda u: u.email, width=30),
    Column("Role", lambda u: u.role, width=12),
    Column("Status", lambda u: u.status, width=10, align=ALIGN_CENTER),
)

PRODUCT_COLUMNS = (
    Column("ID", lambda p: p.id, width=6, align=ALIGN_RIGHT),
    Column("Product", lambda p: p.name, width=25),
    Column("Category", lambda p: p.category, width=15),
    Column("Price", lambda p: f"${p.price:.2f}", width=12, align=ALIGN_RIGHT),
    Column("Stock", lambda p: p.stock, width=8, align=ALIGN_RIGHT),
)

LOG_COLUMNS = (
    Column("#", lambda e: e.id, width=6, align=ALIGN_RIGHT),
    Column("Timestamp", lambda e: e.timestamp, width=20),
    Column("Level", lambda e: e.level, width=8, align=ALIGN_CENTER),
    Column("Message", lambda e: e.message),
)

EXAMPLES: dict[str, tuple[str, Callable[[int], object], tuple[Column, ...]]] = {
    "users": ("Interactive User Directory", make_user, USER_COLUMNS),
    "products": ("Interactive Product Inventory", make_product, PRODUCT_COLUMNS),
    "logs": ("Interactive Log Viewer", make_log_entry, LOG_COLUMNS),
}


def example_source(make_row: Callable[[int], object], rows: int, lazy: bool = False) -> DataSource:
    """Build a data source of ``rows`` generated rows (ids start at 1)."""
    if not lazy:
        return InMemoryDataSource(make_row(i) for i in range(1, rows + 1))

    def fetch(offset: int, limit: int) -> list[object]:
        return [make_row(i + 1) for i in range(offset, min(rows, offset + limit))]

    return LazyDataSource(rows, fetch)
