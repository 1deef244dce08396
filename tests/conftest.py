from datetime import datetime

import pytest

from viewcore.models import Category, Expense


@pytest.fixture
def categories():
    return [
        Category(id="food", name="Food", color="#ef4444", icon="utensils"),
        Category(id="transport", name="Transport", color="#3b82f6", icon="bus"),
        Category(id="rent", name="Rent", color="#10b981", icon="home"),
    ]


@pytest.fixture
def expenses():
    return [
        Expense(id="e1", description="Groceries at market", amount=40.0, category="food",
                date=datetime(2024, 1, 3, 12, 0), created_by="u1"),
        Expense(id="e2", description="Bus ticket", amount=2.5, category="transport",
                date=datetime(2024, 1, 5, 8, 30), created_by="u1"),
        Expense(id="e3", description="Dinner out", amount=60.0, category="food",
                date=datetime(2024, 1, 10, 20, 0), created_by="u2"),
        Expense(id="e4", description="Taxi home", amount=17.5, category="transport",
                date=datetime(2024, 1, 12, 23, 15), created_by="u2"),
        Expense(id="e5", description="Coffee beans", amount=12.0, category="food",
                date=datetime(2024, 1, 14, 9, 0), created_by="u1"),
    ]


@pytest.fixture
def people():
    return [
        {"name": "carol", "age": 41, "joined": datetime(2021, 5, 1)},
        {"name": "alice", "age": 30, "joined": datetime(2019, 3, 12)},
        {"name": "bob", "age": 25, "joined": datetime(2020, 8, 20)},
        {"name": "dave", "age": 30, "joined": datetime(2022, 1, 1)},
        {"name": "eve", "age": 35, "joined": datetime(2018, 11, 30)},
    ]
