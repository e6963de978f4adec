"""
Unit tests for the SQLAlchemy repositories.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from bookstore.storage import (
    BookRepository,
    CartRepository,
    OrderRepository,
    UserRepository,
)


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def books(engine) -> BookRepository:
    return BookRepository(engine)


@pytest.fixture
def carts(engine) -> CartRepository:
    return CartRepository(engine)


@pytest.fixture
def orders(engine) -> OrderRepository:
    return OrderRepository(engine)


@pytest.fixture
def users(engine) -> UserRepository:
    return UserRepository(engine)


class TestBookRepository:

    def test_create_and_get(self, books, sample_book_data):
        book_id = new_id()

        created = books.create(id=book_id, **sample_book_data)
        fetched = books.get(book_id)

        assert created.id == book_id
        assert fetched.title == sample_book_data["title"]
        assert fetched.created_at is not None

    def test_get_missing(self, books):
        assert books.get(new_id()) is None

    def test_update_ignores_unknown_fields(self, books, sample_book_data):
        book_id = new_id()
        books.create(id=book_id, **sample_book_data)

        updated = books.update(book_id, title="New Title", id="hijack")

        assert updated.id == book_id
        assert updated.title == "New Title"
        assert updated.updated_at is not None

    def test_update_missing(self, books):
        assert books.update(new_id(), title="x") is None

    def test_set_stock(self, books, sample_book_data):
        book_id = new_id()
        books.create(id=book_id, **sample_book_data)

        assert books.set_stock(book_id, 0).stock == 0

    def test_negative_stock_rejected_by_database(self, books, sample_book_data):
        sample_book_data["stock"] = -1

        with pytest.raises(IntegrityError):
            books.create(id=new_id(), **sample_book_data)

    def test_delete(self, books, sample_book_data):
        book_id = new_id()
        books.create(id=book_id, **sample_book_data)

        assert books.delete(book_id) is True
        assert books.delete(book_id) is False
        assert books.get(book_id) is None

    def test_search_escapes_like_wildcards(self, books, sample_book_data):
        books.create(id=new_id(), **{**sample_book_data, "title": "100% Pure"})
        books.create(id=new_id(), **{**sample_book_data, "title": "Plain_Title"})

        assert [b.title for b in books.search("100%")] == ["100% Pure"]
        assert [b.title for b in books.search("n_t")] == ["Plain_Title"]
        assert books.search("Pl_in") == []


class TestUserRepository:

    def test_create_and_lookup(self, users):
        user_id = new_id()
        users.create(id=user_id, email="reader@bookstore.io", hashed_password="x", name="R")

        assert users.get(user_id).email == "reader@bookstore.io"
        assert users.get_by_email("reader@bookstore.io").id == user_id
        assert users.get_by_email("other@bookstore.io") is None

    def test_email_is_unique(self, users):
        users.create(id=new_id(), email="reader@bookstore.io", hashed_password="x")

        with pytest.raises(IntegrityError):
            users.create(id=new_id(), email="reader@bookstore.io", hashed_password="y")


class TestCartRepository:

    def test_totals(self, carts):
        user_id = new_id()
        carts.add_item(user_id, new_id(), title="A", price=2.5, quantity=2)
        cart = carts.add_item(user_id, new_id(), title="B", price=1.1, quantity=3)

        assert cart.total_items == 5
        assert cart.total_price == 8.3

    def test_checkout_is_atomic(self, carts, orders):
        user_id = new_id()
        book_id = new_id()
        carts.add_item(user_id, book_id, title="Dune", price=9.99, quantity=1)

        order = carts.checkout(user_id)

        assert order.items == [{"book_id": book_id, "title": "Dune", "price": 9.99, "quantity": 1}]
        assert carts.get_cart(user_id).items == []
        assert orders.get(order.id).total == 9.99

    def test_checkout_empty_cart(self, carts, orders):
        user_id = new_id()

        assert carts.checkout(user_id) is None
        assert orders.list_for_user(user_id) == []

    def test_missing_items(self, carts):
        user_id = new_id()

        assert carts.update_quantity(user_id, new_id(), 2) is None
        assert carts.remove_item(user_id, new_id()) is None
