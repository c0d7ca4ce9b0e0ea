import asyncio
import sqlite3
from contextlib import contextmanager
from datetime import date

import pytest

from book_inventory_api.app.core.errors import BadInputError, InternalError, NotFoundError
from book_inventory_api.app.schemas.book import BookPayload
from book_inventory_api.app.services.book_service import BookService


def run(coro):
    return asyncio.run(coro)


class FailingPool:
    """Pool substitute whose connections always fail."""

    def __init__(self):
        self.borrowed = 0

    @contextmanager
    def connection(self):
        self.borrowed += 1
        raise sqlite3.OperationalError("database is gone")
        yield  # pragma: no cover


def test_create_and_get(service):
    created = run(service.create_book(BookPayload(title="Dune", author="Frank Herbert", stock=5)))
    assert created.id > 0
    assert created.created_at is not None
    assert run(service.get_book(created.id)) == created


def test_create_stores_published_date(service):
    created = run(service.create_book(BookPayload(title="Dune", stock=5, published_date=date(1965, 8, 1))))
    assert run(service.get_book(created.id)).published_date == date(1965, 8, 1)


def test_validate_normalizes_unvalidated_payload(service):
    payload = BookPayload.model_construct(title="  Emma ", author="   ", stock=1, published_date=None)
    created = run(service.create_book(payload))
    assert created.title == "Emma"
    assert created.author is None


def test_blank_title_does_not_touch_storage():
    pool = FailingPool()
    service = BookService(pool)
    with pytest.raises(BadInputError):
        run(service.create_book(BookPayload(title="   ", stock=1)))
    with pytest.raises(BadInputError):
        run(service.update_book(1, BookPayload(title="", stock=1)))
    assert pool.borrowed == 0


def test_title_too_long(service):
    with pytest.raises(BadInputError):
        run(service.create_book(BookPayload(title="x" * 226, stock=1)))
    assert run(service.list_books()) == []


def test_author_too_long(service):
    with pytest.raises(BadInputError):
        run(service.create_book(BookPayload(title="Dune", author="y" * 51, stock=1)))


def test_min_stock(pool):
    service = BookService(pool, min_stock=0)
    with pytest.raises(BadInputError):
        run(service.create_book(BookPayload(title="Dune", stock=-1)))
    assert run(service.create_book(BookPayload(title="Dune", stock=0))).stock == 0


def test_missing_ids_are_not_found(service):
    with pytest.raises(NotFoundError):
        run(service.get_book(42))
    with pytest.raises(NotFoundError):
        run(service.update_book(42, BookPayload(title="Dune", stock=1)))
    with pytest.raises(NotFoundError):
        run(service.delete_book(42))


def test_update_keeps_id_and_created_at(service):
    created = run(service.create_book(BookPayload(title="Dune", stock=5)))
    updated = run(service.update_book(created.id, BookPayload(title="Dune Messiah", author="Frank", stock=1)))
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.title == "Dune Messiah"
    assert updated.stock == 1


def test_delete_twice(service):
    created = run(service.create_book(BookPayload(title="Dune", stock=5)))
    run(service.delete_book(created.id))
    with pytest.raises(NotFoundError):
        run(service.delete_book(created.id))


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.list_books(),
        lambda s: s.get_book(1),
        lambda s: s.create_book(BookPayload(title="Dune", stock=1)),
        lambda s: s.update_book(1, BookPayload(title="Dune", stock=1)),
        lambda s: s.delete_book(1),
    ],
)
def test_store_failures_are_internal(call, caplog):
    service = BookService(FailingPool())
    with pytest.raises(InternalError):
        run(call(service))
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert errors and str(errors[0].exc_info[1]) == "database is gone"


def test_connections_released_on_every_path(pool, service):
    created = run(service.create_book(BookPayload(title="Dune", stock=5)))
    with pytest.raises(NotFoundError):
        run(service.get_book(created.id + 1))
    with pytest.raises(NotFoundError):
        run(service.update_book(created.id + 1, BookPayload(title="Dune", stock=1)))
    with pytest.raises(BadInputError):
        run(service.update_book(created.id, BookPayload(title=" ", stock=1)))
    run(service.delete_book(created.id))
    assert pool.available == pool.size


def test_out_of_range_ids_do_not_touch_storage():
    pool = FailingPool()
    service = BookService(pool)
    for book_id in (2**63, -(2**63) - 1, 2**64):
        with pytest.raises(NotFoundError):
            run(service.get_book(book_id))
        with pytest.raises(NotFoundError):
            run(service.update_book(book_id, BookPayload(title="Dune", stock=1)))
        with pytest.raises(NotFoundError):
            run(service.delete_book(book_id))
    assert pool.borrowed == 0


def test_out_of_range_stock_on_unvalidated_payload(service):
    payload = BookPayload.model_construct(title="Dune", author=None, stock=2**63, published_date=None)
    with pytest.raises(BadInputError):
        run(service.create_book(payload))
    assert run(service.list_books()) == []
