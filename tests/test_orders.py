from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, OperationalError

import app as cafe
from tests.conftest import CSRF
from tests.factories import make_inventory, make_order, make_product


@pytest.fixture
def latte(db_session):
    beans = make_inventory(db_session, name="Café en Grano", quantity="1", unit="kg", cost="18000", category="Grano")
    milk = make_inventory(db_session, name="Leche Entera", quantity="1", unit="lt", cost="1200")
    pid = make_product(db_session, name="Café Latte", price="2600", recipe=[(beans, "0.018"), (milk, "0.2")])
    return {"product": pid, "beans": beans, "milk": milk}


def test_create_order_snapshots_prices_and_deducts_ingredients(db_session, latte):
    s = db_session
    product = s.get(cafe.Product, latte["product"])
    order = cafe.create_order(s, "Ana", [(product, 2)])

    assert order.status == "pending"
    assert order.total == Decimal("5200.00")
    assert [(it.quantity, it.price) for it in order.items] == [(2, Decimal("2600.00"))]
    assert s.get(cafe.InventoryItem, latte["beans"]).quantity == Decimal("0.964")
    assert s.get(cafe.InventoryItem, latte["milk"]).quantity == Decimal("0.600")


def test_short_ingredient_blocks_the_whole_order(db_session, latte):
    s = db_session
    s.get(cafe.InventoryItem, latte["milk"]).quantity = Decimal("0.3")
    s.commit()
    product = s.get(cafe.Product, latte["product"])

    with pytest.raises(cafe.InsufficientStock) as exc:
        cafe.create_order(s, "Ana", [(product, 2)])

    assert str(exc.value) == "Stock insuficiente de Leche Entera. Necesario: 0.4, Disponible: 0.3"
    s.rollback()
    assert s.query(cafe.Order).count() == 0
    assert s.get(cafe.InventoryItem, latte["beans"]).quantity == Decimal("1.000")


def test_product_without_recipe_needs_no_stock(db_session):
    pid = make_product(db_session, name="Agua", price="900", recipe=())
    order = cafe.create_order(db_session, "Beto", [(db_session.get(cafe.Product, pid), 3)])
    assert order.total == Decimal("2700.00")


def test_status_only_moves_forward(db_session):
    oid = make_order(db_session, customer="Ana")
    order = db_session.get(cafe.Order, oid)
    seen = [cafe.advance_order(db_session, order) for _ in range(3)]
    assert seen == ["preparing", "ready", "completed"]
    with pytest.raises(cafe.InvalidTransition):
        cafe.advance_order(db_session, order)


def test_completing_an_order_books_income(db_session, latte):
    oid = make_order(db_session, customer="Ana", status="ready", items=[(latte["product"], 1, "2600")])
    order = db_session.get(cafe.Order, oid)
    cafe.advance_order(db_session, order)

    tx = db_session.query(cafe.Transaction).one()
    assert (tx.type, tx.amount, tx.category) == ("income", Decimal("2600.00"), "Ventas")
    assert tx.description == f"Pedido #{oid} - Ana"


def test_board_shows_only_active_orders(auth_client, db_session):
    make_order(db_session, customer="Pendiente Paula")
    make_order(db_session, customer="Lista Lola", status="ready")
    make_order(db_session, customer="Cerrado Carlos", status="completed")

    html = auth_client.get("/orders").get_data(as_text=True)
    assert "Pendiente Paula" in html
    assert "Lista Lola" in html
    assert "Cerrado Carlos" not in html
    assert "Pendientes (1)" in html
    assert "En Preparación (0)" in html


def test_cart_merges_repeated_products(auth_client, latte):
    for _ in range(2):
        auth_client.post("/orders/cart/add", data={"csrf_token": CSRF, "product_id": latte["product"]})
    with auth_client.session_transaction() as sess:
        assert sess["cart"] == [{"product_id": latte["product"], "qty": 2}]

    auth_client.post("/orders/cart/remove", data={"csrf_token": CSRF, "product_id": latte["product"]})
    with auth_client.session_transaction() as sess:
        assert sess["cart"] == []


def test_confirming_the_cart_creates_the_order(auth_client, latte):
    with auth_client.session_transaction() as sess:
        sess["cart"] = [{"product_id": latte["product"], "qty": 1}]
    resp = auth_client.post("/orders", data={"csrf_token": CSRF, "customer_name": "Ana"}, follow_redirects=True)

    assert "creado correctamente" in resp.get_data(as_text=True)
    s = cafe.db()
    order = s.query(cafe.Order).one()
    assert (order.customer_name, order.total) == ("Ana", Decimal("2600.00"))
    assert s.get(cafe.InventoryItem, latte["milk"]).quantity == Decimal("0.800")
    with auth_client.session_transaction() as sess:
        assert sess["cart"] == []


def test_order_needs_a_customer_name(auth_client, latte):
    with auth_client.session_transaction() as sess:
        sess["cart"] = [{"product_id": latte["product"], "qty": 1}]
    resp = auth_client.post("/orders", data={"csrf_token": CSRF, "customer_name": " "}, follow_redirects=True)
    assert "Ingrese el nombre del cliente" in resp.get_data(as_text=True)
    assert cafe.db().query(cafe.Order).count() == 0


def test_stock_error_is_flashed_and_cart_kept(auth_client, latte):
    with auth_client.session_transaction() as sess:
        sess["cart"] = [{"product_id": latte["product"], "qty": 10}]
    resp = auth_client.post("/orders", data={"csrf_token": CSRF, "customer_name": "Ana"}, follow_redirects=True)
    assert "Stock insuficiente de Leche Entera. Necesario: 2, Disponible: 1" in resp.get_data(as_text=True)
    with auth_client.session_transaction() as sess:
        assert sess["cart"] == [{"product_id": latte["product"], "qty": 10}]


def test_advance_route_moves_order_to_next_column(auth_client, db_session):
    oid = make_order(db_session, customer="Ana")
    auth_client.post(f"/orders/{oid}/advance", data={"csrf_token": CSRF})
    assert cafe.db().get(cafe.Order, oid).status == "preparing"


def test_advancing_completed_order_is_refused(auth_client, db_session):
    oid = make_order(db_session, customer="Ana", status="completed")
    resp = auth_client.post(f"/orders/{oid}/advance", data={"csrf_token": CSRF}, follow_redirects=True)
    assert "ya fue entregado" in resp.get_data(as_text=True)
    assert cafe.db().get(cafe.Order, oid).status == "completed"


def test_failed_ingredient_write_skips_only_that_ingredient(auth_client, latte):
    failed = []

    def fail_first_inventory_update(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("UPDATE inventory") and not failed:
            failed.append(statement)
            raise OperationalError(statement, parameters, Exception("disk I/O error"))

    with auth_client.session_transaction() as sess:
        sess["cart"] = [{"product_id": latte["product"], "qty": 1}]
    event.listen(cafe.engine, "before_cursor_execute", fail_first_inventory_update)
    try:
        resp = auth_client.post("/orders", data={"csrf_token": CSRF, "customer_name": "Ana"},
                                follow_redirects=True)
    finally:
        event.remove(cafe.engine, "before_cursor_execute", fail_first_inventory_update)

    assert len(failed) == 1
    html = resp.get_data(as_text=True)
    assert "creado correctamente" in html
    assert "Error al crear el pedido" not in html
    s = cafe.db()
    assert s.query(cafe.Order).count() == 1
    assert s.get(cafe.InventoryItem, latte["beans"]).quantity == Decimal("1.000")
    assert s.get(cafe.InventoryItem, latte["milk"]).quantity == Decimal("0.800")
    with auth_client.session_transaction() as sess:
        assert sess["cart"] == []


def test_order_status_outside_the_flow_is_rejected(db_session):
    db_session.add(cafe.Order(customer_name="Ana", status="cancelled", total=Decimal("0")))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
