from decimal import Decimal

import pytest

import app as cafe
from tests.conftest import CSRF
from tests.factories import make_inventory, make_product


def test_recipe_cost_treats_missing_cost_as_zero():
    cost = cafe.recipe_cost([(Decimal("18000"), Decimal("0.018")), (None, Decimal("3")), (Decimal("1200"), Decimal("0.2"))])
    assert cost == Decimal("564.00")


def test_suggested_price_applies_margin():
    assert cafe.suggested_price(Decimal("1000"), Decimal("30")) == Decimal("1300.00")
    assert cafe.suggested_price(Decimal("0"), Decimal("30")) == Decimal("0.00")


@pytest.mark.parametrize("price,cost,expected", [
    (Decimal("1300"), Decimal("1000"), Decimal("30.00")),
    (Decimal("2600"), Decimal("564"), Decimal("360.99")),
    (Decimal("500"), Decimal("1000"), Decimal("-50.00")),
])
def test_margin_for(price, cost, expected):
    assert cafe.margin_for(price, cost) == expected


def test_margin_undefined_without_cost():
    assert cafe.margin_for(Decimal("1500"), Decimal("0")) is None


def test_fmt_qty_strips_trailing_zeros():
    assert cafe.fmt_qty(Decimal("2.000")) == "2"
    assert cafe.fmt_qty(Decimal("0.400")) == "0.4"
    assert cafe.fmt_qty(Decimal("0")) == "0"


def test_product_list_shows_cost_and_margin(auth_client, db_session):
    beans = make_inventory(db_session, name="Café en Grano", quantity="5", unit="kg", cost="18000")
    make_product(db_session, name="Espresso", price="648", recipe=[(beans, "0.018")])
    html = auth_client.get("/products").get_data(as_text=True)
    assert "Espresso" in html
    assert "324.00" in html
    assert "100.00 %" in html


def _editor_form(**overrides):
    data = {"csrf_token": CSRF, "id": "", "name": "Espresso", "price": "", "margin": "50",
            "category": "Café", "description": "", "image_url": ""}
    data.update(overrides)
    return data


def test_editor_fills_price_from_margin(auth_client, db_session):
    beans = make_inventory(db_session, name="Café en Grano", quantity="5", unit="kg", cost="18000")
    data = _editor_form(action="apply_margin", ingredient_id=[str(beans)], ingredient_qty=["0.018"])
    html = auth_client.post("/products/editor", data=data).get_data(as_text=True)
    assert 'value="486.00"' in html


def test_editor_derives_margin_from_price(auth_client, db_session):
    beans = make_inventory(db_session, name="Café en Grano", quantity="5", unit="kg", cost="18000")
    data = _editor_form(action="recalculate", price="648", ingredient_id=[str(beans)], ingredient_qty=["0.018"])
    html = auth_client.post("/products/editor", data=data).get_data(as_text=True)
    assert 'value="100.00"' in html


def test_editor_adds_and_removes_recipe_rows(auth_client, db_session):
    beans = make_inventory(db_session, name="Café en Grano", quantity="5", unit="kg", cost="18000")
    html = auth_client.post("/products/editor", data=_editor_form(
        action="add_ingredient", ingredient_id=[str(beans)], ingredient_qty=["0.018"])).get_data(as_text=True)
    assert html.count('name="ingredient_qty"') == 2

    html = auth_client.post("/products/editor", data=_editor_form(
        remove_ingredient="0", ingredient_id=[str(beans)], ingredient_qty=["0.018"])).get_data(as_text=True)
    assert 'name="ingredient_qty"' not in html


def test_edit_page_starts_from_the_current_margin(auth_client, db_session):
    beans = make_inventory(db_session, name="Café en Grano", quantity="5", unit="kg", cost="18000")
    pid = make_product(db_session, name="Espresso", price="486", recipe=[(beans, "0.018")])
    html = auth_client.get(f"/products/{pid}/edit").get_data(as_text=True)
    assert "Editar Producto" in html
    assert 'value="50.00"' in html


def test_new_product_page_defaults_to_thirty_percent(auth_client):
    html = auth_client.get("/products/new").get_data(as_text=True)
    assert 'name="margin" value="30"' in html
