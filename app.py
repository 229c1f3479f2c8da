# app.py
"""
Café Manager — single-file back office for a small café
Covers:
 - menu catalog with recipe costing (ingredients, margin, suggested price)
 - live order board (pending -> preparing -> ready -> completed)
 - ingredient-based inventory deduction when an order is taken
 - cash register ledger (income / expenses), staff roster
 - wholesale restocking, daily sales history, monthly reports, settings
Usage:
  pip install -e .
  flask --app app init-db
  python app.py
Default login: marcelo / marcelo (override with CAFE_USERNAME / CAFE_PASSWORD)
"""
from __future__ import annotations
from datetime import datetime, date, time, timedelta
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional
import os, secrets, logging

from dotenv import load_dotenv
from flask import (
    Flask, render_template, request, redirect, url_for, flash, session, abort, g
)
from sqlalchemy import (
    create_engine, event, Column, Integer, String, Text, Numeric, DateTime, ForeignKey,
    CheckConstraint, func
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import (
    declarative_base, relationship, sessionmaker, scoped_session, selectinload
)
from sqlalchemy.pool import StaticPool
from werkzeug.security import generate_password_hash, check_password_hash
from jinja2 import DictLoader

load_dotenv()

def _env_string(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return trimmed string-valued env vars, normalizing empty strings to the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    clean = raw.strip()
    return clean if clean else default

def _env_int(name: str, default: int) -> int:
    raw = _env_string(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring %s=%r, using %s", name, raw, default)
        return default

# ---------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------
DATABASE_URL = _env_string("CAFE_DATABASE_URL", "sqlite:///cafe.db")
ADMIN_USERNAME = _env_string("CAFE_USERNAME", "marcelo")
ADMIN_PASSWORD_HASH = generate_password_hash(_env_string("CAFE_PASSWORD", "marcelo"))
SESSION_HOURS = _env_int("CAFE_SESSION_HOURS", 24)
SEED_DEMO = _env_string("CAFE_SEED", "1") == "1"
_LOG_LEVEL_NAME = (_env_string("CAFE_LOG_LEVEL") or "INFO").upper()

# ---------------------------------------------------------------------
# App & DB
# ---------------------------------------------------------------------
app = Flask(__name__)
app.secret_key = _env_string("CAFE_SECRET_KEY", "dev-secret-change-me")
app.permanent_session_lifetime = timedelta(hours=SESSION_HOURS)

app.logger.setLevel(getattr(logging, _LOG_LEVEL_NAME, logging.INFO))
logging.getLogger("werkzeug").setLevel(getattr(logging, _LOG_LEVEL_NAME, logging.INFO))

def make_engine(url: str):
    kwargs = {"echo": False, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    eng = create_engine(url, **kwargs)
    if eng.dialect.name == "sqlite":
        # cascades and restrict rules only fire with this pragma on
        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()
    return eng

engine = make_engine(DATABASE_URL)
SessionLocal = scoped_session(sessionmaker(bind=engine, autoflush=False, autocommit=False))
Base = declarative_base()

TWOPLACES = Decimal("0.01")
QTY_PLACES = Decimal("0.001")
UNIT_COST_PLACES = Decimal("0.0001")

def money(x) -> Decimal:
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(TWOPLACES, rounding=ROUND_HALF_UP)

def qty(x) -> Decimal:
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(QTY_PLACES, rounding=ROUND_HALF_UP)

def fmt_qty(x) -> str:
    """2.000 -> '2', 0.250 -> '0.25'."""
    d = Decimal(str(x or 0)).normalize()
    return f"{d:f}"

def today() -> date:
    # timestamps are stored as naive UTC
    return datetime.utcnow().date()

# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------
class CafeError(Exception):
    """User-facing failure; views flash the message as-is."""

class InsufficientStock(CafeError):
    pass

class InvalidTransition(CafeError):
    pass

def parse_decimal(raw, field: str = "valor") -> Optional[Decimal]:
    if raw is None:
        return None
    raw = str(raw).strip().replace(",", ".")
    if not raw:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise CafeError(f"Número inválido en {field}: {raw}")

def parse_int(raw) -> Optional[int]:
    raw = (raw or "").strip()
    return int(raw) if raw.isdigit() else None

# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------
ORDER_STATUSES = ("pending", "preparing", "ready", "completed")
NEXT_STATUS = {"pending": "preparing", "preparing": "ready", "ready": "completed"}
STATUS_LABELS = {
    "pending": "Pendiente", "preparing": "En Preparación",
    "ready": "Listo", "completed": "Completado",
}
# button text on each board column: what clicking the card does
ADVANCE_LABELS = {"pending": "En Preparación", "preparing": "Listo", "ready": "Entregado"}
BOARD_COLUMNS = [
    ("pending", "Pendientes"),
    ("preparing", "En Preparación"),
    ("ready", "Listos"),
]

PRODUCT_CATEGORIES = ["Café", "Pastelería", "Bebidas Frías", "Agregados", "Otro"]
INVENTORY_CATEGORIES = ["Grano", "Leche", "Jarabe", "Descartable", "Limpieza", "Insumo", "Otro"]
INVENTORY_UNITS = [("unidades", "Unidades"), ("kg", "Kilogramos (kg)"), ("lt", "Litros (lt)"),
                   ("gr", "Gramos (gr)"), ("ml", "Mililitros (ml)")]
EXPENSE_CATEGORIES = [("Alquiler", "Alquiler"), ("Servicios", "Servicios (Luz, Gas, Internet)"),
                      ("Mantenimiento", "Mantenimiento"), ("Sueldos", "Sueldos"),
                      ("Insumos", "Insumos (Manual)"), ("Otros", "Otros")]
STAFF_ROLES = ["Gerente", "Barista", "Camarero", "Cajero"]
WHOLESALE_UNITS = [("Unidad", "Unidad"), ("Kg", "Kg"), ("L", "Litros"), ("g", "Gramos"),
                   ("ml", "ml"), ("Paquete", "Paquete")]
CURRENCIES = ["ARS ($)", "USD ($)", "EUR (€)"]
PRINTERS = ["EPSON TM-T20III", "Generic Text Printer"]

DEFAULT_MARGIN = Decimal("30")
DEFAULT_ROLE = "Camarero"
SALES_CATEGORY = "Ventas"
WHOLESALE_CATEGORY = "Compra Mayorista"

class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Numeric(12,2), nullable=False)
    category = Column(String(60))
    stock = Column(Integer, nullable=False, default=0)   # menu items carry no stock of their own
    image_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ingredients = relationship("ProductIngredient", back_populates="product",
                               cascade="all, delete-orphan", passive_deletes=True)
    __table_args__ = (CheckConstraint("price >= 0"),)

class InventoryItem(Base):
    __tablename__ = "inventory"
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    category = Column(String(60))
    quantity = Column(Numeric(12,3), nullable=False, default=Decimal("0"))
    unit = Column(String(30), nullable=False, default="unidades")
    min_stock = Column(Numeric(12,3), nullable=False, default=Decimal("5"))
    cost = Column(Numeric(12,4))    # per unit
    status = Column(String(30))
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ingredients = relationship("ProductIngredient", back_populates="inventory_item",
                               cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_low(self) -> bool:
        return Decimal(self.quantity) <= Decimal(self.min_stock)

class ProductIngredient(Base):
    __tablename__ = "product_ingredients"
    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    product = relationship("Product", back_populates="ingredients")
    inventory_id = Column(Integer, ForeignKey("inventory.id", ondelete="CASCADE"), nullable=False)
    inventory_item = relationship("InventoryItem", back_populates="ingredients")
    quantity_required = Column(Numeric(12,3), nullable=False)

class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("status IN (" + ", ".join(f"'{st}'" for st in ORDER_STATUSES) + ")"),
    )
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    customer_name = Column(String(120), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    total = Column(Numeric(12,2), nullable=False, default=Decimal("0.00"))
    items = relationship("OrderItem", back_populates="order",
                         cascade="all, delete-orphan", passive_deletes=True)

class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    order = relationship("Order", back_populates="items")
    # no cascade: deleting a product that was sold must be confirmed first
    product_id = Column(Integer, ForeignKey("products.id"))
    product = relationship("Product")
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12,2), nullable=False)    # captured sale price
    __table_args__ = (CheckConstraint("quantity > 0"),)

class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    type = Column(String(10), nullable=False)    # income / expense
    amount = Column(Numeric(12,2), nullable=False)
    description = Column(String(255), nullable=False)
    category = Column(String(60), nullable=False)
    __table_args__ = (CheckConstraint("type IN ('income', 'expense')"),)

class StaffMember(Base):
    __tablename__ = "staff"
    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    role = Column(String(30), nullable=False, default=DEFAULT_ROLE)

class WholesaleProduct(Base):
    __tablename__ = "wholesale_products"
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    cost = Column(Numeric(12,2), nullable=False)     # per batch
    batch_quantity = Column(Integer, nullable=False)
    unit = Column(String(30), nullable=False, default="Unidad")
    __table_args__ = (CheckConstraint("batch_quantity > 0"),)

class CafeSettings(Base):
    __tablename__ = "settings"
    id = Column(Integer, primary_key=True)
    cafe_name = Column(String(120), nullable=False, default="Café Manager")
    address = Column(String(200), default="Av. Principal 123")
    phone = Column(String(40), default="+54 11 1234-5678")
    email = Column(String(120), default="contacto@cafe.com")
    kitchen_printer = Column(String(60), default="EPSON TM-T20III")
    register_printer = Column(String(60), default="Generic Text Printer")
    ticket_footer = Column(String(255), default="¡Gracias por su visita! Vuelva pronto.")
    vat_rate = Column(Numeric(5,2), nullable=False, default=Decimal("21"))
    currency = Column(String(20), nullable=False, default="ARS ($)")

# ---------------------------------------------------------------------
# DB init & seed
# ---------------------------------------------------------------------
def db():
    return SessionLocal()

@app.teardown_appcontext
def shutdown_session(exception=None):
    SessionLocal.remove()

def get_settings(s) -> CafeSettings:
    row = s.query(CafeSettings).order_by(CafeSettings.id).first()
    if not row:
        row = CafeSettings()
        s.add(row); s.commit()
    return row

def init_db(seed: Optional[bool] = None):
    Base.metadata.create_all(engine)
    s = db()
    get_settings(s)
    if (SEED_DEMO if seed is None else seed) and not s.query(Product).first():
        beans = InventoryItem(name="Café en Grano Colombia", category="Grano", quantity=qty("5"),
                              unit="kg", min_stock=qty("1"), cost=Decimal("18000.0000"))
        milk = InventoryItem(name="Leche Entera", category="Leche", quantity=qty("24"),
                             unit="lt", min_stock=qty("6"), cost=Decimal("1200.0000"))
        cups = InventoryItem(name="Vaso Térmico 12oz", category="Descartable", quantity=qty("200"),
                             unit="unidades", min_stock=qty("50"), cost=Decimal("150.0000"))
        s.add_all([beans, milk, cups]); s.flush()
        espresso = Product(name="Espresso", description="Shot doble de espresso", price=money("1500"),
                           category="Café", stock=0)
        latte = Product(name="Café Latte", description="Espresso con leche texturizada", price=money("2600"),
                        category="Café", stock=0)
        s.add_all([espresso, latte]); s.flush()
        s.add_all([
            ProductIngredient(product_id=espresso.id, inventory_id=beans.id, quantity_required=qty("0.018")),
            ProductIngredient(product_id=latte.id, inventory_id=beans.id, quantity_required=qty("0.018")),
            ProductIngredient(product_id=latte.id, inventory_id=milk.id, quantity_required=qty("0.2")),
            ProductIngredient(product_id=latte.id, inventory_id=cups.id, quantity_required=qty("1")),
        ])
        s.add_all([
            StaffMember(name="Marcelo", role="Gerente"),
            StaffMember(name="Lucía", role="Barista"),
            WholesaleProduct(name="Leche Entera", cost=money("13200"), batch_quantity=12, unit="L"),
            WholesaleProduct(name="Vaso Térmico 12oz", cost=money("12000"), batch_quantity=100, unit="Unidad"),
        ])
        s.commit()
        app.logger.info("Seeded demo catalog")
    s.close()

@app.cli.command("init-db")
def init_db_command():
    """Create tables and seed demo rows."""
    init_db()
    print("Database ready.")

# ---------------------------------------------------------------------
# CSRF token (session)
# ---------------------------------------------------------------------
CSRF_SESSION_KEY = "_csrf_token"
def get_csrf_token() -> str:
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_hex(16)
        session[CSRF_SESSION_KEY] = token
    return token

def require_csrf():
    form_token = request.form.get("csrf_token")
    if not form_token or form_token != session.get(CSRF_SESSION_KEY):
        abort(400, description="Invalid CSRF token")

@app.context_processor
def inject_globals():
    return {"csrf_token": get_csrf_token, "status_labels": STATUS_LABELS}

# ---------------------------------------------------------------------
# Auth: one configured account, session cookie checked on every request
# ---------------------------------------------------------------------
def is_logged_in() -> bool:
    return session.get("auth") is True

def check_credentials(username: str, password: str) -> bool:
    return username == ADMIN_USERNAME and check_password_hash(ADMIN_PASSWORD_HASH, password)

@app.before_request
def require_auth():
    if request.endpoint == "static":
        return None
    if request.endpoint == "login":
        if is_logged_in():
            return redirect(url_for("dashboard"))
        return None
    if not is_logged_in():
        return redirect(url_for("login"))
    return None

# ---------------------------------------------------------------------
# Template filters
# ---------------------------------------------------------------------
def currency_symbol() -> str:
    if "currency_symbol" not in g:
        label = get_settings(db()).currency or ""
        # "EUR (€)" -> "€"
        g.currency_symbol = label[label.find("(")+1:label.find(")")] if "(" in label else "$"
    return g.currency_symbol

@app.template_filter("currency")
def currency_filter(value) -> str:
    return f"{currency_symbol()} {money(value or 0):,.2f}"

@app.template_filter("qty")
def qty_filter(value) -> str:
    return fmt_qty(value)

# ---------------------------------------------------------------------
# Recipe costing
# ---------------------------------------------------------------------
def recipe_cost(pairs) -> Decimal:
    """Sum unit cost x quantity over (cost, quantity_required) pairs; unset cost counts as 0."""
    total = Decimal("0")
    for cost, quantity in pairs:
        total += Decimal(str(cost or 0)) * Decimal(str(quantity or 0))
    return money(total)

def suggested_price(cost, margin) -> Decimal:
    return money(Decimal(str(cost)) * (1 + Decimal(str(margin)) / Decimal("100")))

def margin_for(price, cost) -> Optional[Decimal]:
    cost = Decimal(str(cost or 0))
    if cost <= 0 or price is None:
        return None
    return money((Decimal(str(price)) - cost) / cost * Decimal("100"))

def product_cost(product: Product) -> Decimal:
    return recipe_cost((ing.inventory_item.cost, ing.quantity_required)
                       for ing in product.ingredients if ing.inventory_item is not None)

# ---------------------------------------------------------------------
# Orders: stock check, creation, deduction, status flow
# ---------------------------------------------------------------------
def check_stock(s, lines):
    """Raise InsufficientStock if any ingredient of any line is short. Lines are checked one by one."""
    for product, quantity in lines:
        for ing in s.query(ProductIngredient).filter_by(product_id=product.id).all():
            item = s.get(InventoryItem, ing.inventory_id)
            if item is None:
                continue
            needed = Decimal(ing.quantity_required) * quantity
            if Decimal(item.quantity) < needed:
                raise InsufficientStock(
                    f"Stock insuficiente de {item.name}. "
                    f"Necesario: {fmt_qty(needed)}, Disponible: {fmt_qty(item.quantity)}"
                )

def deduct_ingredients(s, lines, order_id: Optional[int] = None):
    # one write per ingredient, each re-reading the current quantity; a failed write is skipped
    for product_id, quantity in [(p.id, q) for p, q in lines]:
        for inventory_id, required in [(ing.inventory_id, ing.quantity_required) for ing in
                                       s.query(ProductIngredient).filter_by(product_id=product_id).all()]:
            item = s.get(InventoryItem, inventory_id)
            if item is None:
                continue
            name, unit = item.name, item.unit
            needed = Decimal(required) * quantity
            try:
                item.quantity = qty(Decimal(item.quantity) - needed)
                s.commit()
            except SQLAlchemyError:
                s.rollback()
                app.logger.exception("Could not deduct %s %s of %s (order #%s)", fmt_qty(needed), unit, name, order_id)
                continue
            app.logger.info("Deducted %s %s of %s (order #%s)", fmt_qty(needed), unit, name, order_id)

def create_order(s, customer_name: str, lines) -> Order:
    check_stock(s, lines)
    total = money(sum((Decimal(p.price) * q for p, q in lines), Decimal("0")))
    order = Order(customer_name=customer_name, total=total, status="pending")
    s.add(order); s.flush()
    for product, quantity in lines:
        s.add(OrderItem(order_id=order.id, product_id=product.id, quantity=quantity, price=product.price))
    s.commit()
    app.logger.info("Order #%s created for %s, total %s", order.id, customer_name, total)
    deduct_ingredients(s, lines, order.id)
    return order

def advance_order(s, order: Order) -> str:
    nxt = NEXT_STATUS.get(order.status)
    if nxt is None:
        raise InvalidTransition(f"El pedido #{order.id} ya fue entregado.")
    order.status = nxt
    if nxt == "completed":
        s.add(Transaction(type="income", amount=money(order.total), category=SALES_CATEGORY,
                          description=f"Pedido #{order.id} - {order.customer_name}"))
    s.commit()
    app.logger.info("Order #%s advanced to %s", order.id, nxt)
    return nxt

def order_summary(order: Order) -> str:
    if not order.items:
        return "Sin detalles"
    return ", ".join(f"{it.product.name if it.product else 'Producto'} (x{it.quantity})" for it in order.items)

# ---------------------------------------------------------------------
# Wholesale restock
# ---------------------------------------------------------------------
def receive_wholesale(s, products) -> Decimal:
    """Add each batch to inventory (matched by exact name) and book one expense. Returns the total cost."""
    for wp in products:
        cost_per_unit = (Decimal(wp.cost) / Decimal(wp.batch_quantity)).quantize(UNIT_COST_PLACES, rounding=ROUND_HALF_UP)
        existing = s.query(InventoryItem).filter_by(name=wp.name).first()
        if existing:
            existing.quantity = qty(Decimal(existing.quantity) + wp.batch_quantity)
            existing.cost = cost_per_unit    # latest cost wins
            existing.updated_at = datetime.utcnow()
        else:
            s.add(InventoryItem(name=wp.name, category="Insumo", quantity=qty(wp.batch_quantity),
                                unit=wp.unit or "Unidad", cost=cost_per_unit, status="En Stock",
                                min_stock=qty(10)))
        s.commit()
    total = money(sum((Decimal(wp.cost) for wp in products), Decimal("0")))
    s.add(Transaction(type="expense", amount=total, category=WHOLESALE_CATEGORY,
                      description=f"Pedido Mayorista ({len(products)} productos)"))
    s.commit()
    app.logger.info("Wholesale order received: %s products, %s", len(products), total)
    return total

# ---------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------
def day_bounds(d: date):
    return datetime.combine(d, time.min), datetime.combine(d, time.max)

def month_bounds(y: int, m: int):
    start = datetime(y, m, 1)
    end = datetime(y + (m == 12), (m % 12) + 1, 1)
    return start, end

def monthly_stats(s, y: int, m: int) -> dict:
    start, end = month_bounds(y, m)
    sales, completed = s.query(
        func.coalesce(func.sum(Order.total), 0),
        func.count(Order.id)
    ).filter(Order.status == "completed", Order.created_at >= start, Order.created_at < end).first()
    first_seen = s.query(
        Order.customer_name, func.min(Order.created_at).label("first_at")
    ).group_by(Order.customer_name).subquery()
    new_customers = s.query(func.count()).select_from(first_seen).filter(
        first_seen.c.first_at >= start, first_seen.c.first_at < end
    ).scalar()
    return {"sales": money(sales or 0), "completed": completed or 0, "new_customers": new_customers or 0}

def pct_change(current, previous) -> Optional[Decimal]:
    previous = Decimal(str(previous or 0))
    if previous == 0:
        return None
    return ((Decimal(str(current or 0)) - previous) / previous * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

def weekly_sales(s, d: date) -> list:
    monday = d - timedelta(days=d.weekday())
    out = []
    for offset in range(7):
        start, end = day_bounds(monday + timedelta(days=offset))
        total = s.query(func.coalesce(func.sum(Order.total), 0)).filter(
            Order.status == "completed", Order.created_at.between(start, end)
        ).scalar()
        out.append(money(total or 0))
    return out

# ---------------------------------------------------------------------
# Templates (DictLoader)
# ---------------------------------------------------------------------
TEMPLATES = {
"base.html": """
<!doctype html>
<html lang="es">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  {% block head %}{% endblock %}
  <title>{% block title %}Café Manager{% endblock %}</title>
  <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/@picocss/pico@2/css/pico.min.css">
  <style>
    .container{max-width:1200px;margin:auto}
    .muted{color:#777;font-size:.9rem}
    .low{color:#e63946;font-weight:bold}
    .ok{color:#2a9d8f}
    .board{display:grid;grid-template-columns:repeat(3,1fr);gap:1rem}
    .bars{display:flex;align-items:flex-end;gap:.5rem;height:200px}
    .bars div{flex:1;background:#d4a373;min-height:2px}
    .inline{display:inline}
    table td, table th { vertical-align: top; }
  </style>
</head>
<body>
  <nav class="container">
    <ul><li><strong>☕ Café Manager</strong></li></ul>
    <ul>
      {% if session.get('auth') %}
        <li><a href="{{ url_for('dashboard') }}">Inicio</a></li>
        <li><a href="{{ url_for('products') }}">Menú</a></li>
        <li><a href="{{ url_for('orders') }}">Pedidos</a></li>
        <li><a href="{{ url_for('inventory') }}">Stock</a></li>
        <li><a href="{{ url_for('cash_register') }}">Caja</a></li>
        <li><a href="{{ url_for('history') }}">Historial</a></li>
        <li><a href="{{ url_for('logout') }}" class="contrast">Salir</a></li>
      {% endif %}
    </ul>
  </nav>
  <main class="container">
    {% with messages = get_flashed_messages(with_categories=true) %}
      {% if messages %}
        {% for cat,msg in messages %}
          <article class="{{ 'secondary' if cat=='info' else cat }}">{{ msg }}</article>
        {% endfor %}
      {% endif %}
    {% endwith %}
    {% block content %}{% endblock %}
  </main>
</body>
</html>
""",
"login.html": """
{% extends 'base.html' %}
{% block title %}Ingresar{% endblock %}
{% block content %}
<article style="max-width:420px;margin:3rem auto">
  <header><h2>Bienvenido</h2><p class="muted">Inicia sesión para gestionar tu cafetería</p></header>
  <form method="post">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <label>Usuario <input name="username" placeholder="Ingresa tu usuario" required></label>
    <label>Contraseña <input type="password" name="password" required></label>
    <button type="submit">Ingresar al Sistema</button>
  </form>
</article>
{% endblock %}
""",
"dashboard.html": """
{% extends 'base.html' %}
{% block title %}Inicio{% endblock %}
{% block content %}
<h2>Panel de Control</h2>
<p>
  {% if connected %}<span class="ok">● Sistema Online</span>{% else %}<span class="low">● Desconectado</span>{% endif %}
</p>
<div class="grid">
  <article><header>Menú</header><a href="{{ url_for('products') }}" role="button">Gestionar Menú</a></article>
  <article><header>Pedidos{% if connected %} ({{ active_orders }} activos){% endif %}</header>
    <a href="{{ url_for('orders') }}" role="button">Ver Pedidos</a></article>
  <article><header>Inventario{% if connected and low_stock %} <span class="low">({{ low_stock }} bajo stock)</span>{% endif %}</header>
    <a href="{{ url_for('inventory') }}" role="button">Ver Stock</a></article>
  <article><header>Caja</header><a href="{{ url_for('cash_register') }}" role="button">Ver Caja</a></article>
</div>
<div class="grid">
  <article><header>Personal</header><a href="{{ url_for('staff') }}" role="button" class="secondary">Equipo</a></article>
  <article><header>Reportes</header><a href="{{ url_for('reports') }}" role="button" class="secondary">Ver Métricas</a></article>
  <article><header>Historial</header><a href="{{ url_for('history') }}" role="button" class="secondary">Ver Historial</a></article>
  <article><header>Mayorista</header><a href="{{ url_for('wholesale') }}" role="button" class="secondary">Hacer Pedido</a></article>
  <article><header>Configuración</header><a href="{{ url_for('settings') }}" role="button" class="secondary">Ajustes</a></article>
</div>
{% endblock %}
""",
"products.html": """
{% extends 'base.html' %}
{% block title %}Menú{% endblock %}
{% block content %}
<h2>Menú</h2>
<p><a href="{{ url_for('new_product') }}" role="button">+ Nuevo Producto</a></p>
<table>
  <thead><tr><th>Producto</th><th>Categoría</th><th>Precio</th><th>Costo receta</th><th>Margen</th><th></th></tr></thead>
  <tbody>
    {% for row in rows %}
    {% set p = row.product %}
    <tr>
      <td>{% if p.image_url %}<img src="{{ p.image_url }}" alt="" width="48"> {% endif %}<strong>{{ p.name }}</strong>
        <br><span class="muted">{{ p.description or '' }}</span></td>
      <td>{{ p.category or '-' }}</td>
      <td>{{ p.price|currency }}</td>
      <td>{{ row.cost|currency }}</td>
      <td>{{ '%.2f'|format(row.margin) ~ ' %' if row.margin is not none else '-' }}</td>
      <td>
        <a href="{{ url_for('edit_product', product_id=p.id) }}">Editar</a>
        <form method="post" action="{{ url_for('delete_product', product_id=p.id) }}" class="inline"
              onsubmit="return confirm('¿Estás seguro de eliminar este producto?')">
          <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
          <button class="secondary outline">Eliminar</button>
        </form>
      </td>
    </tr>
    {% else %}
    <tr><td colspan="6" class="muted">No hay productos en el menú.</td></tr>
    {% endfor %}
  </tbody>
</table>
{% endblock %}
""",
"product_form.html": """
{% extends 'base.html' %}
{% block title %}{{ 'Editar Producto' if state.id else 'Nuevo Producto' }}{% endblock %}
{% block content %}
<h2>{{ 'Editar Producto' if state.id else 'Nuevo Producto' }}</h2>
<form method="post" action="{{ url_for('product_editor') }}">
  <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
  <input type="hidden" name="id" value="{{ state.id or '' }}">
  <button name="action" value="recalculate" style="display:none" tabindex="-1"></button>
  <h3>Receta / Ingredientes</h3>
  <table>
    <thead><tr><th>Insumo</th><th>Cantidad</th><th>Unidad</th><th></th></tr></thead>
    <tbody>
    {% for ing in state.ingredients %}
      <tr>
        <td><select name="ingredient_id">
          <option value="">Seleccionar insumo...</option>
          {% for item in inventory %}
            <option value="{{ item.id }}" {{ 'selected' if item.id == ing.inventory_id }}>{{ item.name }} ({{ (item.cost or 0)|currency }}/{{ item.unit }})</option>
          {% endfor %}
        </select></td>
        <td><input type="number" step="0.001" name="ingredient_qty" value="{{ ing.quantity_required|qty }}" placeholder="Cant."></td>
        <td>{{ by_id[ing.inventory_id].unit if ing.inventory_id in by_id else '-' }}</td>
        <td><button name="remove_ingredient" value="{{ loop.index0 }}" class="secondary outline">Quitar</button></td>
      </tr>
    {% else %}
      <tr><td colspan="4" class="muted">Sin ingredientes. Agrega insumos para calcular el costo.</td></tr>
    {% endfor %}
    </tbody>
  </table>
  <button name="action" value="add_ingredient" class="secondary">+ Agregar Ingrediente</button>
  <p>Costo total: <strong>{{ cost|currency }}</strong> · Precio sugerido: <strong>{{ suggested|currency }}</strong></p>

  <label>Nombre <input name="name" value="{{ state.name }}" placeholder="Ej: Café Latte"></label>
  <div class="grid">
    <label>Margen (%) <input type="number" step="0.01" name="margin" value="{{ state.margin }}" placeholder="30"></label>
    <label>Precio de venta <input type="number" step="0.01" name="price" value="{{ state.price if state.price is not none else '' }}" placeholder="0.00"></label>
  </div>
  <div class="grid">
    <button name="action" value="apply_margin" class="secondary outline">Precio desde margen</button>
    <button name="action" value="recalculate" class="secondary outline">Margen desde precio</button>
  </div>
  <div class="grid">
    <label>Categoría
      <select name="category">
        <option value="">Seleccionar...</option>
        {% for c in categories %}<option value="{{ c }}" {{ 'selected' if c == state.category }}>{{ c }}</option>{% endfor %}
      </select>
    </label>
    <label>Imagen (URL) <input name="image_url" value="{{ state.image_url }}"></label>
  </div>
  <label>Descripción <textarea name="description" rows="3" placeholder="Descripción del producto...">{{ state.description }}</textarea></label>
  <div class="grid">
    <a href="{{ url_for('products') }}" role="button" class="secondary">Cancelar</a>
    <button name="action" value="save">Guardar Producto</button>
  </div>
</form>
{% endblock %}
""",
"product_delete_confirm.html": """
{% extends 'base.html' %}
{% block title %}Eliminar producto{% endblock %}
{% block content %}
<article>
  <header><strong>{{ product.name }}</strong> es parte de pedidos existentes</header>
  <p>¿Deseas eliminarlo de todos modos?</p>
  <p class="low">ADVERTENCIA: El producto desaparecerá de los pedidos históricos, aunque el total del pedido se mantendrá.</p>
  <form method="post" action="{{ url_for('delete_product', product_id=product.id) }}">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <input type="hidden" name="force" value="1">
    <div class="grid">
      <a href="{{ url_for('products') }}" role="button" class="secondary">Cancelar</a>
      <button class="contrast">Eliminar de todos modos</button>
    </div>
  </form>
</article>
{% endblock %}
""",
"orders.html": """
{% extends 'base.html' %}
{% block head %}<meta http-equiv="refresh" content="30">{% endblock %}
{% block title %}Pedidos{% endblock %}
{% block content %}
<h2>Pedidos <a href="{{ url_for('history') }}" class="secondary" style="font-size:1rem">Historial</a></h2>
<div class="board">
  {% for status, title in columns %}
  <section>
    <h4>{{ title }} ({{ board[status]|length }})</h4>
    {% for o in board[status] %}
    <article>
      <header><strong>{{ o.customer_name }}</strong> <span class="muted">#{{ o.id }} · {{ o.created_at.strftime('%H:%M') }}</span></header>
      <p>{{ o.total|currency }}</p>
      <form method="post" action="{{ url_for('advance_order_view', order_id=o.id) }}">
        <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
        <button class="outline">→ {{ advance_labels[status] }}</button>
      </form>
    </article>
    {% else %}
    <p class="muted">Sin pedidos</p>
    {% endfor %}
  </section>
  {% endfor %}
</div>
<hr>
<h3>Nuevo Pedido</h3>
<div class="grid">
  <div>
    {% for p in products %}
    <form method="post" action="{{ url_for('cart_add') }}" class="inline">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <input type="hidden" name="product_id" value="{{ p.id }}">
      <button class="secondary outline">{{ p.name }} · {{ p.price|currency }}</button>
    </form>
    {% else %}
    <p class="muted">No hay productos en el menú.</p>
    {% endfor %}
  </div>
  <article>
    <header>Carrito</header>
    <table>
      {% for p, q in cart %}
      <tr>
        <td>{{ p.name }} x{{ q }}</td><td>{{ (p.price * q)|currency }}</td>
        <td><form method="post" action="{{ url_for('cart_remove') }}">
          <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
          <input type="hidden" name="product_id" value="{{ p.id }}">
          <button class="secondary outline">×</button>
        </form></td>
      </tr>
      {% else %}
      <tr><td class="muted">Carrito vacío</td></tr>
      {% endfor %}
    </table>
    <p>Total: <strong>{{ cart_total|currency }}</strong></p>
    <form method="post" action="{{ url_for('create_order_view') }}">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <input name="customer_name" placeholder="Nombre del Cliente" required>
      <button>Confirmar Pedido</button>
    </form>
  </article>
</div>
{% endblock %}
""",
"inventory.html": """
{% extends 'base.html' %}
{% block title %}Inventario{% endblock %}
{% block content %}
<h2>Inventario</h2>
<p>{% if low_count %}<span class="low">⚠ {{ low_count }} ítems con bajo stock</span>{% else %}<span class="ok">Stock en orden</span>{% endif %}</p>
<form method="get" class="grid">
  <input name="q" value="{{ q }}" placeholder="Buscar ítem...">
  <button class="secondary">Buscar</button>
  <a href="{{ url_for('inventory_form') }}" role="button">+ Nuevo Ítem</a>
</form>
<table>
  <thead><tr><th>Nombre</th><th>Categoría</th><th>Cantidad</th><th>Costo unit.</th><th>Mínimo</th><th>Estado</th><th>Actualizado</th><th></th></tr></thead>
  <tbody>
    {% for item in items %}
    <tr>
      <td>{{ item.name }}</td>
      <td>{{ item.category or '-' }}</td>
      <td>{{ item.quantity|qty }} {{ item.unit }}</td>
      <td>{{ item.cost|currency if item.cost is not none else '-' }}</td>
      <td>{{ item.min_stock|qty }}</td>
      <td>{% if item.is_low %}<span class="low">Bajo Stock</span>{% else %}<span class="ok">OK</span>{% endif %}</td>
      <td class="muted">{{ item.updated_at.strftime('%Y-%m-%d %H:%M') }}</td>
      <td>
        <a href="{{ url_for('inventory_form', item_id=item.id) }}">Editar</a>
        <form method="post" action="{{ url_for('delete_inventory', item_id=item.id) }}" class="inline"
              onsubmit="return confirm('¿Estás seguro de eliminar este ítem?')">
          <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
          <button class="secondary outline">Eliminar</button>
        </form>
      </td>
    </tr>
    {% else %}
    <tr><td colspan="8" class="muted">No hay ítems en el inventario.</td></tr>
    {% endfor %}
  </tbody>
</table>
{% endblock %}
""",
"inventory_form.html": """
{% extends 'base.html' %}
{% block title %}{{ 'Editar Ítem' if item.id else 'Nuevo Ítem' }}{% endblock %}
{% block content %}
<h2>{{ 'Editar Ítem' if item.id else 'Nuevo Ítem' }}</h2>
<form method="post" action="{{ url_for('save_inventory') }}">
  <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
  <input type="hidden" name="id" value="{{ item.id or '' }}">
  <label>Nombre <input name="name" value="{{ item.name or '' }}" placeholder="Ej: Café en Grano Colombia"></label>
  <label>Categoría
    <select name="category">
      <option value="">Seleccionar...</option>
      {% for c in categories %}<option value="{{ c }}" {{ 'selected' if c == item.category }}>{{ c }}</option>{% endfor %}
    </select>
  </label>
  <div class="grid">
    <label>Cantidad <input type="number" step="0.001" name="quantity" value="{{ item.quantity|qty if item.quantity is not none else '' }}" placeholder="0"></label>
    <label>Unidad
      <select name="unit">
        {% for value, label in units %}<option value="{{ value }}" {{ 'selected' if value == item.unit }}>{{ label }}</option>{% endfor %}
        {% if item.unit and item.unit not in unit_values %}<option value="{{ item.unit }}" selected>{{ item.unit }}</option>{% endif %}
      </select>
    </label>
  </div>
  <div class="grid">
    <label>Stock mínimo <input type="number" step="0.001" name="min_stock" value="{{ item.min_stock|qty if item.min_stock is not none else '' }}" placeholder="5">
      <small>Se mostrará una alerta cuando el stock sea menor o igual a este valor.</small></label>
    <label>Costo por unidad <input type="number" step="0.0001" name="cost" value="{{ item.cost if item.cost is not none else '' }}"></label>
  </div>
  <div class="grid">
    <a href="{{ url_for('inventory') }}" role="button" class="secondary">Cancelar</a>
    <button>Guardar</button>
  </div>
</form>
{% endblock %}
""",
"cash_register.html": """
{% extends 'base.html' %}
{% block title %}Caja{% endblock %}
{% block content %}
<h2>Caja</h2>
<article>
  <header>Balance Neto</header>
  <h3 class="{{ 'ok' if net >= 0 else 'low' }}">{{ net|currency }}</h3>
  <p>{{ 'Superávit' if net >= 0 else 'Déficit' }}</p>
</article>
<div class="grid">
  <section>
    <h3>Ingresos · {{ total_income|currency }}</h3>
    <table>
      {% for t in income %}
      <tr><td>{{ t.description }}<br><span class="muted">{{ t.category }} · {{ t.created_at.strftime('%Y-%m-%d %H:%M') }}</span></td>
        <td class="ok">+{{ t.amount|currency }}</td>
        <td><form method="post" action="{{ url_for('delete_transaction', tx_id=t.id) }}"
                  onsubmit="return confirm('¿Estás seguro de eliminar este movimiento?')">
          <input type="hidden" name="csrf_token" value="{{ csrf_token() }}"><button class="secondary outline">×</button></form></td></tr>
      {% else %}
      <tr><td class="muted">No hay ingresos registrados</td></tr>
      {% endfor %}
    </table>
  </section>
  <section>
    <h3>Gastos · {{ total_expense|currency }}</h3>
    <table>
      {% for t in expense %}
      <tr><td>{{ t.description }}<br><span class="muted">{{ t.category }} · {{ t.created_at.strftime('%Y-%m-%d %H:%M') }}</span></td>
        <td class="low">-{{ t.amount|currency }}</td>
        <td><form method="post" action="{{ url_for('delete_transaction', tx_id=t.id) }}"
                  onsubmit="return confirm('¿Estás seguro de eliminar este movimiento?')">
          <input type="hidden" name="csrf_token" value="{{ csrf_token() }}"><button class="secondary outline">×</button></form></td></tr>
      {% else %}
      <tr><td class="muted">No hay gastos registrados</td></tr>
      {% endfor %}
    </table>
  </section>
</div>
<details>
  <summary role="button">+ Registrar Gasto</summary>
  <form method="post" action="{{ url_for('add_expense') }}">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <label>Descripción <input name="description" placeholder="Ej: Pago de Alquiler"></label>
    <label>Monto <input type="number" step="0.01" name="amount" placeholder="0.00"></label>
    <label>Categoría
      <select name="category">
        <option value="">Seleccionar...</option>
        {% for value, label in categories %}<option value="{{ value }}">{{ label }}</option>{% endfor %}
      </select>
    </label>
    <button>Guardar Gasto</button>
  </form>
</details>
{% endblock %}
""",
"staff.html": """
{% extends 'base.html' %}
{% block title %}Equipo{% endblock %}
{% block content %}
<h2>Equipo</h2>
<div class="grid">
  {% for m in staff %}
  <article>
    <header><strong>{{ m.name[:1]|upper }}</strong> · {{ m.name }}</header>
    <p class="muted">{{ m.role }}</p>
    <a href="{{ url_for('staff', edit=m.id) }}">Editar</a>
    <form method="post" action="{{ url_for('delete_staff', member_id=m.id) }}" class="inline"
          onsubmit="return confirm('¿Eliminar empleado?')">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <button class="secondary outline">Eliminar</button>
    </form>
  </article>
  {% else %}
  <p class="muted">Sin empleados cargados.</p>
  {% endfor %}
</div>
<h3>{{ 'Editar Empleado' if current.id else 'Nuevo Empleado' }}</h3>
<form method="post" action="{{ url_for('save_staff') }}">
  <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
  <input type="hidden" name="id" value="{{ current.id or '' }}">
  <div class="grid">
    <label>Nombre <input name="name" value="{{ current.name or '' }}" placeholder="Ej: Juan Pérez"></label>
    <label>Rol
      <select name="role">
        {% for r in roles %}<option value="{{ r }}" {{ 'selected' if r == (current.role or default_role) }}>{{ r }}</option>{% endfor %}
      </select>
    </label>
  </div>
  <button>Guardar</button>
</form>
{% endblock %}
""",
"wholesale.html": """
{% extends 'base.html' %}
{% block title %}Pedidos Mayoristas{% endblock %}
{% block content %}
<h2>Pedidos Mayoristas</h2>
<form method="post" action="{{ url_for('wholesale_order') }}" id="order-form"
      onsubmit="return confirm('¿Generar pedido? Se actualizará el inventario.')">
  <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
  <table>
    <thead><tr><th></th><th>Producto</th><th>Costo lote</th><th>Cantidad</th><th>Costo unit.</th></tr></thead>
    <tbody>
    {% for item in items %}
      <tr>
        <td><input type="checkbox" name="selected" value="{{ item.id }}"></td>
        <td>{{ item.name }}</td>
        <td>{{ item.cost|currency }}</td>
        <td>{{ item.batch_quantity }} {{ item.unit }}</td>
        <td>{{ (item.cost / item.batch_quantity)|currency }}</td>
      </tr>
    {% else %}
      <tr><td colspan="5" class="muted">No hay productos mayoristas.</td></tr>
    {% endfor %}
    </tbody>
  </table>
  <button>Generar Pedido</button>
</form>
<h3>Eliminar producto</h3>
<p>
{% for item in items %}
  <form method="post" action="{{ url_for('delete_wholesale', item_id=item.id) }}" class="inline"
        onsubmit="return confirm('¿Estás seguro de eliminar este producto?')">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <button class="secondary outline">× {{ item.name }}</button>
  </form>
{% endfor %}
</p>
<details>
  <summary role="button">+ Nuevo Producto Mayorista</summary>
  <form method="post" action="{{ url_for('add_wholesale') }}">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <label>Nombre <input name="name" placeholder="Ej: Leche Entera (Caja x12)"></label>
    <div class="grid">
      <label>Costo del lote <input type="number" step="0.01" name="cost" placeholder="0.00"></label>
      <label>Cantidad por lote <input type="number" name="batch_quantity" placeholder="Ej: 12"></label>
      <label>Unidad
        <select name="unit">{% for value, label in units %}<option value="{{ value }}">{{ label }}</option>{% endfor %}</select>
      </label>
    </div>
    <button>Guardar</button>
  </form>
</details>
{% endblock %}
""",
"history.html": """
{% extends 'base.html' %}
{% block title %}Historial{% endblock %}
{% block content %}
<h2>Historial de Ventas</h2>
<form method="get" class="grid">
  <label>Fecha <input type="date" name="date" value="{{ selected }}"></label>
  <button>Ver</button>
</form>
<div class="grid">
  <article><header>Ventas del día</header><h3>{{ total_sales|currency }}</h3></article>
  <article><header>Pedidos</header><h3>{{ rows|length }}</h3></article>
</div>
<table>
  <thead><tr><th>Hora</th><th>Cliente</th><th>Detalle</th><th>Estado</th><th>Total</th><th></th></tr></thead>
  <tbody>
    {% for o, summary in rows %}
    <tr>
      <td>{{ o.created_at.strftime('%H:%M') }}</td>
      <td>{{ o.customer_name }}</td>
      <td>{{ summary }}</td>
      <td>{{ status_labels.get(o.status, o.status) }}</td>
      <td>{{ o.total|currency }}</td>
      <td><form method="post" action="{{ url_for('delete_history_order', order_id=o.id) }}"
                onsubmit="return confirm('¿Estás seguro de eliminar este pedido del historial? Esta acción no se puede deshacer.')">
        <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
        <input type="hidden" name="date" value="{{ selected }}">
        <button class="secondary outline" title="Eliminar pedido">×</button>
      </form></td>
    </tr>
    {% else %}
    <tr><td colspan="6" class="muted">No hay ventas registradas en esta fecha.</td></tr>
    {% endfor %}
  </tbody>
</table>
{% endblock %}
""",
"reports.html": """
{% extends 'base.html' %}
{% block title %}Reportes{% endblock %}
{% block content %}
<h2>Reportes y Métricas</h2>
<div class="grid">
  {% for title, value, change in cards %}
  <article>
    <header>{{ title }}</header>
    <h3>{{ value }}</h3>
    <span class="muted">{{ ('%+.1f'|format(change) ~ '%') if change is not none else '—' }} vs mes anterior</span>
  </article>
  {% endfor %}
</div>
<article>
  <header>Ventas de la Semana</header>
  <div class="bars">
    {% for value in week %}
    <div style="height:{{ (value / scale * 100)|round(1) }}%" title="{{ day_names[loop.index0] }}: {{ value|currency }}"></div>
    {% endfor %}
  </div>
  <div class="bars" style="height:auto">{% for d in day_names %}<span style="flex:1;text-align:center" class="muted">{{ d }}</span>{% endfor %}</div>
</article>
{% endblock %}
""",
"settings.html": """
{% extends 'base.html' %}
{% block title %}Configuración{% endblock %}
{% block content %}
<h2>Configuración</h2>
<form method="post">
  <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
  <h3>Datos del Local</h3>
  <div class="grid">
    <label>Nombre del Café <input name="cafe_name" value="{{ cfg.cafe_name }}" required></label>
    <label>Dirección <input name="address" value="{{ cfg.address or '' }}"></label>
  </div>
  <div class="grid">
    <label>Teléfono <input name="phone" value="{{ cfg.phone or '' }}"></label>
    <label>Email de Contacto <input type="email" name="email" value="{{ cfg.email or '' }}"></label>
  </div>
  <h3>Impresión</h3>
  <div class="grid">
    <label>Impresora de Cocina
      <select name="kitchen_printer">{% for p in printers %}<option {{ 'selected' if p == cfg.kitchen_printer }}>{{ p }}</option>{% endfor %}</select>
    </label>
    <label>Impresora de Caja
      <select name="register_printer">{% for p in printers %}<option {{ 'selected' if p == cfg.register_printer }}>{{ p }}</option>{% endfor %}</select>
    </label>
  </div>
  <label>Mensaje al pie del ticket <input name="ticket_footer" value="{{ cfg.ticket_footer or '' }}"></label>
  <h3>Facturación</h3>
  <div class="grid">
    <label>IVA (%) <input type="number" step="0.01" name="vat_rate" value="{{ cfg.vat_rate }}"></label>
    <label>Moneda
      <select name="currency">{% for c in currencies %}<option {{ 'selected' if c == cfg.currency }}>{{ c }}</option>{% endfor %}</select>
    </label>
  </div>
  <button>Guardar Cambios</button>
</form>
{% endblock %}
""",
}
app.jinja_loader = DictLoader(TEMPLATES)

# ---------------------------------------------------------------------
# Routes: Auth / Home
# ---------------------------------------------------------------------
@app.route("/login", methods=["GET","POST"])
def login():
    if request.method == "POST":
        require_csrf()
        username = request.form.get("username","").strip()
        password = request.form.get("password","")
        if check_credentials(username, password):
            session.permanent = True
            session["auth"] = True
            app.logger.info("Login ok for %s", username)
            return redirect(url_for("dashboard"))
        app.logger.warning("Failed login for %r", username)
        flash("Credenciales incorrectas. Intenta de nuevo.", "warning")
    return render_template("login.html")

@app.route("/logout")
def logout():
    session.clear()
    return redirect(url_for("login"))

@app.route("/")
def dashboard():
    s = db()
    active_orders = low_stock = 0
    try:
        s.query(func.count(Product.id)).scalar()
        active_orders = s.query(func.count(Order.id)).filter(Order.status != "completed").scalar()
        low_stock = s.query(func.count(InventoryItem.id)).filter(InventoryItem.quantity <= InventoryItem.min_stock).scalar()
        connected = True
    except SQLAlchemyError:
        app.logger.exception("Database connection check failed")
        s.rollback()
        connected = False
    return render_template("dashboard.html", connected=connected,
                           active_orders=active_orders, low_stock=low_stock)

# ---------------------------------------------------------------------
# Products (menu + recipe editor)
# ---------------------------------------------------------------------
@app.route("/products")
def products():
    s = db()
    items = s.query(Product).options(
        selectinload(Product.ingredients).selectinload(ProductIngredient.inventory_item)
    ).order_by(Product.name).all()
    rows = []
    for p in items:
        cost = product_cost(p)
        rows.append({"product": p, "cost": cost, "margin": margin_for(p.price, cost)})
    return render_template("products.html", rows=rows)

def _state_from_product(p: Optional[Product]) -> dict:
    if p is None:
        return {"id": None, "name": "", "description": "", "price": None, "category": "",
                "image_url": "", "margin": DEFAULT_MARGIN, "ingredients": []}
    ingredients = [{"inventory_id": ing.inventory_id, "quantity_required": Decimal(ing.quantity_required)}
                   for ing in p.ingredients]
    margin = margin_for(p.price, product_cost(p))
    return {"id": p.id, "name": p.name, "description": p.description or "", "price": money(p.price),
            "category": p.category or "", "image_url": p.image_url or "",
            "margin": DEFAULT_MARGIN if margin is None else margin, "ingredients": ingredients}

def _state_from_form(form) -> dict:
    ingredients = []
    for raw_id, raw_qty in zip(form.getlist("ingredient_id"), form.getlist("ingredient_qty")):
        ingredients.append({"inventory_id": parse_int(raw_id),
                            "quantity_required": parse_decimal(raw_qty, "cantidad") or Decimal("0")})
    margin = parse_decimal(form.get("margin"), "margen")
    return {
        "id": parse_int(form.get("id")),
        "name": form.get("name","").strip(),
        "description": form.get("description","").strip(),
        "price": parse_decimal(form.get("price"), "precio"),
        "category": form.get("category","").strip(),
        "image_url": form.get("image_url","").strip(),
        "margin": DEFAULT_MARGIN if margin is None else margin,
        "ingredients": ingredients,
    }

def render_product_editor(s, state: dict):
    inventory = s.query(InventoryItem).order_by(InventoryItem.name).all()
    by_id = {i.id: i for i in inventory}
    cost = recipe_cost((by_id[r["inventory_id"]].cost, r["quantity_required"])
                       for r in state["ingredients"] if r["inventory_id"] in by_id)
    return render_template("product_form.html", state=state, inventory=inventory, by_id=by_id,
                           cost=cost, suggested=suggested_price(cost, state["margin"]),
                           categories=PRODUCT_CATEGORIES)

def save_product(s, state: dict) -> Product:
    if state["id"]:
        p = s.get(Product, state["id"])
        if not p: abort(404)
    else:
        p = Product()
        s.add(p)
    p.name = state["name"]
    p.description = state["description"] or None
    p.price = money(state["price"])
    p.category = state["category"] or None
    p.stock = 0
    p.image_url = state["image_url"] or None
    s.flush()
    # recipe is replaced wholesale
    s.query(ProductIngredient).filter_by(product_id=p.id).delete(synchronize_session=False)
    for row in state["ingredients"]:
        if row["inventory_id"] and row["quantity_required"] > 0:
            s.add(ProductIngredient(product_id=p.id, inventory_id=row["inventory_id"],
                                    quantity_required=qty(row["quantity_required"])))
    s.commit()
    return p

@app.route("/products/new")
def new_product():
    return render_product_editor(db(), _state_from_product(None))

@app.route("/products/<int:product_id>/edit")
def edit_product(product_id: int):
    s = db()
    p = s.get(Product, product_id)
    if not p: abort(404)
    return render_product_editor(s, _state_from_product(p))

@app.route("/products/editor", methods=["POST"])
def product_editor():
    require_csrf()
    s = db()
    try:
        state = _state_from_form(request.form)
    except CafeError as e:
        flash(str(e), "warning")
        return redirect(request.referrer or url_for("products"))
    action = request.form.get("action", "")
    remove = request.form.get("remove_ingredient")

    if remove is not None and remove.isdigit():
        idx = int(remove)
        if idx < len(state["ingredients"]):
            state["ingredients"].pop(idx)
        return render_product_editor(s, state)
    if action == "add_ingredient":
        state["ingredients"].append({"inventory_id": None, "quantity_required": Decimal("0")})
        return render_product_editor(s, state)
    if action in ("apply_margin", "recalculate"):
        by_id = {i.id: i for i in s.query(InventoryItem).all()}
        cost = recipe_cost((by_id[r["inventory_id"]].cost, r["quantity_required"])
                           for r in state["ingredients"] if r["inventory_id"] in by_id)
        if action == "apply_margin" or state["price"] is None:
            state["price"] = suggested_price(cost, state["margin"])
        else:
            margin = margin_for(state["price"], cost)
            if margin is not None:
                state["margin"] = margin
        return render_product_editor(s, state)

    if not state["name"] or not state["price"]:
        flash("Complete el nombre y el precio.", "warning")
        return render_product_editor(s, state)
    try:
        p = save_product(s, state)
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error saving product %r", state["name"])
        flash("Error al guardar el producto", "warning")
        return render_product_editor(s, state)
    app.logger.info("Product #%s saved (%s)", p.id, p.name)
    flash("Producto guardado", "success")
    return redirect(url_for("products"))

@app.route("/products/<int:product_id>/delete", methods=["POST"])
def delete_product(product_id: int):
    require_csrf()
    s = db()
    p = s.get(Product, product_id)
    if not p: abort(404)
    name = p.name
    force = request.form.get("force") == "1"
    try:
        if force:
            removed = s.query(OrderItem).filter_by(product_id=product_id).delete(synchronize_session=False)
            app.logger.info("Removed %s order lines of product #%s before delete", removed, product_id)
        s.delete(p)
        s.commit()
    except IntegrityError:
        s.rollback()
        if not force:
            # still referenced by sold order lines
            return render_template("product_delete_confirm.html", product=s.get(Product, product_id))
        app.logger.exception("Forced delete of product #%s failed", product_id)
        flash("Error al forzar la eliminación del producto.", "warning")
        return redirect(url_for("products"))
    except SQLAlchemyError as e:
        s.rollback()
        app.logger.exception("Error deleting product #%s", product_id)
        flash(f"Error al eliminar producto: {e}", "warning")
        return redirect(url_for("products"))
    app.logger.info("Product #%s deleted (%s)", product_id, name)
    flash("Producto eliminado correctamente.", "success")
    return redirect(url_for("products"))

# ---------------------------------------------------------------------
# Orders board + cart (cart lives in the session)
# ---------------------------------------------------------------------
def cart_lines(s):
    lines = []
    for entry in session.get("cart", []):
        p = s.get(Product, int(entry["product_id"]))
        if p:
            lines.append((p, int(entry["qty"])))
    return lines

@app.route("/orders")
def orders():
    s = db()
    active = s.query(Order).filter(Order.status != "completed").order_by(Order.created_at.asc(), Order.id.asc()).all()
    board = {status: [o for o in active if o.status == status] for status, _ in BOARD_COLUMNS}
    cart = cart_lines(s)
    cart_total = money(sum((Decimal(p.price) * q for p, q in cart), Decimal("0")))
    return render_template("orders.html", board=board, columns=BOARD_COLUMNS, advance_labels=ADVANCE_LABELS,
                           products=s.query(Product).order_by(Product.name).all(),
                           cart=cart, cart_total=cart_total)

@app.route("/orders/cart/add", methods=["POST"])
def cart_add():
    require_csrf()
    pid = parse_int(request.form.get("product_id"))
    if pid is None or not db().get(Product, pid):
        flash("Producto no encontrado", "warning"); return redirect(url_for("orders"))
    cart = session.get("cart", [])
    for entry in cart:
        if entry["product_id"] == pid:
            entry["qty"] += 1
            break
    else:
        cart.append({"product_id": pid, "qty": 1})
    session["cart"] = cart
    return redirect(url_for("orders"))

@app.route("/orders/cart/remove", methods=["POST"])
def cart_remove():
    require_csrf()
    pid = parse_int(request.form.get("product_id"))
    session["cart"] = [e for e in session.get("cart", []) if e["product_id"] != pid]
    return redirect(url_for("orders"))

@app.route("/orders", methods=["POST"])
def create_order_view():
    require_csrf()
    s = db()
    customer_name = (request.form.get("customer_name") or "").strip()
    lines = cart_lines(s)
    if not customer_name or not lines:
        flash("Ingrese el nombre del cliente y agregue productos.", "warning")
        return redirect(url_for("orders"))
    try:
        order = create_order(s, customer_name, lines)
    except CafeError as e:
        s.rollback()
        app.logger.info("Order for %s rejected: %s", customer_name, e)
        flash(str(e), "warning")
        return redirect(url_for("orders"))
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error creating order for %s", customer_name)
        flash("Error al crear el pedido", "warning")
        return redirect(url_for("orders"))
    session["cart"] = []
    flash(f"Pedido #{order.id} creado correctamente", "success")
    return redirect(url_for("orders"))

@app.route("/orders/<int:order_id>/advance", methods=["POST"])
def advance_order_view(order_id: int):
    require_csrf()
    s = db()
    order = s.get(Order, order_id)
    if not order: abort(404)
    try:
        advance_order(s, order)
    except CafeError as e:
        s.rollback()
        flash(str(e), "warning")
    return redirect(url_for("orders"))

# ---------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------
@app.route("/inventory")
def inventory():
    s = db()
    q = (request.args.get("q") or "").strip()
    query = s.query(InventoryItem)
    if q:
        query = query.filter(func.lower(InventoryItem.name, type_=String).contains(q.lower(), autoescape=True))
    items = query.order_by(InventoryItem.name).all()
    low_count = sum(1 for i in items if i.is_low)
    return render_template("inventory.html", items=items, low_count=low_count, q=q)

@app.route("/inventory/form")
@app.route("/inventory/<int:item_id>/edit")
def inventory_form(item_id: Optional[int] = None):
    s = db()
    if item_id is not None:
        item = s.get(InventoryItem, item_id)
        if not item: abort(404)
    else:
        item = InventoryItem(unit="unidades", min_stock=Decimal("5"))
    return render_template("inventory_form.html", item=item, categories=INVENTORY_CATEGORIES,
                           units=INVENTORY_UNITS, unit_values=[u for u, _ in INVENTORY_UNITS])

@app.route("/inventory/save", methods=["POST"])
def save_inventory():
    require_csrf()
    s = db()
    item_id = parse_int(request.form.get("id"))
    name = (request.form.get("name") or "").strip()
    try:
        quantity = parse_decimal(request.form.get("quantity"), "cantidad")
        min_stock = parse_decimal(request.form.get("min_stock"), "stock mínimo")
        cost = parse_decimal(request.form.get("cost"), "costo")
    except CafeError as e:
        flash(str(e), "warning")
        return redirect(url_for("inventory_form", item_id=item_id) if item_id else url_for("inventory_form"))
    if not name or quantity is None:
        flash("Complete el nombre y la cantidad.", "warning")
        return redirect(url_for("inventory_form", item_id=item_id) if item_id else url_for("inventory_form"))
    try:
        if item_id:
            item = s.get(InventoryItem, item_id)
            if not item: abort(404)
        else:
            item = InventoryItem()
            s.add(item)
        item.name = name
        item.category = (request.form.get("category") or "").strip() or None
        item.quantity = qty(quantity)
        item.unit = (request.form.get("unit") or "unidades").strip()
        item.min_stock = qty(Decimal("5") if min_stock is None else min_stock)
        item.cost = cost
        item.updated_at = datetime.utcnow()
        s.commit()
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error saving inventory item %r", name)
        flash("Error al guardar el ítem", "warning")
        return redirect(url_for("inventory"))
    app.logger.info("Inventory item #%s saved (%s = %s %s)", item.id, name, fmt_qty(item.quantity), item.unit)
    flash("Ítem guardado", "success")
    return redirect(url_for("inventory"))

@app.route("/inventory/<int:item_id>/delete", methods=["POST"])
def delete_inventory(item_id: int):
    require_csrf()
    s = db()
    item = s.get(InventoryItem, item_id)
    if not item: abort(404)
    try:
        s.delete(item)
        s.commit()
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error deleting inventory item #%s", item_id)
        flash("Error al eliminar el ítem", "warning")
        return redirect(url_for("inventory"))
    app.logger.info("Inventory item #%s deleted", item_id)
    return redirect(url_for("inventory"))

# ---------------------------------------------------------------------
# Cash register
# ---------------------------------------------------------------------
@app.route("/cash-register")
def cash_register():
    s = db()
    txs = s.query(Transaction).order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()
    income = [t for t in txs if t.type == "income"]
    expense = [t for t in txs if t.type == "expense"]
    total_income = money(sum((Decimal(t.amount) for t in income), Decimal("0")))
    total_expense = money(sum((Decimal(t.amount) for t in expense), Decimal("0")))
    return render_template("cash_register.html", income=income, expense=expense,
                           total_income=total_income, total_expense=total_expense,
                           net=total_income - total_expense, categories=EXPENSE_CATEGORIES)

@app.route("/cash-register/expense", methods=["POST"])
def add_expense():
    require_csrf()
    s = db()
    description = (request.form.get("description") or "").strip()
    category = (request.form.get("category") or "").strip()
    try:
        amount = parse_decimal(request.form.get("amount"), "monto")
    except CafeError as e:
        flash(str(e), "warning"); return redirect(url_for("cash_register"))
    if not description or not amount or not category:
        flash("Por favor complete todos los campos", "warning")
        return redirect(url_for("cash_register"))
    try:
        s.add(Transaction(type="expense", amount=money(amount), description=description, category=category))
        s.commit()
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error adding expense %r", description)
        flash("Error al agregar gasto", "warning")
        return redirect(url_for("cash_register"))
    app.logger.info("Expense booked: %s %s (%s)", money(amount), description, category)
    flash("Gasto registrado", "success")
    return redirect(url_for("cash_register"))

@app.route("/cash-register/<int:tx_id>/delete", methods=["POST"])
def delete_transaction(tx_id: int):
    require_csrf()
    s = db()
    tx = s.get(Transaction, tx_id)
    if not tx: abort(404)
    try:
        s.delete(tx); s.commit()
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error deleting transaction #%s", tx_id)
        flash("Error al eliminar movimiento", "warning")
        return redirect(url_for("cash_register"))
    app.logger.info("Transaction #%s deleted", tx_id)
    return redirect(url_for("cash_register"))

# ---------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------
@app.route("/staff")
def staff():
    s = db()
    current = None
    edit_id = parse_int(request.args.get("edit"))
    if edit_id:
        current = s.get(StaffMember, edit_id)
    return render_template("staff.html", staff=s.query(StaffMember).order_by(StaffMember.name).all(),
                           current=current or StaffMember(), roles=STAFF_ROLES, default_role=DEFAULT_ROLE)

@app.route("/staff/save", methods=["POST"])
def save_staff():
    require_csrf()
    s = db()
    member_id = parse_int(request.form.get("id"))
    name = (request.form.get("name") or "").strip()
    role = (request.form.get("role") or "").strip() or DEFAULT_ROLE
    if not name:
        flash("Por favor complete el nombre.", "warning")
        return redirect(url_for("staff", edit=member_id) if member_id else url_for("staff"))
    try:
        if member_id:
            member = s.get(StaffMember, member_id)
            if not member: abort(404)
            member.name, member.role = name, role
        else:
            s.add(StaffMember(name=name, role=role))
        s.commit()
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error saving staff member %r", name)
        flash("Error al guardar empleado", "warning")
        return redirect(url_for("staff"))
    app.logger.info("Staff member saved: %s (%s)", name, role)
    return redirect(url_for("staff"))

@app.route("/staff/<int:member_id>/delete", methods=["POST"])
def delete_staff(member_id: int):
    require_csrf()
    s = db()
    member = s.get(StaffMember, member_id)
    if not member: abort(404)
    s.delete(member); s.commit()
    app.logger.info("Staff member #%s deleted", member_id)
    return redirect(url_for("staff"))

# ---------------------------------------------------------------------
# Wholesale
# ---------------------------------------------------------------------
@app.route("/wholesale")
def wholesale():
    s = db()
    items = s.query(WholesaleProduct).order_by(WholesaleProduct.name).all()
    return render_template("wholesale.html", items=items, units=WHOLESALE_UNITS)

@app.route("/wholesale/add", methods=["POST"])
def add_wholesale():
    require_csrf()
    s = db()
    name = (request.form.get("name") or "").strip()
    try:
        cost = parse_decimal(request.form.get("cost"), "costo")
    except CafeError as e:
        flash(str(e), "warning"); return redirect(url_for("wholesale"))
    batch = parse_int(request.form.get("batch_quantity"))
    if not name or not cost or not batch:
        flash("Por favor complete todos los campos", "warning")
        return redirect(url_for("wholesale"))
    try:
        s.add(WholesaleProduct(name=name, cost=money(cost), batch_quantity=batch,
                               unit=(request.form.get("unit") or "Unidad").strip()))
        s.commit()
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error adding wholesale product %r", name)
        flash("Error al agregar producto", "warning")
        return redirect(url_for("wholesale"))
    app.logger.info("Wholesale product added: %s", name)
    return redirect(url_for("wholesale"))

@app.route("/wholesale/<int:item_id>/delete", methods=["POST"])
def delete_wholesale(item_id: int):
    require_csrf()
    s = db()
    item = s.get(WholesaleProduct, item_id)
    if not item: abort(404)
    s.delete(item); s.commit()
    app.logger.info("Wholesale product #%s deleted", item_id)
    return redirect(url_for("wholesale"))

@app.route("/wholesale/order", methods=["POST"])
def wholesale_order():
    require_csrf()
    s = db()
    ids = [i for i in (parse_int(x) for x in request.form.getlist("selected")) if i is not None]
    if not ids:
        flash("Seleccione al menos un producto.", "warning")
        return redirect(url_for("wholesale"))
    selected = s.query(WholesaleProduct).filter(WholesaleProduct.id.in_(ids)).order_by(WholesaleProduct.name).all()
    if not selected:
        flash("Seleccione al menos un producto.", "warning")
        return redirect(url_for("wholesale"))
    try:
        receive_wholesale(s, selected)
    except SQLAlchemyError:
        s.rollback()
        app.logger.exception("Error generating wholesale order")
        flash("Error al generar el pedido", "warning")
        return redirect(url_for("wholesale"))
    flash("Pedido generado, stock actualizado y gasto registrado!", "success")
    return redirect(url_for("wholesale"))

# ---------------------------------------------------------------------
# History, reports, settings
# ---------------------------------------------------------------------
@app.route("/history")
def history():
    req = request.args.get("date")
    try:
        d = datetime.strptime(req, "%Y-%m-%d").date() if req else today()
    except ValueError:
        flash("Fecha inválida", "warning")
        d = today()
    s = db()
    start, end = day_bounds(d)
    orders_ = s.query(Order).options(
        selectinload(Order.items).selectinload(OrderItem.product)
    ).filter(Order.created_at.between(start, end)).order_by(Order.created_at.desc(), Order.id.desc()).all()
    rows = [(o, order_summary(o)) for o in orders_]
    total_sales = money(sum((Decimal(o.total) for o in orders_), Decimal("0")))
    return render_template("history.html", rows=rows, total_sales=total_sales,
                           selected=d.strftime("%Y-%m-%d"))

@app.route("/history/<int:order_id>/delete", methods=["POST"])
def delete_history_order(order_id: int):
    require_csrf()
    s = db()
    order = s.get(Order, order_id)
    if not order: abort(404)
    try:
        s.query(OrderItem).filter_by(order_id=order_id).delete(synchronize_session=False)
        s.query(Order).filter_by(id=order_id).delete(synchronize_session=False)
        s.commit()
    except SQLAlchemyError as e:
        s.rollback()
        app.logger.exception("Error deleting order #%s", order_id)
        flash(f"Error al eliminar el pedido: {e}", "warning")
    else:
        app.logger.info("Order #%s deleted from history", order_id)
    return redirect(url_for("history", date=request.form.get("date") or None))

DAY_NAMES = ["Lun", "Mar", "Mié", "Jue", "Vie", "Sáb", "Dom"]

@app.route("/reports")
def reports():
    s = db()
    d = today()
    cur = monthly_stats(s, d.year, d.month)
    py, pm = (d.year - 1, 12) if d.month == 1 else (d.year, d.month - 1)
    prev = monthly_stats(s, py, pm)
    cards = [
        ("Ventas Totales (Mes)", currency_filter(cur["sales"]), pct_change(cur["sales"], prev["sales"])),
        ("Pedidos Completados", cur["completed"], pct_change(cur["completed"], prev["completed"])),
        ("Clientes Nuevos", cur["new_customers"], pct_change(cur["new_customers"], prev["new_customers"])),
    ]
    week = weekly_sales(s, d)
    scale = max(week) if max(week) > 0 else Decimal("100")
    return render_template("reports.html", cards=cards, week=week, scale=scale, day_names=DAY_NAMES)

@app.route("/settings", methods=["GET","POST"])
def settings():
    s = db()
    cfg = get_settings(s)
    if request.method == "POST":
        require_csrf()
        try:
            vat = parse_decimal(request.form.get("vat_rate"), "IVA")
        except CafeError as e:
            flash(str(e), "warning"); return redirect(url_for("settings"))
        cfg.cafe_name = (request.form.get("cafe_name") or "").strip() or cfg.cafe_name
        for field in ("address", "phone", "email", "kitchen_printer", "register_printer", "ticket_footer"):
            setattr(cfg, field, (request.form.get(field) or "").strip() or None)
        if vat is not None:
            cfg.vat_rate = money(vat)
        currency = request.form.get("currency")
        if currency in CURRENCIES:
            cfg.currency = currency
        s.commit()
        app.logger.info("Settings updated")
        flash("Cambios guardados", "success")
        return redirect(url_for("settings"))
    return render_template("settings.html", cfg=cfg, printers=PRINTERS, currencies=CURRENCIES)

# ---------------------------------------------------------------------
# App start
# ---------------------------------------------------------------------
if __name__ == "__main__":
    init_db()
    app.run(debug=True)
