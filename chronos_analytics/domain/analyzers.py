"""
Per-entity analyzers.

Each analyzer fetches the raw collection(s) it needs from the document store,
drops zero/empty/invalid records, and returns a report dataclass. Monetary
values accumulate unrounded and are rounded once, when the report is built.
"""

import functools
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from chronos_analytics.config import settings
from chronos_analytics.domain.models import (
    BankBalance,
    BankBalancesAnalysis,
    BankSummary,
    CategoryTotal,
    ClientAnalysis,
    CombinedTotals,
    DataQuality,
    Debtor,
    DistributorAnalysis,
    DistributorDebt,
    DistributorOrders,
    ExpenseTotals,
    ExpensesPaymentsAnalysis,
    HistoricalCut,
    InventoryAnalysis,
    PaymentTotals,
    ProductValue,
    PurchaseOrderAnalysis,
    SalesAnalysis,
)
from chronos_analytics.domain.store import (
    BANK_MOVEMENTS,
    BANKS,
    CLIENTS,
    DISTRIBUTORS,
    EXPENSES,
    PRODUCTS,
    PURCHASE_ORDERS,
    SALES,
    DocumentStore,
)
from chronos_analytics.domain.validation import (
    count_valid,
    is_number,
    is_positive,
    is_valid,
    number,
    resolve_balance,
    round_money,
    safe_average,
    sum_valid,
    validity_rate,
)
from chronos_analytics.infrastructure.observability.metrics import analyzer_failures_counter
from chronos_analytics.utils.date_utils import normalize_timestamp, trailing_month_starts

logger = logging.getLogger(__name__)

SALE_STATUSES = ("pendiente", "parcial", "liquidada", "cancelada")
PURCHASE_ORDER_STATUSES = ("pendiente", "recibida", "cancelada")
NO_DISTRIBUTOR = "sin-distribuidor"
ENTRY_TYPES = ("entrada", "transferencia_entrada")
EXIT_TYPES = ("salida", "transferencia_salida")
HISTORICAL_CUTS = 3


def logged_analyzer(name: str):
    """Log and count analyzer failures, then re-raise to the caller"""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                analyzer_failures_counter.labels(analyzer=name).inc()
                logger.error(f"Error analyzing {name}: {e}", extra={"analyzer": name})
                raise

        return wrapper

    return decorator


def _data_quality(total: int, valid: int) -> DataQuality:
    return DataQuality(
        total_records=total,
        valid_records=valid,
        invalid_records=total - valid,
        validity_rate=validity_rate(valid, total),
    )


def _is_valid_client(client: Dict[str, Any]) -> bool:
    if not is_valid(client.get("nombre")):
        return False
    # At least one monetary column must carry a non-zero amount
    return any(
        is_number(client.get(f)) and is_valid(client.get(f))
        for f in ("limiteCredito", "saldoPendiente", "totalCompras")
    )


@logged_analyzer("clients")
async def analyze_clients(store: DocumentStore) -> ClientAnalysis:
    """
    Client analysis excluding records with an empty name or all-zero money columns.

    Active clients have a pending balance or lifetime purchases; debtors are
    ranked by pending balance (stable for ties).
    """
    all_clients = await store.fetch_all(CLIENTS)
    valid_clients = [c for c in all_clients if _is_valid_client(c)]

    active = [
        c for c in valid_clients
        if is_positive(c.get("saldoPendiente")) or is_positive(c.get("totalCompras"))
    ]
    with_credit = [c for c in valid_clients if is_positive(c.get("limiteCredito"))]
    with_debt = [c for c in valid_clients if is_positive(c.get("saldoPendiente"))]

    total_debt = sum_valid(valid_clients, "saldoPendiente")
    top_debtors = sorted(with_debt, key=lambda c: number(c.get("saldoPendiente")), reverse=True)[:5]

    return ClientAnalysis(
        total=len(valid_clients),
        active=len(active),
        with_credit=len(with_credit),
        with_debt=len(with_debt),
        without_debt=len(valid_clients) - len(with_debt),
        total_debt=round_money(total_debt),
        avg_debt_per_client=safe_average(total_debt, len(with_debt)),
        top5_debtors=[
            Debtor(
                id=c.get("id", ""),
                nombre=c.get("nombre", ""),
                saldo_pendiente=round_money(number(c.get("saldoPendiente"))),
            )
            for c in top_debtors
        ],
        data_quality=_data_quality(len(all_clients), len(valid_clients)),
    )


@logged_analyzer("sales")
async def analyze_sales(store: DocumentStore) -> SalesAnalysis:
    """Sales with a positive total, bucketed by payment status"""
    all_sales = await store.fetch_all(SALES)
    valid_sales = [s for s in all_sales if is_positive(s.get("total"))]

    by_status = {status: 0 for status in SALE_STATUSES}
    for sale in valid_sales:
        if sale.get("estado") in by_status:
            by_status[sale["estado"]] += 1

    total_amount = sum_valid(valid_sales, "total")

    return SalesAnalysis(
        total=len(valid_sales),
        by_status=by_status,
        total_amount=round_money(total_amount),
        total_paid=round_money(sum_valid(valid_sales, "totalPagado")),
        total_pending=round_money(sum_valid(valid_sales, "saldoPendiente")),
        avg_sale_value=safe_average(total_amount, len(valid_sales)),
        data_quality=_data_quality(len(all_sales), len(valid_sales)),
    )


def _is_valid_order(order: Dict[str, Any]) -> bool:
    products = order.get("productos")
    return is_positive(order.get("total")) and isinstance(products, list) and is_valid(products)


@logged_analyzer("purchase_orders")
async def analyze_purchase_orders(store: DocumentStore) -> PurchaseOrderAnalysis:
    """Purchase orders with a positive total and at least one line item"""
    all_orders = await store.fetch_all(PURCHASE_ORDERS)
    valid_orders = [o for o in all_orders if _is_valid_order(o)]

    by_status = {status: 0 for status in PURCHASE_ORDER_STATUSES}
    for order in valid_orders:
        if order.get("estado") in by_status:
            by_status[order["estado"]] += 1

    groups: Dict[str, Dict[str, Any]] = {}
    for order in valid_orders:
        distributor_id = order.get("distribuidorId") or NO_DISTRIBUTOR
        group = groups.setdefault(
            distributor_id,
            {"count": 0, "total": 0, "nombre": order.get("distribuidorNombre") or "Sin nombre"},
        )
        group["count"] += 1
        group["total"] += number(order.get("total"))

    total_amount = sum_valid(valid_orders, "total")

    return PurchaseOrderAnalysis(
        total=len(valid_orders),
        by_status=by_status,
        total_amount=round_money(total_amount),
        avg_order_value=safe_average(total_amount, len(valid_orders)),
        by_distributor={
            key: DistributorOrders(
                count=g["count"],
                total=round_money(g["total"]),
                distribuidor_nombre=g["nombre"],
            )
            for key, g in groups.items()
        },
        data_quality=_data_quality(len(all_orders), len(valid_orders)),
    )


@logged_analyzer("distributors")
async def analyze_distributors(store: DocumentStore) -> DistributorAnalysis:
    """
    Active, named distributors with debt derived from purchase orders.

    Debt is not stored on the distributor: it is the pending balance of the
    distributor's purchase orders still in "pendiente" status.
    """
    all_distributors = await store.fetch_all(DISTRIBUTORS)
    valid_distributors = [
        d for d in all_distributors
        if is_valid(d.get("nombre")) and d.get("activo") is not False
    ]

    orders = await store.fetch_all(PURCHASE_ORDERS)

    debts: List[DistributorDebt] = []
    unrounded_total = 0
    for dist in valid_distributors:
        dist_id = dist.get("id")
        pending_orders = [
            o for o in orders
            if dist_id is not None
            and o.get("distribuidorId") == dist_id
            and o.get("estado") == "pendiente"
        ]
        debt = sum_valid(pending_orders, "saldoPendiente")
        unrounded_total += debt
        debts.append(
            DistributorDebt(
                id=dist.get("id", ""),
                nombre=dist.get("nombre", ""),
                deuda=round_money(debt),
                has_debt=debt > 0,
                numero_compras=len(pending_orders),
                total_compras=round_money(number(dist.get("totalCompras"))),
            )
        )

    with_debt = sum(1 for d in debts if d.has_debt)

    return DistributorAnalysis(
        total=len(valid_distributors),
        with_debt=with_debt,
        without_debt=len(debts) - with_debt,
        total_debt=round_money(unrounded_total),
        distributors=debts,
        data_quality=_data_quality(len(all_distributors), len(valid_distributors)),
    )


@logged_analyzer("expenses_payments")
async def analyze_expenses_and_payments(store: DocumentStore) -> ExpensesPaymentsAnalysis:
    """Expenses plus the payments embedded in each sale, counted together"""
    all_expenses = await store.fetch_all(EXPENSES)
    valid_expenses = [e for e in all_expenses if is_positive(e.get("total"))]
    total_expenses = sum_valid(valid_expenses, "total")

    categories: Dict[str, Dict[str, float]] = {}
    for expense in valid_expenses:
        bucket = categories.setdefault(expense.get("categoria") or "otro", {"count": 0, "total": 0})
        bucket["count"] += 1
        bucket["total"] += number(expense.get("total"))

    sales = await store.fetch_all(SALES)

    payments_total = 0
    payments_count = 0
    for sale in sales:
        payments = sale.get("pagos")
        if not isinstance(payments, list):
            continue
        for payment in payments:
            if isinstance(payment, dict) and is_positive(payment.get("monto")):
                payments_total += number(payment["monto"])
                payments_count += 1

    return ExpensesPaymentsAnalysis(
        expenses=ExpenseTotals(
            count=len(valid_expenses),
            total=round_money(total_expenses),
            by_category={
                cat: CategoryTotal(count=int(b["count"]), total=round_money(b["total"]))
                for cat, b in categories.items()
            },
        ),
        payments=PaymentTotals(count=payments_count, total=round_money(payments_total)),
        combined=CombinedTotals(
            total_transactions=len(valid_expenses) + payments_count,
            total_amount=round_money(total_expenses + payments_total),
        ),
        data_quality=_data_quality(len(all_expenses), len(valid_expenses)),
    )


def _net_flow(movements: List[Dict[str, Any]]) -> tuple[float, float]:
    """(entries, exits) of a set of bank movements"""
    entries = sum_valid([m for m in movements if m.get("tipo") in ENTRY_TYPES], "monto")
    exits = sum_valid([m for m in movements if m.get("tipo") in EXIT_TYPES], "monto")
    return entries, exits


@logged_analyzer("bank_balances")
async def analyze_bank_balances(store: DocumentStore, today: Optional[date] = None) -> BankBalancesAnalysis:
    """
    Current balance per bank plus trailing monthly cuts.

    Each cut is the net of entries minus exits for movements dated strictly
    before the first day of the month; undated movements never fall in a cut.
    """
    banks = await store.fetch_all(BANKS)
    movements = await store.fetch_all(BANK_MOVEMENTS)

    if today is None:
        today = datetime.now(timezone.utc).date()
    boundaries = [
        datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        for d in trailing_month_starts(today, HISTORICAL_CUTS)
    ]

    reports: List[BankBalance] = []
    consolidated = 0
    all_entries = 0
    all_exits = 0

    for bank in banks:
        bank_id = bank.get("id")
        bank_movements = [
            m for m in movements
            if bank_id is not None and (m.get("banco") == bank_id or m.get("bancoId") == bank_id)
        ]
        entries, exits = _net_flow(bank_movements)

        dated = [(normalize_timestamp(m.get("fecha")), m) for m in bank_movements]
        cuts = []
        for boundary in boundaries:
            before = [m for moved_at, m in dated if moved_at is not None and moved_at < boundary]
            cut_entries, cut_exits = _net_flow(before)
            cuts.append(
                HistoricalCut(
                    periodo=boundary.date().isoformat(),
                    saldo=round_money(cut_entries - cut_exits),
                )
            )

        balance = resolve_balance(bank)
        consolidated += balance
        all_entries += entries
        all_exits += exits

        reports.append(
            BankBalance(
                id=bank_id or "",
                nombre=bank.get("nombre", ""),
                saldo_actual=round_money(balance),
                total_entradas=round_money(entries),
                total_salidas=round_money(exits),
                numero_movimientos=len(bank_movements),
                cortes_anteriores=cuts,
            )
        )

    valid_banks = count_valid(banks, "nombre")

    return BankBalancesAnalysis(
        bancos=reports,
        resumen=BankSummary(
            total_bancos=len(banks),
            saldo_consolidado=round_money(consolidated),
            total_entradas=round_money(all_entries),
            total_salidas=round_money(all_exits),
        ),
        data_quality=_data_quality(len(banks), valid_banks),
    )


@logged_analyzer("inventory")
async def analyze_inventory(store: DocumentStore, min_stock: Optional[float] = None) -> InventoryAnalysis:
    """
    Stock valuation for active products with a numeric stock (zero included).

    Products without a unit cost stay in the count and contribute zero value.
    """
    if min_stock is None:
        min_stock = settings.default_min_stock

    all_products = await store.fetch_all(PRODUCTS)
    valid_products = [
        p for p in all_products
        if is_number(p.get("stock")) and p.get("activo") is not False
    ]

    valued = []
    inventory_value = 0
    for product in valid_products:
        stock = number(product.get("stock"))
        cost = number(product.get("costoUnitario"))
        inventory_value += stock * cost
        valued.append((product, stock, cost, stock * cost))

    low_stock = [
        p for p, stock, _, _ in valued
        if stock <= (number(p["stockMinimo"]) if is_number(p.get("stockMinimo")) else min_stock)
    ]
    out_of_stock = [p for p, stock, _, _ in valued if stock == 0]

    top_products = sorted(valued, key=lambda v: v[3], reverse=True)[:10]

    return InventoryAnalysis(
        total_products=len(valid_products),
        total_stock_value=round_money(inventory_value),
        low_stock=len(low_stock),
        out_of_stock=len(out_of_stock),
        avg_stock_value=safe_average(inventory_value, len(valid_products)),
        top_value_products=[
            ProductValue(
                id=p.get("id", ""),
                nombre=p.get("nombre", ""),
                stock=stock,
                costo_unitario=cost,
                valor=round_money(value),
            )
            for p, stock, cost, value in top_products
        ],
        data_quality=_data_quality(len(all_products), len(valid_products)),
    )
