"""Complete analysis composition and data-quality report"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from chronos_analytics.config import settings
from chronos_analytics.domain.analyzers import (
    analyze_bank_balances,
    analyze_clients,
    analyze_distributors,
    analyze_expenses_and_payments,
    analyze_inventory,
    analyze_purchase_orders,
    analyze_sales,
)
from chronos_analytics.domain.exceptions import UnknownEntityError
from chronos_analytics.domain.models import (
    AnalysisSummary,
    CompleteAnalysis,
    DataQualityReport,
    QualityCheck,
    QualityExpectations,
)
from chronos_analytics.domain.store import DocumentStore
from chronos_analytics.infrastructure.observability.metrics import (
    analysis_duration_histogram,
    analysis_run_counter,
    record_quality_checks,
)

logger = logging.getLogger(__name__)

CORRECT = "CORRECT"
NEEDS_REVIEW = "NEEDS_REVIEW"

ANALYZERS: Dict[str, Callable[[DocumentStore], Awaitable[Any]]] = {
    "clients": analyze_clients,
    "sales": analyze_sales,
    "purchase-orders": analyze_purchase_orders,
    "distributors": analyze_distributors,
    "expenses-payments": analyze_expenses_and_payments,
    "bank-balances": analyze_bank_balances,
    "inventory": analyze_inventory,
}


async def run_analyzer(entity: str, store: DocumentStore) -> Any:
    """Run the single analyzer registered for `entity`"""
    try:
        analyzer = ANALYZERS[entity]
    except KeyError:
        raise UnknownEntityError(f"No analyzer for entity '{entity}'") from None
    return await analyzer(store)


async def get_complete_analysis(store: DocumentStore) -> CompleteAnalysis:
    """
    Run all seven analyzers concurrently and merge their reports.

    Fan-out/fan-in with no partial results: the first analyzer failure
    fails the whole analysis.
    """
    start_time = time.time()
    try:
        (
            clients,
            purchase_orders,
            distributors,
            sales,
            expenses_payments,
            bank_balances,
            inventory,
        ) = await asyncio.gather(
            analyze_clients(store),
            analyze_purchase_orders(store),
            analyze_distributors(store),
            analyze_sales(store),
            analyze_expenses_and_payments(store),
            analyze_bank_balances(store),
            analyze_inventory(store),
        )
    except Exception as e:
        analysis_run_counter.labels(outcome="failed").inc()
        logger.error(f"Error getting complete analysis: {e}")
        raise

    analysis_run_counter.labels(outcome="completed").inc()
    analysis_duration_histogram.observe(time.time() - start_time)

    return CompleteAnalysis(
        timestamp=datetime.now(timezone.utc).isoformat(),
        clients=clients,
        purchase_orders=purchase_orders,
        distributors=distributors,
        sales=sales,
        expenses_payments=expenses_payments,
        bank_balances=bank_balances,
        inventory=inventory,
        summary=AnalysisSummary(
            clientes_validos=clients.total,
            ordenes_compra=purchase_orders.total,
            distribuidores=distributors.total,
            distribuidores_sin_deuda=distributors.without_debt,
            ventas=sales.total,
            gastos_y_pagos=expenses_payments.combined.total_transactions,
            saldo_bancos_usd=bank_balances.resumen.saldo_consolidado,
            valor_inventario_usd=inventory.total_stock_value,
        ),
    )


def expectations_from_settings() -> QualityExpectations:
    return QualityExpectations(
        clients=settings.expected_clients,
        clients_tolerance=settings.clients_tolerance,
        purchase_orders=settings.expected_purchase_orders,
        purchase_orders_tolerance=settings.purchase_orders_tolerance,
        min_distributors=settings.min_distributors,
        max_distributors=settings.max_distributors,
        debt_free_distributors=settings.expected_debt_free_distributors,
        sales=settings.expected_sales,
        sales_tolerance=settings.sales_tolerance,
        expense_payment_transactions=settings.expected_expense_payment_transactions,
        expense_payment_tolerance=settings.expense_payment_tolerance,
    )


def _within(actual: int, expected: int, tolerance: int) -> str:
    return CORRECT if abs(actual - expected) <= tolerance else NEEDS_REVIEW


def _describe(expected: int, tolerance: int) -> str:
    return f"~{expected}" if tolerance else str(expected)


def evaluate_quality(analysis: CompleteAnalysis, expectations: QualityExpectations) -> DataQualityReport:
    """
    Compare headline counts with the expected baselines.

    Read-only diagnostic: each check is CORRECT or NEEDS_REVIEW and every
    check needing review adds a recommendation line.
    """
    exp = expectations
    distributors = analysis.distributors
    transactions = analysis.expenses_payments.combined.total_transactions

    in_range = exp.min_distributors <= distributors.total <= exp.max_distributors
    debt_free_ok = distributors.without_debt == exp.debt_free_distributors
    distributors_ok = in_range and debt_free_ok

    quality = {
        "clients": QualityCheck(
            expected=exp.clients,
            actual=analysis.clients.total,
            status=_within(analysis.clients.total, exp.clients, exp.clients_tolerance),
            validity_rate=analysis.clients.data_quality.validity_rate,
        ),
        "purchase_orders": QualityCheck(
            expected=exp.purchase_orders,
            actual=analysis.purchase_orders.total,
            status=_within(analysis.purchase_orders.total, exp.purchase_orders, exp.purchase_orders_tolerance),
        ),
        "distributors": QualityCheck(
            expected=f"{exp.min_distributors}-{exp.max_distributors}",
            actual=distributors.total,
            status=CORRECT if distributors_ok else NEEDS_REVIEW,
            without_debt=distributors.without_debt,
        ),
        "sales": QualityCheck(
            expected=exp.sales,
            actual=analysis.sales.total,
            status=_within(analysis.sales.total, exp.sales, exp.sales_tolerance),
        ),
        "expenses_payments": QualityCheck(
            expected=_describe(exp.expense_payment_transactions, exp.expense_payment_tolerance),
            actual=transactions,
            status=_within(transactions, exp.expense_payment_transactions, exp.expense_payment_tolerance),
        ),
    }

    recommendations = []
    for name, check in quality.items():
        if check.status != NEEDS_REVIEW:
            continue
        if name == "distributors":
            problems = []
            if not in_range:
                problems.append(f"found {check.actual}, expected {check.expected}")
            if not debt_free_ok:
                problems.append(
                    f"found {distributors.without_debt} without debt, "
                    f"expected {exp.debt_free_distributors}"
                )
            recommendations.append(f"Review distributors: {'; '.join(problems)}")
        else:
            recommendations.append(
                f"Review {name.replace('_', ' ')}: found {check.actual}, expected {check.expected}"
            )

    return DataQualityReport(
        timestamp=analysis.timestamp,
        status=NEEDS_REVIEW if recommendations else CORRECT,
        quality=quality,
        summary=analysis.summary,
        recommendations=recommendations,
    )


async def get_data_quality_report(
    store: DocumentStore,
    expectations: Optional[QualityExpectations] = None,
) -> DataQualityReport:
    """Run a fresh complete analysis and evaluate it against the baselines"""
    start_time = time.time()
    analysis = await get_complete_analysis(store)
    report = evaluate_quality(analysis, expectations or expectations_from_settings())

    record_quality_checks({name: check.status for name, check in report.quality.items()})
    logger.info(
        "Data quality report completed",
        extra={
            "step": "quality_report_complete",
            "status": report.status,
            "duration_ms": (time.time() - start_time) * 1000,
        },
    )
    return report
