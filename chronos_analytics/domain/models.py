"""Domain models - pure Python dataclasses representing analysis reports"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass
class DataQuality:
    """Valid/invalid split of one raw collection"""

    total_records: int
    valid_records: int
    invalid_records: int
    validity_rate: float  # percent, 2 decimals


@dataclass
class Debtor:
    """Client ranked by outstanding balance"""

    id: str
    nombre: str
    saldo_pendiente: float


@dataclass
class ClientAnalysis:
    total: int
    active: int
    with_credit: int
    with_debt: int
    without_debt: int
    total_debt: float
    avg_debt_per_client: float
    top5_debtors: List[Debtor]
    data_quality: DataQuality


@dataclass
class SalesAnalysis:
    total: int
    by_status: Dict[str, int]  # pendiente | parcial | liquidada | cancelada
    total_amount: float
    total_paid: float
    total_pending: float
    avg_sale_value: float
    data_quality: DataQuality


@dataclass
class DistributorOrders:
    """Purchase orders grouped under one distributor reference"""

    count: int
    total: float
    distribuidor_nombre: str


@dataclass
class PurchaseOrderAnalysis:
    total: int
    by_status: Dict[str, int]  # pendiente | recibida | cancelada
    total_amount: float
    avg_order_value: float
    by_distributor: Dict[str, DistributorOrders]
    data_quality: DataQuality


@dataclass
class DistributorDebt:
    """Debt derived from a distributor's pending purchase orders"""

    id: str
    nombre: str
    deuda: float
    has_debt: bool
    numero_compras: int
    total_compras: float


@dataclass
class DistributorAnalysis:
    total: int
    with_debt: int
    without_debt: int
    total_debt: float
    distributors: List[DistributorDebt]
    data_quality: DataQuality


@dataclass
class CategoryTotal:
    count: int
    total: float


@dataclass
class ExpenseTotals:
    count: int
    total: float
    by_category: Dict[str, CategoryTotal]


@dataclass
class PaymentTotals:
    count: int
    total: float


@dataclass
class CombinedTotals:
    total_transactions: int
    total_amount: float


@dataclass
class ExpensesPaymentsAnalysis:
    expenses: ExpenseTotals
    payments: PaymentTotals
    combined: CombinedTotals
    data_quality: DataQuality


@dataclass
class HistoricalCut:
    """Net movement balance accumulated before a month boundary"""

    periodo: str  # ISO date of the month boundary
    saldo: float


@dataclass
class BankBalance:
    id: str
    nombre: str
    saldo_actual: float
    total_entradas: float
    total_salidas: float
    numero_movimientos: int
    cortes_anteriores: List[HistoricalCut]
    moneda: str = "USD"


@dataclass
class BankSummary:
    total_bancos: int
    saldo_consolidado: float
    total_entradas: float
    total_salidas: float
    moneda: str = "USD"


@dataclass
class BankBalancesAnalysis:
    bancos: List[BankBalance]
    resumen: BankSummary
    data_quality: DataQuality


@dataclass
class ProductValue:
    id: str
    nombre: str
    stock: float
    costo_unitario: float
    valor: float


@dataclass
class InventoryAnalysis:
    total_products: int
    total_stock_value: float
    low_stock: int
    out_of_stock: int
    avg_stock_value: float
    top_value_products: List[ProductValue]
    data_quality: DataQuality
    moneda: str = "USD"


@dataclass
class AnalysisSummary:
    """Headline numbers across all analyzers"""

    clientes_validos: int
    ordenes_compra: int
    distribuidores: int
    distribuidores_sin_deuda: int
    ventas: int
    gastos_y_pagos: int
    saldo_bancos_usd: float
    valor_inventario_usd: float


@dataclass
class CompleteAnalysis:
    timestamp: str
    clients: ClientAnalysis
    purchase_orders: PurchaseOrderAnalysis
    distributors: DistributorAnalysis
    sales: SalesAnalysis
    expenses_payments: ExpensesPaymentsAnalysis
    bank_balances: BankBalancesAnalysis
    inventory: InventoryAnalysis
    summary: AnalysisSummary


@dataclass
class QualityExpectations:
    """Expected counts and tolerance bands for the quality report"""

    clients: int = 31
    clients_tolerance: int = 1
    purchase_orders: int = 9
    purchase_orders_tolerance: int = 0
    min_distributors: int = 2
    max_distributors: int = 6
    debt_free_distributors: int = 2
    sales: int = 96
    sales_tolerance: int = 1
    expense_payment_transactions: int = 306
    expense_payment_tolerance: int = 10


@dataclass
class QualityCheck:
    expected: Union[int, str]
    actual: int
    status: str  # CORRECT | NEEDS_REVIEW
    validity_rate: Optional[float] = None
    without_debt: Optional[int] = None


@dataclass
class DataQualityReport:
    timestamp: str
    status: str
    quality: Dict[str, QualityCheck]
    summary: AnalysisSummary
    recommendations: List[str] = field(default_factory=list)
