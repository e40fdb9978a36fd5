"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from typing import Any, Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from chronos_analytics.api.main import create_app
from chronos_analytics.api.dependencies import get_store
from chronos_analytics.domain.exceptions import DataStoreError
from chronos_analytics.infrastructure.clients.memory import InMemoryStore
from chronos_analytics.infrastructure.database.models import Base
from chronos_analytics.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Reference date for historical bank cuts: boundaries 2024-03-01, 2024-02-01, 2024-01-01
CUT_REFERENCE_DATE = date(2024, 3, 15)


class FailingStore:
    """Store that fails on the given collections, or on all of them"""

    def __init__(self, failing: set[str] | None = None, dataset: Dict[str, List[Dict[str, Any]]] | None = None):
        self.failing = failing
        self.inner = InMemoryStore(dataset or {})

    async def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        if self.failing is None or collection in self.failing:
            raise DataStoreError(f"Document store error fetching {collection}: 503")
        return await self.inner.fetch_all(collection)


@pytest.fixture
def dataset() -> Dict[str, List[Dict[str, Any]]]:
    """Small tenant snapshot with a mix of valid and invalid records"""
    return {
        "clientes": [
            {"id": "1", "nombre": "Cliente Válido 1", "limiteCredito": 10000, "saldoPendiente": 5000, "totalCompras": 15000},
            {"id": "2", "nombre": "Cliente Válido 2", "limiteCredito": 0, "saldoPendiente": 0, "totalCompras": 5000},
            {"id": "3", "nombre": "", "limiteCredito": 0, "saldoPendiente": 0, "totalCompras": 0},
            {"id": "4", "nombre": "Cliente con Deuda", "limiteCredito": 20000, "saldoPendiente": 8000, "totalCompras": 25000},
        ],
        "ventas": [
            {
                "id": "v1", "total": 1000, "estado": "liquidada", "totalPagado": 1000, "saldoPendiente": 0,
                "pagos": [{"monto": 600}, {"monto": 400}],
            },
            {
                "id": "v2", "total": 2000, "estado": "parcial", "totalPagado": 1000, "saldoPendiente": 1000,
                "pagos": [{"monto": 1000}, {"monto": 0}],
            },
            {"id": "v3", "total": 0, "estado": "cancelada", "totalPagado": 0, "saldoPendiente": 0},
            {"id": "v4", "total": 3000, "estado": "pendiente", "totalPagado": 0, "saldoPendiente": 3000},
        ],
        "compras": [
            {
                "id": "c1", "total": 5000, "estado": "recibida", "productos": [{"id": "p1", "cantidad": 10}],
                "distribuidorId": "d1", "distribuidorNombre": "Distribuidor 1", "saldoPendiente": 999,
            },
            {"id": "c2", "total": 0, "estado": "cancelada", "productos": []},
            {
                "id": "c3", "total": 8000, "estado": "pendiente", "productos": [{"id": "p2", "cantidad": 5}],
                "distribuidorId": "d2", "distribuidorNombre": "Distribuidor 2", "saldoPendiente": 500,
            },
            {
                "id": "c4", "total": 1200, "estado": "pendiente", "productos": [{"id": "p4", "cantidad": 1}],
                "saldoPendiente": 1200,
            },
        ],
        "distribuidores": [
            {"id": "d1", "nombre": "Distribuidor 1", "activo": True, "totalCompras": 5000},
            {"id": "d2", "nombre": "Distribuidor 2", "activo": True},
            {"id": "d3", "nombre": "", "activo": False},
            {"id": "d4", "nombre": "Distribuidor 4"},
        ],
        "gastos": [
            {"id": "g1", "total": 500, "categoria": "servicios"},
            {"id": "g2", "total": 0, "categoria": "otro"},
            {"id": "g3", "total": 1000, "categoria": "nomina"},
            {"id": "g4", "total": 250},
        ],
        "bancos": [
            {"id": "boveda-monte", "nombre": "Bóveda Monte", "saldoActual": 150000},
            {"id": "boveda-usa", "nombre": "Bóveda USA", "capitalActual": 80000},
            {"id": "utilidades", "nombre": "Utilidades", "saldoActual": 45000},
        ],
        "movimientosBancarios": [
            {"id": "m1", "banco": "boveda-monte", "tipo": "entrada", "monto": 5000, "fecha": datetime(2024, 1, 10)},
            # 2024-02-20T00:00:00Z in Firestore seconds/nanos form
            {"id": "m2", "banco": "boveda-monte", "tipo": "salida", "monto": 2000, "fecha": {"seconds": 1708387200, "nanos": 0}},
            {"id": "m3", "bancoId": "boveda-monte", "tipo": "transferencia_entrada", "monto": 1000, "fecha": "2024-03-05T10:00:00Z"},
            {"id": "m4", "banco": "boveda-monte", "tipo": "entrada", "monto": 700},
            {"id": "m5", "banco": "boveda-usa", "tipo": "entrada", "monto": 10000, "fecha": date(2024, 2, 1)},
        ],
        "productos": [
            {"id": "p1", "nombre": "Producto 1", "stock": 100, "costoUnitario": 50, "activo": True},
            {"id": "p2", "nombre": "Producto 2", "stock": 0, "costoUnitario": 30, "activo": True},
            {"id": "p3", "nombre": "Producto 3", "stock": 50, "costoUnitario": 0, "activo": False},
            {"id": "p4", "nombre": "Producto 4", "stock": 5, "activo": True, "stockMinimo": 10},
            {"id": "p5", "nombre": "Producto 5", "costoUnitario": 12, "activo": True},
        ],
    }


@pytest.fixture
def store(dataset: Dict[str, List[Dict[str, Any]]]) -> InMemoryStore:
    return InMemoryStore(dataset)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session, store: InMemoryStore):
    """FastAPI app wired to the test database and in-memory store"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_store] = lambda: store
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def cut_reference_date() -> date:
    return CUT_REFERENCE_DATE


@pytest.fixture
def failing_store():
    """Factory for stores that fail on the given collections (all when None)"""
    return FailingStore
