"""Data-access collaborator consumed by the analyzers"""

from typing import Any, Dict, List, Protocol

# Collection names in the document store
CLIENTS = "clientes"
SALES = "ventas"
PURCHASE_ORDERS = "compras"
DISTRIBUTORS = "distribuidores"
EXPENSES = "gastos"
BANKS = "bancos"
BANK_MOVEMENTS = "movimientosBancarios"
PRODUCTS = "productos"


class DocumentStore(Protocol):
    """Anything that can return every record of a collection"""

    async def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return all records of `collection`, each carrying its document `id`"""
        ...
