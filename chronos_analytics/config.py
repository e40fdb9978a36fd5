"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Document store
    store_backend: str = "firestore"  # "firestore" | "snapshot"
    firestore_api_base: str = "https://firestore.googleapis.com/v1"
    firestore_project_id: str = "chronos-system"
    firestore_database_id: str = "(default)"
    firestore_api_token: str | None = None
    firestore_page_size: int = 300
    snapshot_dir: str = "./snapshot"

    # Report history
    database_url: str = "sqlite:///./chronos_analytics.db"

    # Service
    service_name: str = "chronos-analytics"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Inventory
    default_min_stock: float = 0

    # Quality baselines for the current tenant dataset
    expected_clients: int = 31
    clients_tolerance: int = 1
    expected_purchase_orders: int = 9
    purchase_orders_tolerance: int = 0
    min_distributors: int = 2
    max_distributors: int = 6
    expected_debt_free_distributors: int = 2
    expected_sales: int = 96
    sales_tolerance: int = 1
    expected_expense_payment_transactions: int = 306
    expense_payment_tolerance: int = 10


settings = Settings()
