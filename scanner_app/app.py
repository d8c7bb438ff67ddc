"""Scanner app bootstrap."""

import logging

from agents.shopping_assistant import ShoppingAssistant
from scanner_app.config import ScannerConfig
from scanner_app.logging_config import configure_logging, get_logger, log_event
from tools.product_analyzer import ProductAnalyzer
from tools.scan_store import SQLiteScanStore
from tools.wardrobe_store import SQLiteWardrobeStore

LOGGER = get_logger(__name__)


class ShoppingScannerApp:
    """Wires together configuration, stores, the product analyzer and the assistant."""

    def __init__(self, config: ScannerConfig | None = None) -> None:
        self.config = config or ScannerConfig.from_env()
        configure_logging()

        self.wardrobe_store = SQLiteWardrobeStore(self.config.database_path)
        self.scan_store = SQLiteScanStore(self.config.database_path)
        self.analyzer = ProductAnalyzer(api_key=self.config.gemini_api_key, model_name=self.config.model)
        self.assistant = ShoppingAssistant(
            config=self.config,
            wardrobe_store=self.wardrobe_store,
            scan_store=self.scan_store,
            analyzer=self.analyzer,
        )

        log_event(
            LOGGER,
            logging.INFO,
            "app_initialized",
            environment=self.config.environment or "local",
            model=self.config.model,
            analyzer_configured=self.analyzer.configured,
        )


__all__ = ["ShoppingScannerApp"]
