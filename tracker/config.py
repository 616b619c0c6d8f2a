import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    api_url: str = "http://localhost:5000/api/expenses"
    database_url: str = "sqlite:///expenses.db"
    port: int = 5000
    request_timeout: float = 5.0
    currency: str = "₹"
    chart_y_max: float = 50000
    log_level: str = "INFO"
    persist_expenses: bool = False


def load_settings() -> Settings:
    """Read settings from the environment, after loading a local .env file."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        api_url=os.getenv("EXPENSES_API_URL", defaults.api_url),
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        port=int(os.getenv("PORT", defaults.port)),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", defaults.request_timeout)),
        currency=os.getenv("CURRENCY", defaults.currency),
        chart_y_max=float(os.getenv("CHART_Y_MAX", defaults.chart_y_max)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        persist_expenses=os.getenv("PERSIST_EXPENSES", "false").lower() == "true",
    )


def configure_logging(level: str = "INFO") -> None:
    # streamlit reruns the script, so drop handlers from the previous run
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
