"""
Application configuration management.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass, field


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("./data")


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    overrides_path: Path = field(
        default_factory=lambda: Path(os.getenv("MAPPING_OVERRIDES_PATH", "mapping-overrides.json"))
    )

    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "1800")))

    # Name canonicalization
    similarity_threshold: float = field(
        default_factory=lambda: float(os.getenv("SIMILARITY_THRESHOLD", "85"))
    )

    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw"

    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


def configure_logging(level: str = None):
    """Configure root logging once for the app and scripts."""
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Raw sheet exports (one CSV per sheet)
RAW_FILES = {
    "logbook": "logbook",
    "clients": "clienti",
    "compensation": "compensi",
    "mapping": "mappa",
}

# Month labels used as the time bucket for revenue and compensation lookups
MONTH_LABELS = [
    "Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno",
    "Luglio", "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre",
]

# Label categories canonicalized independently: category -> logbook column
CATEGORY_COLUMNS = {
    "client": "client",
    "collaborator": "collaborator",
    "department": "department",
    "macro_activity": "macro_activity",
    "micro_activity": "micro_activity",
}

# Override file keys accepted for each category
CATEGORY_KEY_ALIASES = {
    "clienti": "client",
    "collaboratori": "collaborator",
    "reparti": "department",
    "macroAttivita": "macro_activity",
    "microAttivita": "micro_activity",
}

LOGBOOK_COLUMNS = [
    "collaborator",
    "work_date",
    "department",
    "macro_activity",
    "micro_activity",
    "client",
    "note",
    "minutes",
]

# Sheet header (lower-cased) -> logbook column
LOGBOOK_HEADER_ALIASES = {
    "nome": "collaborator",
    "collaborator": "collaborator",
    "data": "work_date",
    "date": "work_date",
    "reparto1": "department",
    "reparto": "department",
    "department": "department",
    "macro attività": "macro_activity",
    "macro attivita": "macro_activity",
    "macro activity": "macro_activity",
    "micro attività": "micro_activity",
    "micro attivita": "micro_activity",
    "micro activity": "micro_activity",
    "cliente": "client",
    "client": "client",
    "note": "note",
    "minuti impiegati": "minutes",
    "minutes": "minutes",
}

COMPENSATION_NAME_HEADERS = ["collaboratore", "collaboaratore", "collaborator"]
REVENUE_NAME_HEADERS = ["cliente", "client"]
REVENUE_ACTUAL_HEADER = "actual"
REVENUE_ACTUAL_VALUE = "Actual"

# Billing-system client name -> logbook client name, used when no mapping sheet exists
DEFAULT_CLIENT_MAPPING = [
    ("ACOS MEDICA", "Acos Medica"),
    ("Bovo Garden Srl", "Flobflower"),
    ("Business Gates S.r.l.", "Business Gates"),
    ("CARL ZEISS VISION ITALIA S.P.A.", "Zeiss"),
    ("CAROVILLA PIERLUIGI (SONIT)", "Sonit"),
    ("Cisa S.p.a.", "Cisa"),
    ("CoLibrì System S.p.A.", "Colibrì"),
    ("CURCAPIL DI CARLUCCI DONATO SNC", "Curcapil"),
    ("Elettrocasa S.r.l.", "Elettrocasa"),
    ("FIDELIA - S.R.L.", "Casaviva"),
    ("FLO.MAR. S.R.L.S.", "Flomar"),
    ("Fratelli Bonella", "Fratelli Bonella"),
    ("HOMIT S.R.L.", "Divani Store"),
    ("NOWAVE", "Nowave"),
    ("PATRIZIO BRESEGHELLO", "Patrizio Breseghello"),
    ("POLONORD ADESTE", "Polonord"),
    ("SAIET", "Saiet"),
    ("SAN PIETRO LAB", "San Pietro Lab"),
    ("Sivec Srl", "Passione Fiori"),
    ("STILMAR DI MARISE RICCARDO (COCCOLE)", "Coccole"),
    ("TOMAINO SRL", "Tomaino"),
]

# Required columns (hard fail if missing)
REQUIRED_COLUMNS = {
    "logbook": [
        "collaborator",
        "work_date",
        "client",
        "minutes",
    ],
    "compensation": ["collaborator"],
    "clients": ["client"],
    "mapping": ["client", "client_map"],
}

# Optional columns (soft warn if missing)
OPTIONAL_COLUMNS = {
    "logbook": [
        "department",
        "macro_activity",
        "micro_activity",
        "note",
    ],
}

# Formatting constants
CURRENCY_SYMBOL = "€"
RATE_SENTINEL_LABEL = "n/d"
TOTAL_ROW_LABEL = "TOTAL"
