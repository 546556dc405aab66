"""
Configuration: brand catalog, KPI windows, store names, assistant prompt.

Environment settings (credentials, model, data source) are read from the
process environment, with an optional ``.env`` file at the project root.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
ASSISTANT_MAX_TOKENS = int(os.getenv("ASSISTANT_MAX_TOKENS", "1024"))

# "supabase" reads the live store, "demo" serves simulated data in memory
DATA_SOURCE = os.getenv("DASHBOARD_DATA_SOURCE", "supabase")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# ---------------------------------------------------------------------------
# Brand identity and static catalogs
# ---------------------------------------------------------------------------
BRAND_NAME = "NutriSnack"

COMPETITORS = ["PepsiCo (Lays)", "Arcor", "Mondelez", "Georgalos"]
REGIONS = ["AMBA", "Córdoba", "Mendoza", "Rosario", "Tucumán"]
CHANNELS = ["Supermercado", "Autoservicio", "Kiosco", "Almacén"]

# ---------------------------------------------------------------------------
# Store objects (views, tables, procedures)
# ---------------------------------------------------------------------------
SELL_OUT_VIEW = "v_sell_out_detail"
MARKET_SHARE_VIEW = "v_market_share_by_region"
ALERTS_TABLE = "alerts"
REGIONS_TABLE = "regions"
CHANNELS_TABLE = "channels"

MARKET_SHARE_PROCEDURE = "get_market_share_by_region"
PERFECT_STORE_PROCEDURE = "calculate_perfect_store_score"

# ---------------------------------------------------------------------------
# KPI windows (trailing days)
# ---------------------------------------------------------------------------
PRICE_WINDOW_DAYS = 7
CHANNEL_WINDOW_DAYS = 7
SHARE_WINDOW_DAYS = 30
KPI_WINDOW_DAYS = 30
PRODUCT_WINDOW_DAYS = 30
TREND_WINDOW_DAYS = 90

TOP_N_PRODUCTS = 5
DASHBOARD_ALERT_LIMIT = 10
ASSISTANT_ALERT_LIMIT = 5

# Parallel read queries per refresh
FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", "6"))

# ---------------------------------------------------------------------------
# KPI card colouring
# ---------------------------------------------------------------------------
# direction: "higher_is_better" or "lower_is_better"
# amber_band: percentage-point tolerance around zero change
KPI_REGISTRY: dict[str, dict] = {
    "revenue_change_pct": {"direction": "higher_is_better", "amber_band": 2.0},
    "share_change_pct": {"direction": "higher_is_better", "amber_band": 0.5},
    "price_vs_competition_pct": {"direction": "lower_is_better", "amber_band": 5.0},
    "availability_change_pct": {"direction": "higher_is_better", "amber_band": 1.0},
}

# ---------------------------------------------------------------------------
# Assistant
# ---------------------------------------------------------------------------
ASSISTANT_ERROR_MESSAGE = (
    "Lo siento, no pude procesar tu consulta en este momento. "
    "Por favor intentá de nuevo en unos minutos."
)

ASSISTANT_SYSTEM_PROMPT = """Eres un asistente de análisis comercial para la marca {brand}, una empresa de snacks saludables en Argentina.
Tu rol es ayudar a analistas y gerentes comerciales a entender sus datos de ventas y tomar decisiones.

DATOS ACTUALES DEL NEGOCIO:
{context}

INSTRUCCIONES:
- Responde siempre en español
- Sé conciso pero informativo
- Cuando menciones números, formatea los valores monetarios con $ y usa separadores de miles
- Si te preguntan por regiones, canales, o productos específicos, usa los datos del contexto
- Sugiere acciones concretas cuando sea apropiado
- Si no tienes datos específicos para responder algo, indícalo claramente
- Puedes hacer comparaciones con la competencia usando los datos de market share
- El Perfect Store Score tiene 3 componentes: disponibilidad, precio competitivo, y distribución

FORMATO:
- Usa bullet points para listas
- Destaca los números importantes
- Si hay alertas relevantes a la pregunta, menciónalas"""
