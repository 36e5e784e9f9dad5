# config.py

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Carrega variáveis de ambiente do .env (SERPAPI_API_KEY, GEMINI_API_KEY, ...)
load_dotenv()

# Diretório base = pasta onde está este arquivo
BASE_DIR = Path(__file__).resolve().parent

# Diretório onde os arquivos de saída (CSV/Excel/relatórios) serão salvos
OUTPUT_DIR = Path(os.getenv("MERCADO_PNEUS_OUTPUT_DIR", str(BASE_DIR / "outputs")))

# Arquivo onde as duas chaves de API ficam guardadas
CREDENCIAIS_PATH = Path(
    os.getenv(
        "MERCADO_PNEUS_CREDENCIAIS",
        str(Path.home() / ".mercado_pneus" / "credenciais.json"),
    )
)

# Chaves fixas dentro do arquivo de credenciais
CHAVE_SERPAPI = "serpapi_key"
CHAVE_GEMINI = "gemini_key"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

# =========================
# Parâmetros padrão da busca (Google Brasil)
# =========================

GL_DEFAULT = "br"
HL_DEFAULT = "pt"
LOCATION_DEFAULT = "Brazil"

# Engine de busca orgânica do Google (traz anúncios, orgânicos e buscas relacionadas)
SERP_ENGINE = os.getenv("SERP_ENGINE", "google").strip()

# =========================
# Provedor de SERP (SerpApi x SearchAPI)
# =========================

# Valores esperados: "serpapi" (padrão) ou "searchapi".
SERP_PROVIDER = os.getenv("SERP_PROVIDER", "serpapi").strip().lower()

SERPAPI_URL = "https://serpapi.com/search.json"
SEARCHAPI_URL = "https://www.searchapi.io/api/v1/search"

# Chaves vindas do ambiente. Só são usadas quando não há chave salva pelo usuário.
SERPAPI_API_KEY = os.getenv("SERPAPI_API_KEY")
SEARCHAPI_API_KEY = os.getenv("SEARCHAPI_API_KEY")

# =========================
# Gemini (Google Generative Language API)
# =========================

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-pro").strip()
GEMINI_API_BASE = os.getenv(
    "GEMINI_API_BASE", "https://generativelanguage.googleapis.com"
).strip().rstrip("/")

try:
    GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
except ValueError:
    GEMINI_TEMPERATURE = 0.7

try:
    GEMINI_MAX_TOKENS = int(os.getenv("GEMINI_MAX_TOKENS", "2048"))
except ValueError:
    GEMINI_MAX_TOKENS = 2048

GEMINI_GENERATION_CONFIG = {
    "temperature": GEMINI_TEMPERATURE,
    "topK": 1,
    "topP": 1,
    "maxOutputTokens": GEMINI_MAX_TOKENS,
}

# Timeout (em segundos) para cada requisição HTTP.
try:
    TIMEOUT_REQUEST = int(os.getenv("MERCADO_PNEUS_TIMEOUT", "45"))
except ValueError:
    TIMEOUT_REQUEST = 45

# =========================
# Controles de coleta
# =========================

# Pausa (em segundos) entre as buscas de cada palavra-chave (limite de taxa da API).
try:
    PAUSA_ENTRE_REQUISICOES = float(os.getenv("PAUSA_ENTRE_REQUISICOES", "1.0"))
except ValueError:
    PAUSA_ENTRE_REQUISICOES = 1.0

# Pausa extra entre uma marca e outra na comparação de marcas.
try:
    PAUSA_ENTRE_MARCAS = float(os.getenv("PAUSA_ENTRE_MARCAS", "1.0"))
except ValueError:
    PAUSA_ENTRE_MARCAS = 1.0

# Pausa entre as duas sondagens da validação de chaves.
PAUSA_VALIDACAO = 0.5

# Quantos itens de cada bloco da SERP guardamos por palavra-chave
TOP_ITENS_SERP = 3

# =========================
# Listas fixas de palavras-chave
# =========================

PALAVRAS_MERCADO = [
    "pneu aro 13",
    "pneu aro 14",
    "pneu aro 15",
    "pneu continental",
    "pneu pirelli",
    "pneu remold",
    "pneu barato",
]

PALAVRAS_TENDENCIAS = [
    "pneu aro 13",
    "pneu aro 14",
    "pneu aro 15",
    "pneu aro 16",
    "pneu remold",
    "pneu importado",
]

NICHOS_PADRAO = [
    "pneu run flat",
    "pneu ecológico",
    "pneu silencioso",
    "pneu off road",
    "pneu winter",
    "pneu performance",
    "pneu caminhonete",
    "pneu moto trail",
    "pneu agrícola",
    "pneu reciclado",
    "pneu inteligente",
    "pneu conectado",
]

MARCAS_PADRAO = ["pirelli", "continental", "michelin", "bridgestone"]


def configurar_logging(nivel: str = LOG_LEVEL) -> None:
    """Configuração única de logging para CLI e dashboard."""
    logging.basicConfig(
        level=getattr(logging, nivel, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
