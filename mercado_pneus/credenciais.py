"""Persistência das duas chaves de API (SerpApi e Gemini).

As chaves ficam num JSON local, sempre sob as mesmas chaves fixas
(`serpapi_key` e `gemini_key`). Se o arquivo não existir, usamos o que vier
do ambiente (.env).
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from mercado_pneus.config import (
    CHAVE_GEMINI,
    CHAVE_SERPAPI,
    CREDENCIAIS_PATH,
    GEMINI_API_KEY,
    SEARCHAPI_API_KEY,
    SERP_PROVIDER,
    SERPAPI_API_KEY,
)

logger = logging.getLogger(__name__)


class CredenciaisError(Exception):
    """Arquivo de credenciais ilegível ou corrompido."""
    pass


def _chaves_do_ambiente() -> Dict[str, str]:
    serp = SEARCHAPI_API_KEY if SERP_PROVIDER == "searchapi" else SERPAPI_API_KEY
    return {
        "serpapi": (serp or "").strip(),
        "gemini": (GEMINI_API_KEY or "").strip(),
    }


def carregar_credenciais(caminho: Optional[Path] = None) -> Dict[str, str]:
    """Lê as chaves salvas. Campos ausentes caem no valor do ambiente."""
    caminho = Path(caminho or CREDENCIAIS_PATH)
    chaves = _chaves_do_ambiente()

    if not caminho.exists():
        return chaves

    try:
        with caminho.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise CredenciaisError(f"Não foi possível ler {caminho}: {e}") from e

    if not isinstance(data, dict):
        raise CredenciaisError(f"Formato inesperado em {caminho} (esperado objeto JSON).")

    serp = str(data.get(CHAVE_SERPAPI) or "").strip()
    gemini = str(data.get(CHAVE_GEMINI) or "").strip()
    if serp:
        chaves["serpapi"] = serp
    if gemini:
        chaves["gemini"] = gemini
    return chaves


def salvar_credenciais(serpapi: str, gemini: str, caminho: Optional[Path] = None) -> Path:
    caminho = Path(caminho or CREDENCIAIS_PATH)
    caminho.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        CHAVE_SERPAPI: (serpapi or "").strip(),
        CHAVE_GEMINI: (gemini or "").strip(),
    }
    with caminho.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    # Só o dono lê as chaves
    caminho.chmod(0o600)

    logger.info("Chaves API salvas em %s", caminho)
    return caminho


def esta_configurado(chaves: Dict[str, str]) -> bool:
    """Só consideramos configurado com as duas chaves preenchidas."""
    return bool((chaves.get("serpapi") or "").strip() and (chaves.get("gemini") or "").strip())


def mascarar_chave(chave: Optional[str]) -> str:
    s = (chave or "").strip()
    if not s:
        return ""
    return (s[:6] + "…" + s[-4:]) if len(s) > 10 else "****"
