"""Cliente de busca orgânica do Google (SERP).

Suporta 2 provedores com o mesmo formato de resposta para o que nos interessa
(`search_information.total_results`, `ads`, `organic_results`,
`related_searches`):

- SerpApi   (engine=google, endpoint serpapi.com) - padrão
- SearchAPI (engine=google, endpoint searchapi.io)

O retorno é sempre o JSON bruto do provedor; quem padroniza é o
processador_resultados.py.
"""

import logging
from typing import Any, Dict, Optional

import requests

from mercado_pneus.config import (
    GL_DEFAULT,
    HL_DEFAULT,
    LOCATION_DEFAULT,
    SEARCHAPI_API_KEY,
    SEARCHAPI_URL,
    SERP_ENGINE,
    SERP_PROVIDER,
    SERPAPI_API_KEY,
    SERPAPI_URL,
    TIMEOUT_REQUEST,
)

logger = logging.getLogger(__name__)

# Consulta barata usada só para testar se a chave funciona
CONSULTA_VALIDACAO = "pneu"


class SerpApiError(Exception):
    """Erro genérico ao consultar o provedor de SERP."""
    pass


def _get_provider(provider: Optional[str]) -> str:
    prov = (provider or SERP_PROVIDER or "serpapi").strip().lower()
    if prov in {"serpapi", "serp_api", "serp-api"}:
        return "serpapi"
    if prov in {"searchapi", "search_api", "search-api"}:
        return "searchapi"
    raise SerpApiError(
        f"Provedor inválido: '{provider}'. Use 'serpapi' ou 'searchapi'."
    )


def _chave_padrao(prov: str) -> Optional[str]:
    return SERPAPI_API_KEY if prov == "serpapi" else SEARCHAPI_API_KEY


def _sem_resultados(msg: str) -> bool:
    # Caso clássico: "Google hasn't returned any results for this query."
    return "returned any results" in msg.lower()


def buscar_serp(
    q: str,
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
    gl: str = GL_DEFAULT,
    hl: str = HL_DEFAULT,
    location: Optional[str] = LOCATION_DEFAULT,
    engine: str = SERP_ENGINE,
) -> Dict[str, Any]:
    """
    Consulta a SERP do Google para `q` via provedor configurável.

    - SerpApi:   https://serpapi.com/search-api
    - SearchAPI: https://www.searchapi.io/docs/google

    Retorna o JSON bruto. Uma busca sem resultados NÃO é erro: volta um dict
    sem os blocos de resultados.
    """
    prov = _get_provider(provider)
    chave = (api_key or _chave_padrao(prov) or "").strip()
    if not chave:
        nome = "SerpApi" if prov == "serpapi" else "SearchAPI"
        raise SerpApiError(
            f"Chave da {nome} não definida. "
            "Configure a chave na tela inicial ou no .env."
        )

    url = SERPAPI_URL if prov == "serpapi" else SEARCHAPI_URL
    params: Dict[str, Any] = {
        "api_key": chave,
        "engine": engine,
        "q": q,
        "gl": gl,
        "hl": hl,
    }
    if location:
        params["location"] = location

    logger.info("Buscando dados no %s para: %s", prov, q)

    try:
        resp = requests.get(url, params=params, timeout=TIMEOUT_REQUEST)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise SerpApiError(f"Erro de rede ao consultar {prov}: {e}") from e

    try:
        data = resp.json()
    except ValueError as e:
        raise SerpApiError("Resposta da API não é um JSON válido.") from e

    if not isinstance(data, dict):
        raise SerpApiError(f"Resposta inesperada de {prov} (não é dict).")

    # O provedor pode devolver erro com status 200.
    if "error" in data:
        erro = data["error"]
        mensagem = erro.get("message") if isinstance(erro, dict) else str(erro)
        if not _sem_resultados(mensagem or ""):
            raise SerpApiError(f"Erro retornado por {prov}: {mensagem}")
        logger.info("Nenhum resultado do Google para: %s", q)

    meta = data.get("search_metadata")
    if isinstance(meta, dict):
        status = str(meta.get("status") or "").strip().lower()
        if status and status != "success":
            raise SerpApiError(f"{prov} retornou status '{meta.get('status')}'.")

    return data


def validar_chave_serp(api_key: str, provider: Optional[str] = None) -> Optional[str]:
    """Retorna None se a chave funcionou, senão a mensagem de erro para o usuário."""
    if not (api_key or "").strip():
        return "Chave SerpAPI não informada."
    try:
        buscar_serp(CONSULTA_VALIDACAO, api_key=api_key, provider=provider)
    except SerpApiError as e:
        logger.error("Falha ao validar chave SERP: %s", e)
        return f"Chave SerpAPI inválida ou sem créditos: {e}"
    return None
