"""Cliente da API Gemini (generateContent) via REST."""

import json
import logging
import re
from typing import Any, Dict, Optional

import requests

from mercado_pneus.config import (
    GEMINI_API_BASE,
    GEMINI_API_KEY,
    GEMINI_GENERATION_CONFIG,
    GEMINI_MODEL,
    TIMEOUT_REQUEST,
)

logger = logging.getLogger(__name__)

TEXTO_INDISPONIVEL = "Análise não disponível"

_RE_BLOCO_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


class GeminiError(Exception):
    """Erro ao consultar a API do Gemini."""
    pass


def gemini_api_url(model: Optional[str] = None) -> str:
    return f"{GEMINI_API_BASE}/v1beta/models/{model or GEMINI_MODEL}:generateContent"


def _extrair_texto(data: Dict[str, Any]) -> str:
    candidatos = data.get("candidates") or []
    if not candidatos:
        return TEXTO_INDISPONIVEL
    content = (candidatos[0] or {}).get("content") or {}
    parts = content.get("parts") or []
    if not parts:
        return TEXTO_INDISPONIVEL
    return (parts[0] or {}).get("text") or TEXTO_INDISPONIVEL


def analisar_com_gemini(
    prompt: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    generation_config: Optional[Dict[str, Any]] = None,
) -> str:
    """Envia o prompt e devolve o texto do primeiro candidato."""
    chave = (api_key or GEMINI_API_KEY or "").strip()
    if not chave:
        raise GeminiError(
            "Chave do Gemini não definida. Configure a chave na tela inicial ou no .env."
        )

    logger.info("Analisando com Gemini AI: %s...", prompt.strip()[:100])

    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": generation_config or GEMINI_GENERATION_CONFIG,
    }

    try:
        resp = requests.post(
            gemini_api_url(model),
            params={"key": chave},
            json=payload,
            timeout=TIMEOUT_REQUEST,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise GeminiError(f"Erro ao consultar Gemini: {e}") from e

    try:
        data = resp.json()
    except ValueError as e:
        raise GeminiError("Resposta do Gemini não é um JSON válido.") from e

    if not isinstance(data, dict):
        raise GeminiError("Resposta inesperada do Gemini (não é dict).")

    if "error" in data:
        erro = data["error"]
        mensagem = erro.get("message") if isinstance(erro, dict) else str(erro)
        raise GeminiError(f"Erro retornado pelo Gemini: {mensagem}")

    feedback = data.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        raise GeminiError(f"Prompt bloqueado pelo Gemini: {feedback['blockReason']}")

    logger.info("Resposta do Gemini AI recebida")
    return _extrair_texto(data)


def validar_chave_gemini(api_key: str) -> Optional[str]:
    """Retorna None se a chave funcionou, senão a mensagem de erro."""
    if not (api_key or "").strip():
        return "Chave Gemini não informada."
    try:
        analisar_com_gemini(
            "Responda apenas: OK",
            api_key=api_key,
            generation_config={"temperature": 0, "maxOutputTokens": 5},
        )
    except GeminiError as e:
        logger.error("Falha ao validar chave Gemini: %s", e)
        return f"Chave Gemini inválida: {e}"
    return None


def extrair_json(texto: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Extrai o primeiro objeto JSON de uma resposta do modelo.

    Aceita bloco cercado (```json ... ```) ou o objeto solto no meio do texto.
    """
    if not texto:
        return None

    m = _RE_BLOCO_JSON.search(texto)
    candidato = m.group(1) if m else None
    if candidato is None:
        inicio = texto.find("{")
        fim = texto.rfind("}")
        if inicio == -1 or fim <= inicio:
            return None
        candidato = texto[inicio:fim + 1]

    try:
        data = json.loads(candidato)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
