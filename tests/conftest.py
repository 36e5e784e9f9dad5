import random

import pytest
import requests

from mercado_pneus import gemini_client, marcas, servico as servico_mod
from mercado_pneus.servico import ServicoMercado


class FakeResponse:
    def __init__(self, json_data=None, status_code=200, json_error=False):
        self._json = json_data
        self.status_code = status_code
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        if self._json_error:
            raise ValueError("No JSON object could be decoded")
        return self._json


def serp_json(total=1_000_000, anuncios=2, organicos=5, relacionadas=None, titulo="Pneu Aro 13"):
    return {
        "search_metadata": {"status": "Success"},
        "search_parameters": {"q": "x"},
        "search_information": {"total_results": total},
        "ads": [
            {"position": i + 1, "title": f"Anúncio {i + 1}", "link": f"https://loja{i}.com.br",
             "displayed_link": f"loja{i}.com.br", "snippet": "oferta"}
            for i in range(anuncios)
        ],
        "organic_results": [
            {"position": i + 1, "title": f"{titulo} {i + 1}", "link": f"https://site{i}.com.br",
             "snippet": "texto"}
            for i in range(organicos)
        ],
        "related_searches": [{"query": q} for q in (relacionadas or ["pneu barato", "pneu promoção"])],
    }


@pytest.fixture(autouse=True)
def marcas_novas_tmp(tmp_path, monkeypatch):
    """Nunca grava o CSV de marcas novas dentro do pacote."""
    monkeypatch.setattr(marcas, "MARCAS_NOVAS_CSV", tmp_path / "marcas_novas.csv")
    marcas._MARCAS_NOVAS_SESSAO.clear()


class FakeSerp:
    """Substitui servico.buscar_serp: resposta por palavra-chave, ou exceção."""

    def __init__(self, respostas=None, padrao=None):
        self.respostas = respostas or {}
        self.padrao = padrao if padrao is not None else serp_json()
        self.chamadas = []

    def __call__(self, q, api_key=None, provider=None):
        self.chamadas.append(q)
        resposta = self.respostas.get(q, self.padrao)
        if isinstance(resposta, Exception):
            raise resposta
        return resposta


class FakeGemini:
    def __init__(self, texto="1. Insight\n2. Outro insight", erro=None):
        self.texto = texto
        self.erro = erro
        self.prompts = []

    def __call__(self, prompt, api_key=None):
        self.prompts.append(prompt)
        if self.erro:
            raise self.erro
        return self.texto


@pytest.fixture
def fake_serp(monkeypatch):
    fake = FakeSerp()
    monkeypatch.setattr(servico_mod, "buscar_serp", fake)
    return fake


@pytest.fixture
def fake_gemini(monkeypatch):
    fake = FakeGemini()
    monkeypatch.setattr(servico_mod, "analisar_com_gemini", fake)
    return fake


@pytest.fixture
def pausas():
    return []


@pytest.fixture
def servico(fake_serp, fake_gemini, pausas):
    return ServicoMercado(
        "serp-key",
        "gemini-key",
        pausa=1.0,
        pausa_marcas=1.0,
        rng=random.Random(42),
        sleep=pausas.append,
    )


@pytest.fixture
def sem_chaves_ambiente(monkeypatch):
    from mercado_pneus import serp_client

    monkeypatch.setattr(serp_client, "SERPAPI_API_KEY", None)
    monkeypatch.setattr(serp_client, "SEARCHAPI_API_KEY", None)
    monkeypatch.setattr(gemini_client, "GEMINI_API_KEY", None)
