import json
import os
import stat

import pytest

from mercado_pneus import credenciais
from mercado_pneus.credenciais import (
    CredenciaisError,
    carregar_credenciais,
    esta_configurado,
    mascarar_chave,
    salvar_credenciais,
)


@pytest.fixture
def ambiente_vazio(monkeypatch):
    monkeypatch.setattr(credenciais, "SERPAPI_API_KEY", None)
    monkeypatch.setattr(credenciais, "SEARCHAPI_API_KEY", None)
    monkeypatch.setattr(credenciais, "GEMINI_API_KEY", None)
    monkeypatch.setattr(credenciais, "SERP_PROVIDER", "serpapi")


def test_salvar_usa_chaves_fixas(tmp_path, ambiente_vazio):
    caminho = salvar_credenciais(" serp-123 ", "gem-456", tmp_path / "sub" / "cred.json")

    with caminho.open(encoding="utf-8") as f:
        assert json.load(f) == {"serpapi_key": "serp-123", "gemini_key": "gem-456"}
    assert carregar_credenciais(caminho) == {"serpapi": "serp-123", "gemini": "gem-456"}


@pytest.mark.skipif(os.name == "nt", reason="permissões POSIX")
def test_arquivo_so_legivel_pelo_dono(tmp_path, ambiente_vazio):
    caminho = salvar_credenciais("serp", "gem", tmp_path / "cred.json")
    assert stat.S_IMODE(caminho.stat().st_mode) == 0o600


def test_sem_arquivo_usa_ambiente(tmp_path, monkeypatch, ambiente_vazio):
    monkeypatch.setattr(credenciais, "SERPAPI_API_KEY", "env-serp")
    chaves = carregar_credenciais(tmp_path / "nao_existe.json")
    assert chaves == {"serpapi": "env-serp", "gemini": ""}


def test_ambiente_searchapi(tmp_path, monkeypatch, ambiente_vazio):
    monkeypatch.setattr(credenciais, "SERP_PROVIDER", "searchapi")
    monkeypatch.setattr(credenciais, "SEARCHAPI_API_KEY", "env-search")
    assert carregar_credenciais(tmp_path / "x.json")["serpapi"] == "env-search"


def test_campo_vazio_cai_no_ambiente(tmp_path, monkeypatch, ambiente_vazio):
    monkeypatch.setattr(credenciais, "GEMINI_API_KEY", "env-gem")
    caminho = salvar_credenciais("serp", "", tmp_path / "cred.json")
    assert carregar_credenciais(caminho)["gemini"] == "env-gem"


def test_arquivo_corrompido(tmp_path, ambiente_vazio):
    caminho = tmp_path / "cred.json"
    caminho.write_text("{nao é json", encoding="utf-8")
    with pytest.raises(CredenciaisError):
        carregar_credenciais(caminho)


def test_arquivo_nao_objeto(tmp_path, ambiente_vazio):
    caminho = tmp_path / "cred.json"
    caminho.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(CredenciaisError, match="Formato inesperado"):
        carregar_credenciais(caminho)


def test_esta_configurado():
    assert esta_configurado({"serpapi": "a", "gemini": "b"})
    assert not esta_configurado({"serpapi": "a", "gemini": "  "})
    assert not esta_configurado({})


def test_mascarar_chave():
    assert mascarar_chave("abcdef1234567890") == "abcdef…7890"
    assert mascarar_chave("curta") == "****"
    assert mascarar_chave(None) == ""
