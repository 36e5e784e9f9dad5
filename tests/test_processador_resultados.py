from conftest import serp_json

from mercado_pneus.processador_resultados import (
    STATUS_ERRO,
    STATUS_OK,
    STATUS_SEM_RESULTADOS,
    contar_mencoes,
    extrair_metricas_palavra,
    registro_com_erro,
)


# ── Extração ──────────────────────────────────────────────────────────────────

def test_extrai_contagens_da_serp():
    data = serp_json(total=12_300_000, anuncios=4, organicos=9)
    r = extrair_metricas_palavra(data, "pneu aro 13")

    assert r["palavra_chave"] == "pneu aro 13"
    assert r["total_resultados"] == 12_300_000
    assert r["qtd_anuncios"] == 4
    assert r["qtd_organicos"] == 9
    assert r["status"] == STATUS_OK
    assert r["erro"] is None


def test_limita_itens_a_tres():
    data = serp_json(anuncios=5, organicos=8, relacionadas=["a", "b", "c", "d", "e"])
    r = extrair_metricas_palavra(data, "pneu")

    assert r["buscas_relacionadas"] == ["a", "b", "c"]
    assert len(r["top_anuncios"]) == 3
    assert len(r["top_organicos"]) == 3
    assert r["top_anuncios"][0]["posicao"] == 1
    assert r["top_anuncios"][0]["link_exibido"] == "loja0.com.br"


def test_buscas_relacionadas_sem_duplicatas():
    data = serp_json(relacionadas=["pneu barato", "pneu barato", "  ", "pneu usado"])
    r = extrair_metricas_palavra(data, "pneu")
    assert r["buscas_relacionadas"] == ["pneu barato", "pneu usado"]


def test_total_como_texto():
    data = serp_json(total="Aproximadamente 1.230.000 resultados")
    assert extrair_metricas_palavra(data, "pneu")["total_resultados"] == 1_230_000


def test_top_ads_e_bottom_ads():
    data = {
        "search_information": {"total_results": 10},
        "top_ads": [{"title": "A"}, {"title": "B"}],
        "bottom_ads": [{"title": "C"}],
    }
    r = extrair_metricas_palavra(data, "pneu")
    assert r["qtd_anuncios"] == 3


def test_resposta_vazia_sem_resultados():
    r = extrair_metricas_palavra({}, "pneu xyz")
    assert r["status"] == STATUS_SEM_RESULTADOS
    assert r["total_resultados"] == 0
    assert r["qtd_anuncios"] == 0
    assert r["buscas_relacionadas"] == []


def test_resposta_none():
    assert extrair_metricas_palavra(None, "pneu")["status"] == STATUS_SEM_RESULTADOS


def test_um_texto_por_item():
    data = serp_json(anuncios=2, organicos=3)
    r = extrair_metricas_palavra(data, "pneu")
    assert len(r["titulos_serp"]) == 5
    assert "loja0.com.br" in r["titulos_serp"][0]


# ── Erro e menções ────────────────────────────────────────────────────────────

def test_registro_com_erro_zerado():
    r = registro_com_erro("pneu aro 15", "timeout")
    assert r["status"] == STATUS_ERRO
    assert r["erro"] == "timeout"
    assert r["total_resultados"] == 0
    assert r["qtd_anuncios"] == 0
    assert r["top_organicos"] == []


def test_contar_mencoes_case_insensitive():
    registro = {
        "titulos_serp": [
            "Pneu PIRELLI Aro 13 https://loja.com.br",
            "pneus pirelli em oferta https://pirelli.com.br",
            "Michelin Energy https://michelin.com.br",
        ]
    }
    assert contar_mencoes(registro, "Pirelli") == 2
    assert contar_mencoes(registro, "michelin") == 1
    assert contar_mencoes(registro, "goodyear") == 0
    assert contar_mencoes(registro, "  ") == 0
