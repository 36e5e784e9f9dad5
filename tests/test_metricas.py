import random

import pandas as pd
import pytest

from mercado_pneus.metricas import (
    ALTA,
    BAIXA,
    CATEGORIA_PADRAO,
    COR_AMARELO,
    COR_VERDE,
    COR_VERMELHO,
    CRESCENDO,
    DECLINANDO,
    ESTAVEL,
    MEDIA,
    COLUNAS_TABELA,
    adicionar_scores,
    calcular_roi_potencial,
    categoria_mais_frequente,
    classificar_categoria,
    cor_oportunidade,
    enriquecer_registro,
    indice_competicao,
    nivel_competicao,
    nivel_oportunidade,
    razao_volume_competicao,
    registros_para_dataframe,
    resumir,
    rotulo_indice_competicao,
    simular_crescimento,
    simular_tendencia,
)
from mercado_pneus.processador_resultados import STATUS_ERRO, STATUS_SEM_RESULTADOS


# ── Competição / oportunidade ─────────────────────────────────────────────────

@pytest.mark.parametrize("anuncios,esperado", [(0, BAIXA), (1, BAIXA), (2, MEDIA), (3, MEDIA), (4, ALTA), (9, ALTA)])
def test_nivel_competicao(anuncios, esperado):
    assert nivel_competicao(anuncios) == esperado


def test_razao_sem_anuncios_divide_por_um():
    assert razao_volume_competicao(300_000, 0) == 300_000
    assert razao_volume_competicao(300_000, 3) == pytest.approx(100_000)


def test_nivel_oportunidade():
    assert nivel_oportunidade(1_000_000, 2) == ALTA       # 500 mil por anúncio
    assert nivel_oportunidade(1_000_000, 4) == MEDIA      # 250 mil
    assert nivel_oportunidade(100_000, 0) == MEDIA
    assert nivel_oportunidade(50_000, 0) == BAIXA


def test_oportunidade_baixa_quando_busca_falhou():
    assert nivel_oportunidade(10_000_000, 0, STATUS_ERRO) == BAIXA
    assert nivel_oportunidade(10_000_000, 0, STATUS_SEM_RESULTADOS) == BAIXA


def test_indice_competicao_limitado():
    assert indice_competicao(0) == 0.0
    assert indice_competicao(2) == pytest.approx(0.25)
    assert indice_competicao(20) == 1.0


def test_rotulo_indice():
    assert rotulo_indice_competicao(0.25) == BAIXA
    assert rotulo_indice_competicao(0.5) == MEDIA
    assert rotulo_indice_competicao(0.7) == ALTA


# ── ROI / categoria ───────────────────────────────────────────────────────────

def test_roi_potencial():
    assert calcular_roi_potencial(5_000, 20_000) == 7
    assert calcular_roi_potencial(100_000, 1_000_000) == 75  # ambos no teto


def test_cor_oportunidade():
    assert cor_oportunidade(40) == COR_VERDE
    assert cor_oportunidade(39) == COR_AMARELO
    assert cor_oportunidade(25) == COR_AMARELO
    assert cor_oportunidade(24) == COR_VERMELHO


def test_classificar_categoria():
    assert classificar_categoria("pneu ecológico") == "Sustentabilidade"
    assert classificar_categoria("pneu run flat") == "Performance"
    assert classificar_categoria("pneu off road") == "Aventura"
    assert classificar_categoria("pneu silencioso") == "Conforto"
    assert classificar_categoria("pneu inteligente") == "Tecnologia"
    assert classificar_categoria("pneu agrícola") == "Utilitário"
    assert classificar_categoria("pneu aro 13") == CATEGORIA_PADRAO


def test_categoria_mais_frequente():
    assert categoria_mais_frequente([]) is None
    assert categoria_mais_frequente(["A", "B", "B"]) == "B"
    assert categoria_mais_frequente(["A", "B"]) == "A"


# ── Tendência simulada ────────────────────────────────────────────────────────

def test_tendencia_simulada_valores():
    rng = random.Random(1)
    vistos = {simular_tendencia(rng) for _ in range(50)}
    assert vistos <= {CRESCENDO, ESTAVEL, DECLINANDO}


def test_crescimento_simulado_faixa():
    rng = random.Random(7)
    for _ in range(200):
        assert -14 <= simular_crescimento(rng) <= 29


def test_enriquecer_registro_marca_tendencia_simulada():
    registro = {"palavra_chave": "pneu", "total_resultados": 1_000_000, "qtd_anuncios": 4, "status": "ok"}
    r = enriquecer_registro(registro, random.Random(0))

    assert r["nivel_competicao"] == ALTA
    assert r["nivel_oportunidade"] == MEDIA
    assert r["razao_volume_competicao"] == pytest.approx(250_000)
    assert r["tendencia_simulada"] is True
    assert "nivel_competicao" not in registro


# ── Resumo e tabela ───────────────────────────────────────────────────────────

def test_resumir_vazio():
    r = resumir([])
    assert r["total_palavras"] == 0
    assert r["top_palavras"] == []


def test_resumir():
    registros = [
        {"palavra_chave": f"p{i}", "total_resultados": i * 100, "qtd_anuncios": i, "status": "ok"}
        for i in range(1, 7)
    ]
    registros.append({"palavra_chave": "falhou", "total_resultados": 0, "qtd_anuncios": 0, "status": STATUS_ERRO})
    r = resumir(registros)

    assert r["total_palavras"] == 7
    assert r["total_volume"] == 2100
    assert r["competicao_media"] == pytest.approx(3.0)
    assert [t["palavra_chave"] for t in r["top_palavras"]] == ["p6", "p5", "p4", "p3", "p2"]
    assert r["erros"] == 1


def test_registros_para_dataframe():
    df = registros_para_dataframe([
        {"palavra_chave": "pneu", "total_resultados": 10, "qtd_anuncios": 1,
         "buscas_relacionadas": ["a", "b"], "extra": 1},
    ])
    assert list(df.columns) == COLUNAS_TABELA
    assert df.loc[0, "buscas_relacionadas"] == "a, b"


def test_registros_para_dataframe_vazio():
    df = registros_para_dataframe([])
    assert df.empty
    assert list(df.columns) == COLUNAS_TABELA


def test_adicionar_scores():
    df = pd.DataFrame({
        "palavra_chave": ["pneu ecológico", "pneu aro 13"],
        "total_resultados": [300_000, 100_000],
        "qtd_anuncios": [0, 16],
    })
    out = adicionar_scores(df)

    assert out["share_volume"].sum() == pytest.approx(1.0)
    assert out.loc[0, "share_volume"] == pytest.approx(0.75)
    assert out.loc[1, "indice_competicao"] == 1.0
    assert out.loc[0, "roi_potencial"] == 75   # 50 (teto) + 25 (teto)
    assert out.loc[0, "categoria"] == "Sustentabilidade"
    assert "share_volume" not in df.columns


def test_adicionar_scores_volume_zero():
    df = pd.DataFrame({"palavra_chave": ["a"], "total_resultados": [0], "qtd_anuncios": [0]})
    assert adicionar_scores(df).loc[0, "share_volume"] == 0.0
