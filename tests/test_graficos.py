from mercado_pneus.graficos import (
    formatar_decimal,
    formatar_numero,
    formatar_percentual,
    grafico_distribuicao,
    grafico_marcas,
    grafico_radar_marcas,
    grafico_timeline,
    grafico_volume_competicao,
    mapa_oportunidades,
)


def _linhas(chart):
    datasets = chart.to_dict()["datasets"]
    return list(datasets.values())[0]


# ── Formatação pt-BR ──────────────────────────────────────────────────────────

def test_formatar_numero():
    assert formatar_numero(1234567) == "1.234.567"
    assert formatar_numero(None) == "-"


def test_formatar_decimal():
    assert formatar_decimal(1234.56) == "1.234,6"
    assert formatar_decimal(0.5, 2) == "0,50"
    assert formatar_decimal("abc") == "-"


def test_formatar_percentual():
    assert formatar_percentual(62.5) == "62,5%"
    assert formatar_percentual(None) == "-"


# ── Gráficos ──────────────────────────────────────────────────────────────────

def test_grafico_volume_competicao():
    dados = [
        {"nome": "pneu aro 13", "volume": 1000, "competicao": 2, "cor": "#3B82F6"},
        {"nome": "pneu aro 14", "volume": 800, "competicao": 4, "cor": "#10B981"},
    ]
    assert len(_linhas(grafico_volume_competicao(dados))) == 2


def test_grafico_distribuicao():
    assert len(_linhas(grafico_distribuicao([{"nome": "a", "valor": 60.0}, {"nome": "b", "valor": 40.0}]))) == 2


def test_grafico_timeline():
    timeline = [
        {"mes": "Jan", "volume": 100, "crescimento": 5, "categoria": "pneu aro 13", "simulado": True},
        {"mes": "Fev", "volume": 80, "crescimento": -3, "categoria": "pneu aro 14", "simulado": True},
    ]
    assert len(_linhas(grafico_timeline(timeline))) == 2


def test_mapa_oportunidades_faixas_roi():
    ops = [
        {"palavra_chave": "a", "x": 1, "y": 1, "roi_potencial": 75, "categoria": "c", "volume": 1, "competicao": 0},
        {"palavra_chave": "b", "x": 1, "y": 1, "roi_potencial": 30, "categoria": "c", "volume": 1, "competicao": 0},
        {"palavra_chave": "c", "x": 1, "y": 1, "roi_potencial": 10, "categoria": "c", "volume": 1, "competicao": 0},
    ]
    faixas = [linha["faixa_roi"] for linha in _linhas(mapa_oportunidades(ops))]
    assert faixas == ["Alto ROI (40%+)", "Médio ROI (25-40%)", "Baixo ROI (<25%)"]


def test_graficos_de_marcas():
    marcas = [
        {"nome": "pirelli", "volume_total": 5_000_000, "market_share": 62.5, "competicao_media": 1.3, "forca_marca": 22},
        {"nome": "michelin", "volume_total": 3_000_000, "market_share": 37.5, "competicao_media": 2.0, "forca_marca": 0},
    ]
    radar = [
        {"marca": "pirelli", "volume": 100, "competicao": 13, "forca": 22, "share": 62.5},
        {"marca": "michelin", "volume": 100, "competicao": 20, "forca": 0, "share": 37.5},
    ]
    assert len(_linhas(grafico_marcas(marcas, "market_share", "Market share (%)"))) == 2
    # formato longo: 4 dimensões por marca
    assert len(_linhas(grafico_radar_marcas(radar))) == 8
