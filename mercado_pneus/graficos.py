"""Gráficos Altair e formatadores pt-BR usados pelo dashboard."""

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from mercado_pneus.metricas import COR_AMARELO, COR_VERDE, COR_VERMELHO


def formatar_numero(valor: Any) -> str:
    try:
        return f"{int(valor):,}".replace(",", ".")
    except (TypeError, ValueError):
        return "-"


def formatar_decimal(valor: Any, casas: int = 1) -> str:
    try:
        return f"{float(valor):,.{casas}f}".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"


def formatar_percentual(valor: Any, casas: int = 1) -> str:
    txt = formatar_decimal(valor, casas)
    return f"{txt}%" if txt != "-" else txt


def styled_chart(chart: alt.Chart) -> alt.Chart:
    """Aplica estilo visual consistente (fundo claro, texto escuro)."""
    return (
        chart.configure_view(
            strokeWidth=0,
            fill="#ffffff",
        )
        .configure_axis(
            labelColor="#111827",
            titleColor="#111827",
            labelFontSize=12,
            titleFontSize=13,
            labelFontWeight="bold",
            titleFontWeight="bold",
            grid=True,
            gridColor="#e5e7eb",
        )
        .configure_title(
            color="#111827",
            fontSize=16,
            fontWeight="bold",
            anchor="start",
        )
        .configure_legend(
            labelColor="#111827",
            titleColor="#111827",
            labelFontSize=11,
            titleFontSize=12,
            labelFontWeight="bold",
            titleFontWeight="bold",
        )
    )


def grafico_volume_competicao(dados: List[Dict[str, Any]]) -> alt.Chart:
    """Barras de volume (milhares) por palavra-chave, com anúncios no tooltip."""
    df = pd.DataFrame(dados, columns=["nome", "volume", "competicao", "cor"])
    chart = (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=alt.X("nome:N", sort="-y", title="Palavra-chave"),
            y=alt.Y("volume:Q", title="Resultados (milhares)"),
            color=alt.Color("cor:N", scale=None, legend=None),
            tooltip=[
                alt.Tooltip("nome:N", title="Palavra-chave"),
                alt.Tooltip("volume:Q", title="Volume (mil)", format=",.0f"),
                alt.Tooltip("competicao:Q", title="Anúncios"),
            ],
        )
        .properties(height=320)
    )
    return styled_chart(chart)


def grafico_distribuicao(categorias: List[Dict[str, Any]]) -> alt.Chart:
    """Rosca com a participação de cada termo no volume."""
    df = pd.DataFrame(categorias, columns=["nome", "valor"])
    chart = (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("valor:Q"),
            color=alt.Color("nome:N", title="Palavra-chave"),
            tooltip=[
                alt.Tooltip("nome:N", title="Palavra-chave"),
                alt.Tooltip("valor:Q", title="% do volume", format=".1f"),
            ],
        )
        .properties(height=320)
    )
    return styled_chart(chart)


def grafico_timeline(timeline: List[Dict[str, Any]]) -> alt.Chart:
    """Área de volume por segmento + linha de crescimento (simulado)."""
    df = pd.DataFrame(timeline, columns=["mes", "volume", "crescimento", "categoria"])
    base = alt.Chart(df).encode(x=alt.X("categoria:N", sort=None, title="Segmento"))

    area = base.mark_area(opacity=0.35, color="#3B82F6").encode(
        y=alt.Y("volume:Q", title="Resultados (milhares)"),
        tooltip=[
            alt.Tooltip("categoria:N", title="Segmento"),
            alt.Tooltip("volume:Q", title="Volume (mil)", format=",.0f"),
            alt.Tooltip("crescimento:Q", title="Crescimento % (simulado)"),
        ],
    )
    linha = base.mark_line(point=True, color="#10B981").encode(
        y=alt.Y("crescimento:Q", title="Crescimento % (simulado)"),
    )
    chart = alt.layer(area, linha).resolve_scale(y="independent").properties(height=320)
    return styled_chart(chart)


def mapa_oportunidades(oportunidades: List[Dict[str, Any]]) -> alt.Chart:
    """Dispersão volume x potencial (volume/competição), colorida pelo ROI."""
    df = pd.DataFrame(
        oportunidades,
        columns=["palavra_chave", "x", "y", "roi_potencial", "categoria", "volume", "competicao"],
    )
    escala = alt.Scale(
        domain=["Alto ROI (40%+)", "Médio ROI (25-40%)", "Baixo ROI (<25%)"],
        range=[COR_VERDE, COR_AMARELO, COR_VERMELHO],
    )
    df["faixa_roi"] = df["roi_potencial"].apply(
        lambda roi: "Alto ROI (40%+)" if roi >= 40 else ("Médio ROI (25-40%)" if roi >= 25 else "Baixo ROI (<25%)")
    )
    chart = (
        alt.Chart(df)
        .mark_circle(size=160, opacity=0.85)
        .encode(
            x=alt.X("x:Q", title="Volume de Buscas (milhares)"),
            y=alt.Y("y:Q", title="Potencial (Volume/Competição)"),
            color=alt.Color("faixa_roi:N", scale=escala, title="ROI"),
            tooltip=[
                alt.Tooltip("palavra_chave:N", title="Nicho"),
                alt.Tooltip("volume:Q", title="Volume", format=",.0f"),
                alt.Tooltip("competicao:Q", title="Anúncios"),
                alt.Tooltip("roi_potencial:Q", title="ROI potencial (%)"),
                alt.Tooltip("categoria:N", title="Categoria"),
            ],
        )
        .properties(height=400)
    )
    return styled_chart(chart)


def grafico_marcas(marcas: List[Dict[str, Any]], metrica: str = "volume_total", titulo: Optional[str] = None) -> alt.Chart:
    df = pd.DataFrame(marcas, columns=["nome", "volume_total", "market_share", "competicao_media", "forca_marca"])
    chart = (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4, color="#3B82F6")
        .encode(
            x=alt.X("nome:N", sort="-y", title="Marca"),
            y=alt.Y(f"{metrica}:Q", title=titulo or metrica),
            tooltip=[
                alt.Tooltip("nome:N", title="Marca"),
                alt.Tooltip("volume_total:Q", title="Volume", format=",.0f"),
                alt.Tooltip("market_share:Q", title="Market share (%)", format=".1f"),
                alt.Tooltip("forca_marca:Q", title="Força de marca"),
            ],
        )
        .properties(height=320)
    )
    return styled_chart(chart)


def grafico_radar_marcas(radar: List[Dict[str, Any]]) -> alt.Chart:
    """Altair não tem radar; usamos barras agrupadas por dimensão (0-100)."""
    df = pd.DataFrame(radar, columns=["marca", "volume", "competicao", "forca", "share"])
    longo = df.melt(id_vars="marca", var_name="dimensao", value_name="valor")
    chart = (
        alt.Chart(longo)
        .mark_bar()
        .encode(
            x=alt.X("dimensao:N", title=None),
            xOffset="marca:N",
            y=alt.Y("valor:Q", title="Escala 0-100", scale=alt.Scale(domain=[0, 100])),
            color=alt.Color("marca:N", title="Marca"),
            tooltip=["marca:N", "dimensao:N", alt.Tooltip("valor:Q", format=".1f")],
        )
        .properties(height=320)
    )
    return styled_chart(chart)
