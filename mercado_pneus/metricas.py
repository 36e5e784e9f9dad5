# metricas.py
"""Heurísticas de competição, oportunidade e tendência por palavra-chave.

Todos os limiares são fixos. A tendência NÃO vem de série histórica: é
simulada e sempre marcada com `tendencia_simulada=True` para a interface
deixar isso claro.
"""

import random
from collections import Counter
from typing import Any, Dict, List, Optional

import pandas as pd

from mercado_pneus.processador_resultados import STATUS_ERRO, STATUS_OK

ALTA = "Alta"
MEDIA = "Média"
BAIXA = "Baixa"

CRESCENDO = "Crescendo"
ESTAVEL = "Estável"
DECLINANDO = "Declinando"

# Competição: número de anúncios pagos na SERP
ANUNCIOS_COMPETICAO_ALTA = 4
ANUNCIOS_COMPETICAO_MEDIA = 2

# Oportunidade: resultados orgânicos por anúncio
RAZAO_OPORTUNIDADE_ALTA = 500_000
RAZAO_OPORTUNIDADE_MEDIA = 100_000

# Índice de competição (0..1) de um termo isolado
ANUNCIOS_INDICE_MAX = 8

ROI_ALTO = 40
ROI_MEDIO = 25

COR_VERDE = "#10B981"
COR_AMARELO = "#F59E0B"
COR_VERMELHO = "#EF4444"

MESES = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun"]

# Ordem importa: a primeira regra que casar define a categoria
_CATEGORIAS = [
    (("ecológico", "reciclado"), "Sustentabilidade"),
    (("performance", "run flat"), "Performance"),
    (("off road", "trail"), "Aventura"),
    (("silencioso", "winter"), "Conforto"),
    (("inteligente", "conectado"), "Tecnologia"),
    (("caminhonete", "agrícola"), "Utilitário"),
]
CATEGORIA_PADRAO = "Nicho Especial"


def nivel_competicao(qtd_anuncios: int) -> str:
    if qtd_anuncios >= ANUNCIOS_COMPETICAO_ALTA:
        return ALTA
    if qtd_anuncios >= ANUNCIOS_COMPETICAO_MEDIA:
        return MEDIA
    return BAIXA


def razao_volume_competicao(total_resultados: int, qtd_anuncios: int) -> float:
    return total_resultados / (qtd_anuncios or 1)


def nivel_oportunidade(total_resultados: int, qtd_anuncios: int, status: str = STATUS_OK) -> str:
    """Muito volume orgânico e poucos anúncios = oportunidade."""
    if status != STATUS_OK:
        return BAIXA
    razao = razao_volume_competicao(total_resultados, qtd_anuncios)
    if razao >= RAZAO_OPORTUNIDADE_ALTA:
        return ALTA
    if razao >= RAZAO_OPORTUNIDADE_MEDIA:
        return MEDIA
    return BAIXA


def simular_tendencia(rng: random.Random) -> str:
    return rng.choice([CRESCENDO, ESTAVEL, DECLINANDO])


def simular_crescimento(rng: random.Random) -> int:
    """Crescimento % simulado: metade das vezes positivo (0..29), senão negativo (-14..0)."""
    if rng.random() > 0.5:
        return rng.randrange(30)
    return -rng.randrange(15)


def indice_competicao(qtd_anuncios: int) -> float:
    return min(qtd_anuncios / ANUNCIOS_INDICE_MAX, 1.0)


def rotulo_indice_competicao(indice: float) -> str:
    if indice < 0.3:
        return BAIXA
    if indice < 0.7:
        return MEDIA
    return ALTA


def calcular_roi_potencial(razao: float, volume: int) -> int:
    roi_base = min(razao / 1000, 50)
    bonus_volume = min(volume / 10000, 25)
    return round(roi_base + bonus_volume)


def classificar_categoria(palavra_chave: str) -> str:
    p = (palavra_chave or "").lower()
    for termos, categoria in _CATEGORIAS:
        if any(t in p for t in termos):
            return categoria
    return CATEGORIA_PADRAO


def cor_oportunidade(roi: int) -> str:
    if roi >= ROI_ALTO:
        return COR_VERDE
    if roi >= ROI_MEDIO:
        return COR_AMARELO
    return COR_VERMELHO


def categoria_mais_frequente(categorias: List[str]) -> Optional[str]:
    """Empate fica com a categoria que apareceu primeiro."""
    if not categorias:
        return None
    return Counter(categorias).most_common(1)[0][0]


def enriquecer_registro(registro: Dict[str, Any], rng: random.Random) -> Dict[str, Any]:
    """Acrescenta nível de competição, oportunidade e tendência (simulada) ao registro."""
    novo = dict(registro)
    total = int(novo.get("total_resultados") or 0)
    anuncios = int(novo.get("qtd_anuncios") or 0)
    status = novo.get("status") or STATUS_OK

    novo["nivel_competicao"] = nivel_competicao(anuncios)
    novo["nivel_oportunidade"] = nivel_oportunidade(total, anuncios, status)
    novo["razao_volume_competicao"] = razao_volume_competicao(total, anuncios)
    novo["tendencia"] = simular_tendencia(rng)
    novo["tendencia_simulada"] = True
    return novo


def resumir(registros: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Resumo usado em todas as telas: volume, competição média e top 5."""
    n = len(registros)
    if n == 0:
        return {
            "total_palavras": 0,
            "competicao_media": 0.0,
            "total_volume": 0,
            "top_palavras": [],
            "erros": 0,
        }

    ordenados = sorted(registros, key=lambda r: r.get("total_resultados") or 0, reverse=True)
    return {
        "total_palavras": n,
        "competicao_media": sum(r.get("qtd_anuncios") or 0 for r in registros) / n,
        "total_volume": sum(r.get("total_resultados") or 0 for r in registros),
        "top_palavras": [
            {"palavra_chave": r["palavra_chave"], "volume": r.get("total_resultados") or 0}
            for r in ordenados[:5]
        ],
        "erros": sum(1 for r in registros if r.get("status") == STATUS_ERRO),
    }


COLUNAS_TABELA = [
    "palavra_chave",
    "total_resultados",
    "qtd_anuncios",
    "qtd_organicos",
    "nivel_competicao",
    "nivel_oportunidade",
    "razao_volume_competicao",
    "tendencia",
    "buscas_relacionadas",
    "status",
    "erro",
]


def registros_para_dataframe(registros: List[Dict[str, Any]]) -> pd.DataFrame:
    """Tabela plana (uma linha por palavra-chave) para exibir/exportar."""
    df = pd.DataFrame(registros)
    if df.empty:
        return pd.DataFrame(columns=COLUNAS_TABELA)

    for col in COLUNAS_TABELA:
        if col not in df.columns:
            df[col] = pd.NA

    df = df[COLUNAS_TABELA].copy()
    df["buscas_relacionadas"] = df["buscas_relacionadas"].apply(
        lambda v: ", ".join(v) if isinstance(v, list) else (v or "")
    )
    return df


def adicionar_scores(df: pd.DataFrame) -> pd.DataFrame:
    """
    Acrescenta ao DataFrame de palavras-chave:

    - share_volume: participação de cada termo no volume total (0..1)
    - indice_competicao: anúncios normalizados (0..1)
    - roi_potencial
    - categoria
    """
    df = df.copy()

    df["total_resultados"] = pd.to_numeric(df.get("total_resultados"), errors="coerce").fillna(0)
    df["qtd_anuncios"] = pd.to_numeric(df.get("qtd_anuncios"), errors="coerce").fillna(0)

    total = df["total_resultados"].sum()
    df["share_volume"] = df["total_resultados"] / total if total > 0 else 0.0

    df["indice_competicao"] = (df["qtd_anuncios"] / ANUNCIOS_INDICE_MAX).clip(upper=1.0)

    razao = df["total_resultados"] / df["qtd_anuncios"].where(df["qtd_anuncios"] > 0, 1)
    df["roi_potencial"] = [
        calcular_roi_potencial(r, int(v)) for r, v in zip(razao, df["total_resultados"])
    ]
    df["categoria"] = df["palavra_chave"].apply(classificar_categoria)
    return df
