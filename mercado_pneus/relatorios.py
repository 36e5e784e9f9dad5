# relatorios.py
"""Geração de relatórios (XLSX + texto da IA) e listagem dos já gerados."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from openpyxl.utils import get_column_letter

from mercado_pneus.config import MARCAS_PADRAO, OUTPUT_DIR
from mercado_pneus.metricas import ALTA, adicionar_scores, registros_para_dataframe

logger = logging.getLogger(__name__)

MODELOS_RELATORIO: List[Dict[str, str]] = [
    {
        "id": "semanal",
        "titulo": "Relatório Semanal",
        "descricao": "Análise semanal das tendências e oportunidades",
        "estimado": "2-3 min",
    },
    {
        "id": "concorrentes",
        "titulo": "Análise de Concorrentes",
        "descricao": "Comparação detalhada com principais concorrentes",
        "estimado": "5-7 min",
    },
    {
        "id": "palavras_chave",
        "titulo": "Oportunidades de Keywords",
        "descricao": "Lista de palavras-chave com potencial",
        "estimado": "3-4 min",
    },
    {
        "id": "insights_ia",
        "titulo": "Insights de IA",
        "descricao": "Análise profunda com recomendações personalizadas",
        "estimado": "4-6 min",
    },
]

_RE_ITEM_NUMERADO = re.compile(r"^\s*\d+[.)]\s+\S", re.MULTILINE)


def slugify(texto: str) -> str:
    """Gera um identificador seguro para nome de arquivo."""
    texto = (texto or "").strip().lower()
    texto = re.sub(r"\s+", "_", texto)
    texto = re.sub(r"[^a-z0-9_\-]+", "", texto)
    return texto[:80] or "relatorio"


def exportar_csv(df: pd.DataFrame, caminho_csv: Path) -> Path:
    caminho_csv.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(caminho_csv, index=False, encoding="utf-8-sig")
    return caminho_csv


def exportar_xlsx_ptbr(df: pd.DataFrame, caminho_xlsx: Path, sheet_name: str = "dados") -> Path:
    """
    Exporta o DataFrame para XLSX aplicando formatação numérica amigável ao padrão brasileiro
    (a exibição final depende das configurações regionais do Excel/SO, mas o arquivo sai com
    number_format apropriado para valores numéricos).
    """
    caminho_xlsx.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(caminho_xlsx, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]

        headers = [cell.value for cell in ws[1]]
        header_to_col = {h: idx + 1 for idx, h in enumerate(headers) if h}

        fmt_int = "#,##0"
        fmt_1 = "#,##0.0"
        fmt_2 = "#,##0.00"

        cols_int = ["total_resultados", "qtd_anuncios", "qtd_organicos", "volume", "volume_total",
                    "competicao", "roi_potencial", "forca_marca"]
        cols_1 = ["market_share", "competicao_media"]
        cols_2 = ["razao_volume_competicao", "razao", "share_volume", "indice_competicao"]

        for cols, fmt in ((cols_int, fmt_int), (cols_1, fmt_1), (cols_2, fmt_2)):
            for col in cols:
                if col in header_to_col:
                    c = header_to_col[col]
                    for r in range(2, ws.max_row + 1):
                        ws.cell(row=r, column=c).number_format = fmt

        # Largura simples de colunas
        for idx, h in enumerate(headers, start=1):
            letter = get_column_letter(idx)
            base = 18
            if isinstance(h, str):
                if len(h) <= 8:
                    base = 14
                elif len(h) >= 20:
                    base = 32
            ws.column_dimensions[letter].width = base

    return caminho_xlsx


def contar_insights(texto: Optional[str]) -> int:
    """Itens numerados ("1. ...", "2) ...") no texto da IA."""
    return len(_RE_ITEM_NUMERADO.findall(texto or ""))


def _modelo(modelo_id: str) -> Dict[str, str]:
    for m in MODELOS_RELATORIO:
        if m["id"] == modelo_id:
            return m
    ids = ", ".join(m["id"] for m in MODELOS_RELATORIO)
    raise ValueError(f"Modelo de relatório desconhecido: '{modelo_id}'. Use um de: {ids}.")


def _executar_modelo(servico, modelo_id: str) -> Tuple[pd.DataFrame, str, int]:
    """Roda a análise do modelo e devolve (tabela, texto da IA, nº de oportunidades)."""
    if modelo_id == "semanal":
        res = servico.analise_mercado()
        registros = res["dados_palavras"]
        df = adicionar_scores(registros_para_dataframe(registros))
        return df, res["analise_ia"], sum(1 for r in registros if r.get("nivel_oportunidade") == ALTA)

    if modelo_id == "concorrentes":
        res = servico.comparar_marcas(MARCAS_PADRAO)
        df = pd.DataFrame(
            [{k: v for k, v in m.items() if k != "palavras"} for m in res["marcas"]]
        )
        oportunidades = sum(
            1 for m in res["marcas"] for r in m["palavras"] if r.get("nivel_oportunidade") == ALTA
        )
        return df, res["analise_ia"], oportunidades

    if modelo_id == "palavras_chave":
        res = servico.detectar_oportunidades()
        df = pd.DataFrame(res["todas"]).drop(columns=["x", "y", "cor"], errors="ignore")
        return df, res["analise_ia"], len(res["top"])

    # insights_ia
    res = servico.analisar_comportamento_mercado()
    registros = res["insights"]
    df = adicionar_scores(registros_para_dataframe(registros))
    return df, res["analise_ia"], res["resumo"]["alta_oportunidade"]


def gerar_relatorio(
    servico,
    modelo_id: str,
    output_dir: Optional[Path] = None,
    agora: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Gera o relatório do modelo escolhido em:

        <OUTPUT_DIR>/relatorios/<AAAA-MM-DD>/<modelo>_<timestamp>.xlsx
        <OUTPUT_DIR>/relatorios/<AAAA-MM-DD>/<modelo>_<timestamp>.md
        <OUTPUT_DIR>/relatorios/<AAAA-MM-DD>/<modelo>_<timestamp>.json  (metadados)
    """
    modelo = _modelo(modelo_id)
    agora = agora or datetime.now()
    logger.info("Gerando relatório: %s", modelo_id)

    df, analise_ia, n_oportunidades = _executar_modelo(servico, modelo_id)

    pasta = Path(output_dir or OUTPUT_DIR) / "relatorios" / agora.strftime("%Y-%m-%d")
    base = f"{slugify(modelo_id)}_{agora.strftime('%Y%m%d_%H%M%S')}"

    caminho_xlsx = exportar_xlsx_ptbr(df, pasta / f"{base}.xlsx")

    caminho_md = pasta / f"{base}.md"
    caminho_md.write_text(
        f"# {modelo['titulo']}\n\n"
        f"Gerado em {agora.strftime('%d/%m/%Y %H:%M')}\n\n"
        f"{analise_ia or ''}\n",
        encoding="utf-8",
    )

    meta = {
        "id": base,
        "titulo": modelo["titulo"],
        "data": agora.isoformat(timespec="seconds"),
        "tipo": modelo_id,
        "status": "concluido",
        "insights": contar_insights(analise_ia),
        "oportunidades": n_oportunidades,
        "arquivo_xlsx": str(caminho_xlsx),
        "arquivo_md": str(caminho_md),
    }
    with (pasta / f"{base}.json").open("w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)

    return meta


def listar_relatorios(output_dir: Optional[Path] = None, limite: Optional[int] = None) -> List[Dict[str, Any]]:
    """Relatórios já gerados, do mais recente para o mais antigo."""
    raiz = Path(output_dir or OUTPUT_DIR) / "relatorios"
    if not raiz.exists():
        return []

    relatorios: List[Dict[str, Any]] = []
    for caminho in raiz.glob("*/*.json"):
        try:
            with caminho.open("r", encoding="utf-8") as f:
                meta = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Metadados de relatório ignorados (%s): %s", caminho, e)
            continue
        if isinstance(meta, dict) and meta.get("data"):
            relatorios.append(meta)

    relatorios.sort(key=lambda m: m["data"], reverse=True)
    return relatorios[:limite] if limite else relatorios
