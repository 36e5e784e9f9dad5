# marcas.py
"""Utilitários de marcas de pneu: fuzzy matching e posicionamento de preço."""

import csv
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from rapidfuzz import fuzz, process, utils as fuzz_utils

from mercado_pneus.config import OUTPUT_DIR

logger = logging.getLogger(__name__)

PREMIUM = "Premium"
MEDIO = "Médio"
ECONOMICO = "Econômico"
NAO_CLASSIFICADO = "Não classificado"

# Marcas conhecidas no mercado brasileiro e faixa de preço usual
MARCAS_CONHECIDAS: Dict[str, str] = {
    "michelin": PREMIUM,
    "pirelli": PREMIUM,
    "continental": PREMIUM,
    "bridgestone": PREMIUM,
    "goodyear": PREMIUM,
    "firestone": MEDIO,
    "dunlop": MEDIO,
    "hankook": MEDIO,
    "kumho": MEDIO,
    "yokohama": MEDIO,
    "bfgoodrich": MEDIO,
    "general tire": MEDIO,
    "xbri": ECONOMICO,
    "goodride": ECONOMICO,
    "westlake": ECONOMICO,
    "remold": ECONOMICO,
    "aptany": ECONOMICO,
    "linglong": ECONOMICO,
    "sunset": ECONOMICO,
    "speedmax": ECONOMICO,
}

LIMIAR_FUZZY = 88.0

# Texto digitado e marca canônica precisam ter tamanhos parecidos
PROPORCAO_MINIMA_TAMANHO = 0.75

MARCAS_NOVAS_CSV = OUTPUT_DIR / "referenciais" / "marcas_novas_encontradas.csv"

# Cache em memória para evitar registrar várias vezes a mesma marca na mesma execução
_MARCAS_NOVAS_SESSAO: set = set()


def registrar_marca_nova(raw: Optional[str], caminho: Optional[Path] = None) -> None:
    """Registra marcas não reconhecidas para futura revisão manual."""
    marca_limpa = (raw or "").strip()
    if not marca_limpa:
        return

    chave = marca_limpa.lower()
    if chave in _MARCAS_NOVAS_SESSAO:
        return
    _MARCAS_NOVAS_SESSAO.add(chave)

    caminho = Path(caminho or MARCAS_NOVAS_CSV)
    caminho.parent.mkdir(parents=True, exist_ok=True)

    escrever_header = not caminho.exists()
    with caminho.open("a", encoding="utf-8-sig", newline="") as f:
        writer = csv.writer(f, delimiter=";")
        if escrever_header:
            writer.writerow(["marca_raw"])
        writer.writerow([marca_limpa])
    logger.info("Marca não reconhecida registrada: %s", marca_limpa)


def fuzzy_melhor_marca(
    candidato: Optional[str],
    lista_canonicas: Iterable[str],
    threshold: float = LIMIAR_FUZZY,
) -> Optional[str]:
    """Retorna a melhor marca canônica via fuzzy matching, se score >= threshold."""
    candidato_norm = (candidato or "").strip()
    if not candidato_norm:
        return None

    choices = [c for c in lista_canonicas if (c or "").strip()]
    if not choices:
        return None

    resultado: Optional[Tuple[str, float, int]] = process.extractOne(
        candidato_norm,
        choices,
        scorer=fuzz.WRatio,
        processor=fuzz_utils.default_process,
    )
    if not resultado:
        return None

    melhor_marca, score, _ = resultado
    if score >= threshold:
        return melhor_marca
    return None


def _tamanhos_compativeis(digitado: str, canonica: str) -> bool:
    """WRatio casa trechos parciais ("good" -> "goodyear"); só aceitamos erro de digitação."""
    menor, maior = sorted((len(digitado), len(canonica)))
    return menor >= PROPORCAO_MINIMA_TAMANHO * maior


def normalizar_marca(nome: Optional[str], registrar: bool = True) -> str:
    """
    Padroniza o nome digitado pelo usuário:

    1) minúsculas e espaços colapsados;
    2) se casar (fuzzy) com uma marca conhecida, usa a grafia canônica
       (ex.: "Pireli" -> "pirelli");
    3) senão mantém o texto limpo e registra como marca nova.
    """
    limpo = " ".join((nome or "").lower().split())
    if not limpo:
        return ""

    if limpo in MARCAS_CONHECIDAS:
        return limpo

    canonica = fuzzy_melhor_marca(limpo, MARCAS_CONHECIDAS.keys())
    if canonica and _tamanhos_compativeis(limpo, canonica):
        return canonica

    if registrar:
        registrar_marca_nova(limpo)
    return limpo


def posicionamento_preco(marca: str) -> str:
    return MARCAS_CONHECIDAS.get((marca or "").strip().lower(), NAO_CLASSIFICADO)


def palavras_da_marca(marca: str) -> List[str]:
    return [f"pneu {marca}", f"{marca} pneu", f"pneu {marca} preço"]


def adicionar_marca(marcas: List[str], nome: Optional[str]) -> List[str]:
    """Nova lista com a marca normalizada no fim; ignora vazio e duplicadas."""
    marca = normalizar_marca(nome)
    if not marca or marca in marcas:
        return list(marcas)
    return list(marcas) + [marca]
