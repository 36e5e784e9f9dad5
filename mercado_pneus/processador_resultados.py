# processador_resultados.py

from typing import Any, Dict, List, Optional

from mercado_pneus.config import TOP_ITENS_SERP

STATUS_OK = "ok"
STATUS_SEM_RESULTADOS = "sem_resultados"
STATUS_ERRO = "erro"


def _to_int(value: Any) -> int:
    """total_results pode vir como int, float ou texto ("1.230.000")."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    digitos = "".join(ch for ch in str(value) if ch.isdigit())
    return int(digitos) if digitos else 0


def _resumir_anuncio(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "posicao": item.get("position"),
        "titulo": item.get("title"),
        "link": item.get("link"),
        "link_exibido": item.get("displayed_link"),
        "snippet": item.get("snippet") or item.get("description"),
    }


def _resumir_organico(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "posicao": item.get("position"),
        "titulo": item.get("title"),
        "link": item.get("link"),
        "snippet": item.get("snippet"),
    }


def _lista_dicts(data: Dict[str, Any], chave: str) -> List[Dict[str, Any]]:
    bloco = data.get(chave) or []
    return [i for i in bloco if isinstance(i, dict)]


def extrair_metricas_palavra(resposta_json: Optional[Dict[str, Any]], palavra_chave: str) -> Dict[str, Any]:
    """
    Converte o JSON bruto da SERP em um registro por palavra-chave:
    {
        "palavra_chave": "pneu aro 13",
        "total_resultados": 12300000,
        "qtd_anuncios": 4,
        "qtd_organicos": 9,
        "buscas_relacionadas": ["pneu aro 13 barato", ...],   # até 3
        "top_anuncios": [...],                                # até 3
        "top_organicos": [...],                               # até 3
        "titulos_serp": ["...", ...],                         # título + links de cada item
        "status": "ok" | "sem_resultados",
        "erro": None,
    }
    """
    data = resposta_json or {}

    info = data.get("search_information") or {}
    total = _to_int(info.get("total_results") if isinstance(info, dict) else None)

    # SearchAPI às vezes usa "top_ads"/"bottom_ads" em vez de "ads"
    anuncios = _lista_dicts(data, "ads") or (
        _lista_dicts(data, "top_ads") + _lista_dicts(data, "bottom_ads")
    )
    organicos = _lista_dicts(data, "organic_results")

    relacionadas: List[str] = []
    for item in _lista_dicts(data, "related_searches"):
        query = (item.get("query") or "").strip()
        if query and query not in relacionadas:
            relacionadas.append(query)

    # Um texto por item (título + links) para contar menções por anúncio/resultado
    titulos_serp: List[str] = []
    for item in anuncios + organicos:
        partes = [str(item.get(c)) for c in ("title", "link", "displayed_link") if item.get(c)]
        if partes:
            titulos_serp.append(" ".join(partes))

    if total == 0 and not anuncios and not organicos:
        status = STATUS_SEM_RESULTADOS
    else:
        status = STATUS_OK

    return {
        "palavra_chave": palavra_chave,
        "total_resultados": total,
        "qtd_anuncios": len(anuncios),
        "qtd_organicos": len(organicos),
        "buscas_relacionadas": relacionadas[:TOP_ITENS_SERP],
        "top_anuncios": [_resumir_anuncio(a) for a in anuncios[:TOP_ITENS_SERP]],
        "top_organicos": [_resumir_organico(o) for o in organicos[:TOP_ITENS_SERP]],
        "titulos_serp": titulos_serp,
        "status": status,
        "erro": None,
    }


def registro_com_erro(palavra_chave: str, mensagem: str) -> Dict[str, Any]:
    """Registro zerado para uma busca que falhou; o erro fica visível."""
    return {
        "palavra_chave": palavra_chave,
        "total_resultados": 0,
        "qtd_anuncios": 0,
        "qtd_organicos": 0,
        "buscas_relacionadas": [],
        "top_anuncios": [],
        "top_organicos": [],
        "titulos_serp": [],
        "status": STATUS_ERRO,
        "erro": mensagem,
    }


def contar_mencoes(registro: Dict[str, Any], termo: str) -> int:
    """Quantos itens da SERP (anúncios + orgânicos) citam o termo (case-insensitive)."""
    t = (termo or "").strip().lower()
    if not t:
        return 0
    return sum(1 for texto in registro.get("titulos_serp") or [] if t in texto.lower())
