"""Prompts (em português) enviados ao Gemini em cada tela."""

from typing import Any, Dict, List


def formatar_int(valor: Any) -> str:
    """1234567 -> '1.234.567' (padrão pt-BR)."""
    try:
        return f"{int(valor):,}".replace(",", ".")
    except (TypeError, ValueError):
        return "0"


def _linha_status(r: Dict[str, Any]) -> str:
    if r.get("status") == "erro":
        return "    Observação: dados indisponíveis (falha na coleta)\n"
    if r.get("status") == "sem_resultados":
        return "    Observação: o Google não retornou resultados\n"
    return ""


def prompt_mercado(registros: List[Dict[str, Any]]) -> str:
    blocos = "\n".join(
        f"""
    Palavra-chave: {r['palavra_chave']}
    Total de resultados: {r.get('total_resultados', 0)}
    Número de anúncios: {r.get('qtd_anuncios', 0)}
    Buscas relacionadas: {', '.join(r.get('buscas_relacionadas') or [])}
{_linha_status(r)}"""
        for r in registros
    )
    return f"""
    Analise os seguintes dados do mercado de pneus no Brasil e forneça insights estratégicos:

    {blocos}

    Por favor, forneça:
    1. Análise da competição no mercado
    2. Palavras-chave com maior oportunidade
    3. Tendências observadas
    4. Recomendações estratégicas
    5. Estimativa de volume de mercado

    Responda em português, de forma objetiva e profissional.
    """


def prompt_tendencias(insights: List[Dict[str, Any]]) -> str:
    blocos = "\n".join(
        f"""
    • {i['palavra_chave']}:
      - Resultados: {formatar_int(i.get('total_resultados'))}
      - Anúncios: {i.get('qtd_anuncios', 0)} (competição {i.get('nivel_competicao')})
      - Oportunidade: {i.get('nivel_oportunidade')}
      - Buscas relacionadas: {', '.join(i.get('buscas_relacionadas') or [])}
{_linha_status(i)}"""
        for i in insights
    )
    return f"""
    Analise o comportamento atual do mercado de pneus no Brasil com base nos dados de busca:

    {blocos}

    Forneça:
    1. Tendências emergentes de consumo
    2. Segmentos em crescimento e em declínio
    3. Sazonalidade provável de cada segmento
    4. Recomendações de timing para campanhas

    Observação: não há série histórica; baseie-se no volume e na competição atuais.
    Responda em português, de forma objetiva.
    """


def prompt_marcas(marcas: List[Dict[str, Any]]) -> str:
    blocos = "".join(
        f"""
      • {m['nome'].upper()}:
        - Volume de buscas: {formatar_int(m['volume_total'])}
        - Market Share: {m['market_share']}%
        - Competição média: {m['competicao_media']:.1f}
        - Força de marca: {m['forca_marca']}/100
        - Posicionamento: {m['posicionamento_preco']}
      """
        for m in marcas
    )
    return f"""
      Analise a comparação competitiva entre as marcas de pneu:

      {blocos}

      Forneça insights sobre:
      1. Líder de mercado e principais competidores
      2. Estratégias de posicionamento de cada marca
      3. Oportunidades para cada marca
      4. Recomendações competitivas
      5. Análise de força de marca

      Responda em português, de forma estratégica e objetiva.
      """


def prompt_oportunidades(top: List[Dict[str, Any]], todas: List[Dict[str, Any]]) -> str:
    bloco_top = "".join(
        f"""
      • {o['palavra_chave']}:
        - Volume: {formatar_int(o['volume'])} buscas
        - Competição: {o['competicao']} anúncios
        - Categoria: {o['categoria']}
        - ROI Potencial: {o['roi_potencial']}%
        - Dificuldade: {o['dificuldade']}
      """
        for o in top
    ) or "\n      (nenhuma oportunidade de alto potencial identificada)\n"
    bloco_todas = "".join(
        f"""
      • {o['palavra_chave']}: {formatar_int(o['volume'])} buscas, {o['competicao']} anúncios
      """
        for o in todas
    )
    return f"""
      Analise as seguintes oportunidades de mercado no setor de pneus:

      TOP OPORTUNIDADES IDENTIFICADAS:
      {bloco_top}

      NICHOS ANALISADOS:
      {bloco_todas}

      Forneça insights estratégicos sobre:
      1. Oportunidades com maior potencial de ROI
      2. Nichos emergentes e tendências futuras
      3. Estratégias de entrada para cada oportunidade
      4. Investimento recomendado por nicho
      5. Cronograma de implementação sugerido

      Seja específico e prático nas recomendações.
      """


def prompt_busca_personalizada(registros: List[Dict[str, Any]]) -> str:
    blocos = "\n".join(
        f"""
    Palavra-chave: {r['palavra_chave']}
    Total de resultados: {r.get('total_resultados', 0)}
    Número de anúncios: {r.get('qtd_anuncios', 0)}
    Resultados orgânicos: {r.get('qtd_organicos', 0)}
    Buscas relacionadas: {', '.join(r.get('buscas_relacionadas') or [])}
{_linha_status(r)}"""
        for r in registros
    )
    return f"""
    Analise as palavras-chave escolhidas pelo usuário para o mercado de pneus:

    {blocos}

    Forneça:
    1. Comparação de volume e competição entre os termos
    2. Termos com melhor relação volume/competição
    3. Sugestões de palavras-chave complementares
    4. Recomendações de campanha

    Responda em português, de forma objetiva e profissional.
    """


def prompt_termo(registro: Dict[str, Any]) -> str:
    organicos = "\n".join(
        f"    {o.get('posicao')}. {o.get('titulo')} ({o.get('link')})"
        for o in registro.get("top_organicos") or []
    ) or "    (sem resultados orgânicos)"
    return f"""
    Você é um analista de marketing digital do mercado de pneus no Brasil.
    Analise o termo de busca "{registro['palavra_chave']}" com estes dados do Google:

    - Total de resultados: {formatar_int(registro.get('total_resultados'))}
    - Anúncios pagos: {registro.get('qtd_anuncios', 0)}
    - Resultados orgânicos: {registro.get('qtd_organicos', 0)}
    - Buscas relacionadas: {', '.join(registro.get('buscas_relacionadas') or [])}
    - Top resultados orgânicos:
{organicos}

    Responda SOMENTE com um objeto JSON, em português, no formato:
    {{"resumo": "...", "oportunidades": ["...", "..."], "riscos": ["...", "..."]}}
    """
