# main.py

from datetime import datetime
from typing import List

from mercado_pneus.config import OUTPUT_DIR, PALAVRAS_MERCADO, configurar_logging
from mercado_pneus.credenciais import CredenciaisError, carregar_credenciais, esta_configurado
from mercado_pneus.metricas import adicionar_scores, registros_para_dataframe
from mercado_pneus.relatorios import slugify, exportar_csv
from mercado_pneus.servico import ServicoMercado


def ler_palavras(entrada: str) -> List[str]:
    """'pneu aro 13, pneu remold' -> ['pneu aro 13', 'pneu remold']"""
    palavras: List[str] = []
    for parte in (entrada or "").split(","):
        limpa = " ".join(parte.split())
        if limpa and limpa not in palavras:
            palavras.append(limpa)
    return palavras


def main() -> None:
    configurar_logging()
    print("=== TireMarket AI - Pesquisa de Mercado de Pneus (SERP + Gemini) ===")

    try:
        chaves = carregar_credenciais()
    except CredenciaisError as e:
        print(f"Erro ao ler credenciais: {e}")
        return

    if not esta_configurado(chaves):
        print("Chaves não configuradas. Rode o dashboard (streamlit run mercado_pneus/dashboard.py) "
              "ou defina SERPAPI_API_KEY e GEMINI_API_KEY no .env.")
        return

    padrao = ", ".join(PALAVRAS_MERCADO)
    entrada = input(f"Palavras-chave separadas por vírgula (padrão = {padrao}): ").strip()
    palavras = ler_palavras(entrada) or list(PALAVRAS_MERCADO)

    servico = ServicoMercado(chaves["serpapi"], chaves["gemini"])
    print(f"Buscando {len(palavras)} palavras-chave...")
    resultado = servico.busca_personalizada(palavras)

    registros = resultado["dados_palavras"]
    df = adicionar_scores(registros_para_dataframe(registros))

    data_exec = datetime.now().strftime("%Y-%m-%d")
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    slug = slugify("_".join(palavras))[:40]
    caminho = exportar_csv(df, OUTPUT_DIR / "csv" / data_exec / f"Pneus_{slug}_{timestamp}.csv")

    erros = [r["palavra_chave"] for r in registros if r.get("status") == "erro"]
    if erros:
        print(f"\nAtenção: {len(erros)} busca(s) falharam (zeradas no CSV): {', '.join(erros)}")

    print("\nResumo por palavra-chave:")
    cols_resumo = [
        "palavra_chave",
        "total_resultados",
        "qtd_anuncios",
        "nivel_competicao",
        "nivel_oportunidade",
        "roi_potencial",
    ]
    print(
        df.sort_values("total_resultados", ascending=False)[cols_resumo]
        .to_string(index=False)
    )

    print("\nAnálise de IA:\n")
    print(resultado["analise_ia"])
    print(f"\nCSV salvo em: {caminho}")


if __name__ == "__main__":
    main()
