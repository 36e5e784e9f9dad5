"""
Dashboard TireMarket AI - Análise Inteligente do Mercado de Pneus.

Fluxo:
1) Sem as duas chaves (SerpAPI + Gemini) salvas, mostramos só a configuração inicial.
2) Com as chaves, as abas disparam cada análise do ServicoMercado:
   - Dashboard do mercado
   - Análise de um termo
   - Tendências
   - Comparação de marcas
   - Detector de oportunidades
   - Busca personalizada
   - Relatórios
3) Os resultados ficam em st.session_state até uma nova execução.

Executar com:  streamlit run mercado_pneus/dashboard.py
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from mercado_pneus.config import MARCAS_PADRAO, configurar_logging
from mercado_pneus.credenciais import (
    CredenciaisError,
    carregar_credenciais,
    esta_configurado,
    mascarar_chave,
    salvar_credenciais,
)
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
from mercado_pneus.marcas import adicionar_marca
from mercado_pneus.metricas import CRESCENDO, DECLINANDO
from mercado_pneus.processador_resultados import STATUS_ERRO, STATUS_SEM_RESULTADOS
from mercado_pneus.relatorios import MODELOS_RELATORIO, gerar_relatorio, listar_relatorios
from mercado_pneus.serp_client import SerpApiError
from mercado_pneus.servico import ServicoMercado

configurar_logging()
logger = logging.getLogger(__name__)


# =========================
# Configuração global e tema
# =========================

st.set_page_config(
    page_title="TireMarket AI - Mercado de Pneus",
    layout="wide",
)


def inject_css() -> None:
    """Tema claro + componentes simples de UI (cards, containers)."""
    st.markdown(
        """
        <style>
        :root {
            --bg: #f5f5f7;
            --panel: #ffffff;
            --panel-soft: #f9fafb;
            --border-subtle: #d0d4dd;
            --accent: #2563eb;
            --text-main: #111827;
            --text-muted: #6b7280;
        }

        .stApp {
            background-color: var(--bg);
            color: var(--text-main);
        }

        .block-container {
            padding-top: 1.4rem;
            padding-bottom: 2rem;
            max-width: 1300px;
        }

        .metric-row {
            display: flex;
            gap: 1rem;
            margin-bottom: 1rem;
            flex-wrap: wrap;
        }

        .metric-card {
            background: var(--panel);
            border-radius: 0.75rem;
            border: 1px solid var(--border-subtle);
            padding: 0.8rem 1rem;
            min-width: 180px;
            flex: 1 1 0;
            box-shadow: 0 1px 2px rgba(15, 23, 42, 0.06);
        }

        .metric-label {
            font-size: 0.8rem;
            color: var(--text-muted);
            text-transform: uppercase;
            letter-spacing: 0.06em;
        }

        .metric-value {
            font-size: 1.3rem;
            font-weight: 600;
            margin-top: 0.15rem;
            color: var(--text-main);
        }

        .metric-sub {
            font-size: 0.75rem;
            color: var(--text-muted);
            margin-top: 0.15rem;
        }

        .panel-box {
            background: var(--panel-soft);
            border-radius: 0.75rem;
            border: 1px solid var(--border-subtle);
            padding: 0.9rem 1rem;
            margin-bottom: 0.8rem;
            white-space: pre-wrap;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def metric_card(label: str, value: str, subtitle: Optional[str] = None) -> str:
    return f"""
    <div class="metric-card">
        <div class="metric-label">{label}</div>
        <div class="metric-value">{value}</div>
        {f'<div class="metric-sub">{subtitle}</div>' if subtitle else ''}
    </div>
    """


def metric_row(cards: List[str]) -> None:
    st.markdown(f'<div class="metric-row">{"".join(cards)}</div>', unsafe_allow_html=True)


def painel_ia(titulo: str, texto: Optional[str]) -> None:
    st.markdown(f"### {titulo}")
    st.markdown(texto or "Análise não disponível.")


def tabela_palavras(registros: List[Dict[str, Any]]) -> None:
    linhas = []
    for r in registros:
        if r.get("status") == STATUS_ERRO:
            situacao = f"Erro: {r.get('erro')}"
        elif r.get("status") == STATUS_SEM_RESULTADOS:
            situacao = "Sem resultados"
        else:
            situacao = "Sucesso"
        linhas.append(
            {
                "Palavra-chave": r["palavra_chave"],
                "Resultados": formatar_numero(r.get("total_resultados")),
                "Anúncios": r.get("qtd_anuncios"),
                "Orgânicos": r.get("qtd_organicos"),
                "Competição": r.get("nivel_competicao"),
                "Oportunidade": r.get("nivel_oportunidade"),
                "Buscas relacionadas": ", ".join(r.get("buscas_relacionadas") or []),
                "Status": situacao,
            }
        )
    st.dataframe(pd.DataFrame(linhas), hide_index=True, use_container_width=True)


def aviso_erros(registros: List[Dict[str, Any]]) -> None:
    falhas = [r for r in registros if r.get("status") == STATUS_ERRO]
    if falhas:
        st.warning(
            f"{len(falhas)} de {len(registros)} buscas falharam e aparecem zeradas "
            "(não são dados reais): " + ", ".join(r["palavra_chave"] for r in falhas)
        )


def horario(ts: Optional[datetime]) -> str:
    return ts.strftime("%d/%m/%Y %H:%M:%S") if ts else "-"


# ==============================
# Configuração inicial (chaves)
# ==============================

def tela_configuracao(chaves: Dict[str, str]) -> None:
    st.markdown("## Configuração Inicial")
    st.write("Configure suas chaves de API para começar a analisar o mercado de pneus.")
    st.info("Suas chaves de API são validadas em tempo real e armazenadas localmente neste computador.")

    with st.form("form_chaves"):
        serp = st.text_input(
            "SerpAPI Key",
            value=chaves.get("serpapi", ""),
            type="password",
            placeholder="Cole sua chave SerpAPI aqui...",
            help="Necessária para obter dados de busca do Google em tempo real. "
                 "Obter chave: https://serpapi.com/api-key",
        )
        gemini = st.text_input(
            "Gemini API Key",
            value=chaves.get("gemini", ""),
            type="password",
            placeholder="Cole sua chave Gemini AI aqui...",
            help="Necessária para análises inteligentes e insights de IA. "
                 "Obter chave: https://aistudio.google.com/app/apikey",
        )
        enviado = st.form_submit_button("Validar e Continuar", use_container_width=True)

    if not enviado:
        return

    with st.spinner("Validando chaves..."):
        validacao = ServicoMercado(serp, gemini).validar_chaves()

    if not validacao["valida"]:
        for erro in validacao["erros"]:
            st.error(erro)
        return

    salvar_credenciais(serp, gemini)
    st.session_state["chaves"] = {"serpapi": serp.strip(), "gemini": gemini.strip()}
    # st.rerun descarta o que foi desenhado; a mensagem sai na próxima execução
    st.session_state["chaves_validadas"] = True
    st.rerun()


# ==============================
# Abas
# ==============================

def aba_dashboard(servico: ServicoMercado) -> None:
    col_t, col_b = st.columns([4, 1])
    with col_t:
        st.markdown("## Dashboard do Mercado")
        st.caption("Visão geral das tendências e oportunidades no mercado de pneus")
    with col_b:
        atualizar = st.button("Atualizar Dados", key="btn_dashboard", use_container_width=True)

    if atualizar:
        with st.spinner("Carregando dados do mercado..."):
            st.session_state["res_mercado"] = servico.analise_mercado()
        st.toast("Os dados do mercado foram carregados com sucesso!")

    res = st.session_state.get("res_mercado")
    if not res:
        st.info("Clique em **Atualizar Dados** para coletar o panorama do mercado.")
        return

    registros = res["dados_palavras"]
    resumo = res["resumo"]
    st.caption(f"Última atualização: {horario(res['timestamp'])}")
    aviso_erros(registros)

    lider = resumo["top_palavras"][0]["palavra_chave"] if resumo["top_palavras"] else "-"
    metric_row([
        metric_card("Resultados totais", formatar_numero(resumo["total_volume"])),
        metric_card("Anúncios por termo", formatar_decimal(resumo["competicao_media"])),
        metric_card("Palavras analisadas", str(resumo["total_palavras"])),
        metric_card("Termo com mais volume", lider),
    ])

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Volume por palavra-chave")
        dados = [
            {"nome": r["palavra_chave"], "volume": r["total_resultados"] // 1000,
             "competicao": r["qtd_anuncios"], "cor": "#3B82F6"}
            for r in registros
        ]
        st.altair_chart(grafico_volume_competicao(dados), use_container_width=True)
    with col2:
        st.markdown("### Distribuição do volume")
        if res["categorias"]:
            st.altair_chart(grafico_distribuicao(res["categorias"]), use_container_width=True)
        else:
            st.write("Sem volume coletado para distribuir.")

    st.markdown("### Top buscas")
    for item in resumo["top_palavras"]:
        st.markdown(f"- **{item['palavra_chave']}**: {formatar_numero(item['volume'])} resultados")

    tabela_palavras(registros)
    painel_ia("Análise de IA (Gemini)", res["analise_ia"])


def aba_analise_termo(servico: ServicoMercado) -> None:
    st.markdown("## Análise de Termo")
    st.caption("Analise um termo de busca específico com dados do Google e insights de IA")

    with st.form("form_termo"):
        termo = st.text_input("Termo de busca", placeholder="ex: pneu aro 13 continental")
        enviado = st.form_submit_button("Analisar")

    if enviado:
        if not termo.strip():
            st.warning("Informe um termo de busca.")
        else:
            try:
                with st.spinner("Analisando..."):
                    st.session_state["res_termo"] = servico.analisar_termo(termo)
            except SerpApiError as e:
                st.error(f"Não foi possível completar a análise. Verifique suas chaves de API. ({e})")

    res = st.session_state.get("res_termo")
    if not res:
        return

    tendencia = res["tendencia"] + (" (simulada)" if res["tendencia_simulada"] else "")
    metric_row([
        metric_card("Volume (resultados)", formatar_numero(res["volume"])),
        metric_card("Competição", res["nivel_competicao"], formatar_percentual(100 * res["indice_competicao"], 0)),
        metric_card("Anúncios", str(res["qtd_anuncios"])),
        metric_card("Tendência", tendencia),
    ])
    if res["status"] == STATUS_SEM_RESULTADOS:
        st.warning("O Google não retornou resultados para este termo.")

    st.markdown("### Resultados da SERP")
    for r in res["resultados_serp"]:
        st.markdown(f"**{r.get('posicao')}. {r.get('titulo')}**  \n{r.get('link')}  \n{r.get('snippet') or ''}")

    insights = res["insights_ia"]
    st.markdown("### Insights de IA")
    st.markdown(insights["resumo"])
    col_o, col_r = st.columns(2)
    with col_o:
        st.markdown("**Oportunidades**")
        for o in insights["oportunidades"]:
            st.markdown(f"- {o}")
    with col_r:
        st.markdown("**Riscos**")
        for r in insights["riscos"]:
            st.markdown(f"- {r}")


def aba_tendencias(servico: ServicoMercado) -> None:
    st.markdown("## Análise de Tendências")
    st.caption("Monitore o comportamento do mercado e identifique tendências emergentes")

    if st.button("Gerar Análise de Tendências", key="btn_tendencias"):
        with st.spinner("Analisando tendências..."):
            st.session_state["res_tendencias"] = servico.analisar_comportamento_mercado()
        st.toast("Análise de tendências concluída!")

    res = st.session_state.get("res_tendencias")
    if not res:
        return

    aviso_erros(res["insights"])
    resumo = res["resumo"]
    metric_row([
        metric_card("Tendências emergentes", str(len(resumo["tendencias_emergentes"])), "simuladas"),
        metric_card("Alta oportunidade", str(resumo["alta_oportunidade"])),
        metric_card("Competição média", formatar_decimal(resumo["competicao_media"])),
    ])

    st.markdown("### Volume e crescimento por segmento")
    st.caption("Sem série histórica disponível: a tendência e o crescimento são simulados.")
    st.altair_chart(grafico_timeline(res["timeline"]), use_container_width=True)

    icones = {CRESCENDO: "↗", DECLINANDO: "↘"}
    for i in res["insights"]:
        with st.container(border=True):
            st.markdown(
                f"**{i['palavra_chave']}** · {icones.get(i['tendencia'], '→')} {i['tendencia']} (simulada) · "
                f"{i['nivel_oportunidade']} Oportunidade"
            )
            st.write(
                f"Resultados: {formatar_numero(i['total_resultados'])} · Competição: {i['nivel_competicao']} · "
                f"Anúncios: {i['qtd_anuncios']} · Orgânicos: {i['qtd_organicos']}"
            )
            if i["buscas_relacionadas"]:
                st.caption("Buscas relacionadas: " + ", ".join(i["buscas_relacionadas"][:4]))

    painel_ia("Análise de IA (Gemini)", res["analise_ia"])


def aba_marcas(servico: ServicoMercado) -> None:
    st.markdown("## Comparador de Marcas")
    st.caption("Compare a presença de busca das principais marcas de pneu")

    marcas: List[str] = st.session_state.setdefault("marcas", list(MARCAS_PADRAO))

    col_in, col_add = st.columns([4, 1])
    with col_in:
        nova = st.text_input("Adicionar marca", key="nova_marca", placeholder="ex: goodyear")
    with col_add:
        st.write("")
        if st.button("Adicionar", key="btn_add_marca"):
            st.session_state["marcas"] = adicionar_marca(marcas, nova)
            st.rerun()

    selecionadas = st.multiselect("Marcas selecionadas", options=marcas, default=marcas)

    if st.button(f"Comparar Marcas ({len(selecionadas)} selecionadas)",
                 key="btn_marcas", disabled=len(selecionadas) < 2):
        with st.spinner("Comparando marcas..."):
            st.session_state["res_marcas"] = servico.comparar_marcas(selecionadas)
        st.toast(f"Análise competitiva de {len(selecionadas)} marcas finalizada.")
    if len(selecionadas) < 2:
        st.caption("Adicione pelo menos 2 marcas para comparar.")

    res = st.session_state.get("res_marcas")
    if not res:
        return

    lider = res["lider"]
    st.success(
        f"Líder: **{lider['nome']}** · {formatar_numero(lider['volume_total'])} resultados · "
        f"{formatar_percentual(lider['market_share'])} do mercado"
    )

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Comparativo (escala 0-100)")
        st.altair_chart(grafico_radar_marcas(res["radar"]), use_container_width=True)
    with col2:
        st.markdown("### Volume de buscas por marca")
        st.altair_chart(grafico_marcas(res["marcas"], "volume_total", "Resultados"), use_container_width=True)

    for m in res["marcas"]:
        with st.container(border=True):
            st.markdown(
                f"**{m['nome'].title()}** · {m['posicionamento_preco']} · "
                f"{formatar_percentual(m['market_share'])} do mercado"
            )
            st.write(
                f"Volume: {formatar_numero(m['volume_total'])} · Competição média: "
                f"{formatar_decimal(m['competicao_media'])} · Força de marca: {m['forca_marca']}/100"
            )
            if m["erros"]:
                st.caption(f"{m['erros']} busca(s) desta marca falharam e foram zeradas.")

    painel_ia("Análise competitiva (Gemini)", res["analise_ia"])


def aba_oportunidades(servico: ServicoMercado) -> None:
    st.markdown("## Detector de Oportunidades")
    st.caption("Identifique nichos de mercado inexplorados e oportunidades de alto ROI")

    if st.button("Iniciar Detecção de Oportunidades", key="btn_oportunidades"):
        with st.spinner("Escaneando oportunidades..."):
            st.session_state["res_oportunidades"] = servico.detectar_oportunidades()
        top = st.session_state["res_oportunidades"]["top"]
        st.toast(f"{len(top)} oportunidades de alto potencial identificadas.")

    res = st.session_state.get("res_oportunidades")
    if not res:
        return

    resumo = res["resumo"]
    metric_row([
        metric_card("Nichos analisados", str(resumo["total_nichos"])),
        metric_card("Oportunidades altas", str(resumo["alta_oportunidade"])),
        metric_card("ROI médio", formatar_percentual(resumo["roi_medio"], 0)),
        metric_card("Melhor categoria", resumo["melhor_categoria"] or "-"),
    ])

    st.markdown("### Top 5 Oportunidades de Alto ROI")
    if not res["top"]:
        st.write("Nenhum nicho passou nos critérios de alto potencial.")
    for pos, o in enumerate(res["top"], start=1):
        with st.container(border=True):
            st.markdown(f"**#{pos} {o['palavra_chave']}** · {o['roi_potencial']}% ROI · {o['categoria']}")
            st.write(
                f"Volume: {formatar_numero(o['volume'])} · Competição: {o['competicao']} · "
                f"Dificuldade: {o['dificuldade']} · Ratio V/C: {formatar_numero(o['razao'])}"
            )

    st.markdown("### Mapa de Oportunidades (Volume vs Competição)")
    st.altair_chart(mapa_oportunidades(res["todas"]), use_container_width=True)

    painel_ia("Estratégias de Oportunidade (Gemini)", res["analise_ia"])


def aba_busca_personalizada(servico: ServicoMercado) -> None:
    st.markdown("## Busca Personalizada do Mercado")
    st.caption("Adicione suas próprias palavras-chave para obter análises específicas do mercado")

    palavras: List[str] = st.session_state.setdefault("palavras_custom", [])

    col_in, col_add = st.columns([4, 1])
    with col_in:
        nova = st.text_input(
            "Palavra-chave",
            key="nova_palavra",
            placeholder="Digite uma palavra-chave (ex: pneu michelin, remold aro 14)",
        )
    with col_add:
        st.write("")
        if st.button("Adicionar", key="btn_add_palavra"):
            limpa = " ".join((nova or "").split())
            if limpa and limpa not in palavras:
                palavras.append(limpa)
            st.rerun()

    for p in list(palavras):
        col_p, col_x = st.columns([6, 1])
        col_p.markdown(f"- {p}")
        if col_x.button("Remover", key=f"rm_{p}"):
            palavras.remove(p)
            st.rerun()

    if st.button("Buscar", key="btn_busca"):
        if not palavras:
            st.error("Adicione pelo menos uma palavra-chave para buscar.")
        else:
            with st.spinner("Buscando..."):
                st.session_state["res_busca"] = servico.busca_personalizada(palavras)
            st.toast(f"Análise de {len(palavras)} palavras-chave finalizada.")

    res = st.session_state.get("res_busca")
    if not res:
        return

    resumo = res["resumo"]
    aviso_erros(res["dados_palavras"])
    metric_row([
        metric_card("Volume (top 5)", formatar_numero(sum(t["volume"] for t in resumo["top_palavras"]))),
        metric_card("Competição média", formatar_decimal(resumo["competicao_media"])),
        metric_card("Palavras-chave", str(resumo["total_palavras"])),
    ])
    st.altair_chart(grafico_volume_competicao(res["dados_grafico"]), use_container_width=True)
    painel_ia("Análise de IA (Gemini)", res["analise_ia"])
    tabela_palavras(res["dados_palavras"])


def aba_relatorios(servico: ServicoMercado) -> None:
    st.markdown("## Relatórios e Análises")
    st.caption("Gere relatórios detalhados com insights automatizados do mercado de pneus")

    cols = st.columns(2)
    for idx, modelo in enumerate(MODELOS_RELATORIO):
        with cols[idx % 2].container(border=True):
            st.markdown(f"**{modelo['titulo']}** · ⏱ {modelo['estimado']}")
            st.caption(modelo["descricao"])
            if st.button("Gerar Relatório", key=f"rel_{modelo['id']}", use_container_width=True):
                with st.spinner("Gerando..."):
                    meta = gerar_relatorio(servico, modelo["id"])
                st.success(f"Relatório gerado: {Path(meta['arquivo_xlsx']).name}")

    st.markdown("### Relatórios Recentes")
    recentes = listar_relatorios(limite=10)
    if not recentes:
        st.write("Nenhum relatório gerado ainda.")
    for meta in recentes:
        with st.container(border=True):
            data = datetime.fromisoformat(meta["data"]).strftime("%d/%m/%Y %H:%M")
            st.markdown(f"**{meta['titulo']}** · Concluído")
            st.caption(f"{data} • {meta['insights']} insights • {meta['oportunidades']} oportunidades")
            xlsx = Path(meta["arquivo_xlsx"])
            if xlsx.exists():
                st.download_button(
                    "Download",
                    data=xlsx.read_bytes(),
                    file_name=xlsx.name,
                    key=f"dl_{meta['id']}",
                )


# ==============================
# Interface principal
# ==============================

inject_css()

if st.session_state.pop("chaves_validadas", False):
    st.success("Chaves API validadas com sucesso! Sistema pronto para uso.")

if "chaves" not in st.session_state:
    try:
        st.session_state["chaves"] = carregar_credenciais()
    except CredenciaisError as e:
        logger.error("%s", e)
        st.error(str(e))
        st.session_state["chaves"] = {"serpapi": "", "gemini": ""}

chaves = st.session_state["chaves"]
configurado = esta_configurado(chaves)

col_h1, col_h2 = st.columns([4, 1])
with col_h1:
    st.title("TireMarket AI")
    st.caption("Análise Inteligente do Mercado de Pneus")
with col_h2:
    if configurado:
        st.success("Configurado")
        st.caption(f"SerpAPI {mascarar_chave(chaves['serpapi'])}")
        if st.button("Trocar chaves"):
            st.session_state["chaves"] = {"serpapi": "", "gemini": ""}
            st.rerun()
    else:
        st.warning("Configuração Pendente")

if not configurado:
    tela_configuracao(chaves)
else:
    servico = ServicoMercado(chaves["serpapi"], chaves["gemini"])
    abas = st.tabs([
        "Dashboard",
        "Análise",
        "Tendências",
        "Marcas",
        "Oportunidades",
        "Busca Personalizada",
        "Relatórios",
    ])
    with abas[0]:
        aba_dashboard(servico)
    with abas[1]:
        aba_analise_termo(servico)
    with abas[2]:
        aba_tendencias(servico)
    with abas[3]:
        aba_marcas(servico)
    with abas[4]:
        aba_oportunidades(servico)
    with abas[5]:
        aba_busca_personalizada(servico)
    with abas[6]:
        aba_relatorios(servico)
