"""
Serviço de análise do mercado de pneus.

Cada tela do dashboard segue o mesmo padrão:

1) busca a SERP de cada palavra-chave, em sequência, com pausa fixa entre as
   chamadas (limite de taxa do provedor);
2) calcula as heurísticas (competição, oportunidade, tendência simulada);
3) monta um prompt com os números e pede a análise em texto ao Gemini.

Falha em uma palavra-chave não interrompe o laço: o registro sai com
`status="erro"` e a mensagem, nunca com dados inventados.
"""

import logging
import random
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from mercado_pneus import prompts
from mercado_pneus.config import (
    MARCAS_PADRAO,
    NICHOS_PADRAO,
    PALAVRAS_MERCADO,
    PALAVRAS_TENDENCIAS,
    PAUSA_ENTRE_MARCAS,
    PAUSA_ENTRE_REQUISICOES,
    PAUSA_VALIDACAO,
)
from mercado_pneus.gemini_client import (
    GeminiError,
    analisar_com_gemini,
    extrair_json,
    validar_chave_gemini,
)
from mercado_pneus.marcas import normalizar_marca, palavras_da_marca, posicionamento_preco
from mercado_pneus.metricas import (
    ALTA,
    CRESCENDO,
    MESES,
    calcular_roi_potencial,
    categoria_mais_frequente,
    classificar_categoria,
    cor_oportunidade,
    enriquecer_registro,
    indice_competicao,
    resumir,
    rotulo_indice_competicao,
    simular_crescimento,
)
from mercado_pneus.processador_resultados import (
    STATUS_OK,
    contar_mencoes,
    extrair_metricas_palavra,
    registro_com_erro,
)
from mercado_pneus.serp_client import SerpApiError, buscar_serp, validar_chave_serp

logger = logging.getLogger(__name__)

IA_MERCADO_INDISPONIVEL = "Análise de IA não disponível no momento."
IA_TENDENCIAS_INDISPONIVEL = "Análise de tendências não disponível no momento."
IA_MARCAS_INDISPONIVEL = "Análise competitiva não disponível no momento."
IA_OPORTUNIDADES_INDISPONIVEL = "Análise de oportunidades não disponível no momento."

CORES_GRAFICO = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#EC4899", "#14B8A6"]

# Nicho entra no top também por razão volume/competição acima deste valor
RAZAO_MINIMA_TOP = 20000

OPORTUNIDADES_PADRAO_TERMO = [
    "Explore palavras-chave relacionadas de cauda longa",
    "Considere anúncios segmentados por localização",
    "Analise o conteúdo dos concorrentes no top 3",
    "Monitore variações sazonais do termo",
]
RISCOS_PADRAO_TERMO = [
    "Alta competição pode elevar custos de CPC",
    "Necessário conteúdo de qualidade para ranquear",
    "Volatilidade do mercado pode afetar performance",
]


def _limpar_lista(palavras: List[str]) -> List[str]:
    """Remove vazios e duplicadas, mantendo a ordem."""
    vistas: List[str] = []
    for p in palavras or []:
        limpa = " ".join((p or "").split())
        if limpa and limpa not in vistas:
            vistas.append(limpa)
    return vistas


class ServicoMercado:
    """Orquestra SERP + heurísticas + Gemini para cada tipo de análise."""

    def __init__(
        self,
        serpapi_key: str,
        gemini_key: str,
        provider: Optional[str] = None,
        pausa: float = PAUSA_ENTRE_REQUISICOES,
        pausa_marcas: float = PAUSA_ENTRE_MARCAS,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.serpapi_key = (serpapi_key or "").strip()
        self.gemini_key = (gemini_key or "").strip()
        self.provider = provider
        self.pausa = pausa
        self.pausa_marcas = pausa_marcas
        self.rng = rng or random.Random()
        self._sleep = sleep

    # ------------------------------------------------------------------ #
    # Chamadas externas
    # ------------------------------------------------------------------ #

    def buscar_serp(self, palavra_chave: str) -> Dict[str, Any]:
        return buscar_serp(palavra_chave, api_key=self.serpapi_key, provider=self.provider)

    def analisar_com_gemini(self, prompt: str) -> str:
        return analisar_com_gemini(prompt, api_key=self.gemini_key)

    def _analise_ia(self, prompt: str, texto_indisponivel: str) -> str:
        try:
            return self.analisar_com_gemini(prompt)
        except GeminiError as e:
            logger.error("Erro na análise com Gemini: %s", e)
            return texto_indisponivel

    def validar_chaves(self) -> Dict[str, Any]:
        if not self.serpapi_key or not self.gemini_key:
            return {"valida": False, "erros": ["Por favor, preencha ambas as chaves API"]}

        erros: List[str] = []
        erro_serp = validar_chave_serp(self.serpapi_key, provider=self.provider)
        if erro_serp:
            erros.append(erro_serp)

        self._sleep(PAUSA_VALIDACAO)

        erro_gemini = validar_chave_gemini(self.gemini_key)
        if erro_gemini:
            erros.append(erro_gemini)

        return {"valida": not erros, "erros": erros}

    # ------------------------------------------------------------------ #
    # Coleta sequencial
    # ------------------------------------------------------------------ #

    def coletar(self, palavras: List[str]) -> List[Dict[str, Any]]:
        """Uma busca por palavra-chave, com pausa fixa entre elas."""
        registros: List[Dict[str, Any]] = []

        for i, palavra in enumerate(palavras):
            if i > 0 and self.pausa > 0:
                self._sleep(self.pausa)

            try:
                resposta = self.buscar_serp(palavra)
            except SerpApiError as e:
                logger.error("Erro ao buscar dados para %s: %s", palavra, e)
                registro = registro_com_erro(palavra, str(e))
            else:
                registro = extrair_metricas_palavra(resposta, palavra)
                logger.info("Dados coletados para: %s", palavra)

            registros.append(enriquecer_registro(registro, self.rng))

        return registros

    def buscar_palavras_chave(
        self,
        palavras: List[str],
        com_ia: bool = True,
        montar_prompt: Callable[[List[Dict[str, Any]]], str] = prompts.prompt_busca_personalizada,
        texto_indisponivel: str = IA_MERCADO_INDISPONIVEL,
    ) -> Dict[str, Any]:
        lista = _limpar_lista(palavras)
        if not lista:
            raise ValueError("Adicione pelo menos uma palavra-chave para buscar.")

        registros = self.coletar(lista)
        analise_ia = None
        if com_ia:
            analise_ia = self._analise_ia(montar_prompt(registros), texto_indisponivel)

        return {
            "dados_palavras": registros,
            "analise_ia": analise_ia,
            "resumo": resumir(registros),
            "timestamp": datetime.now(),
        }

    # ------------------------------------------------------------------ #
    # Telas
    # ------------------------------------------------------------------ #

    def analise_mercado(self, palavras: Optional[List[str]] = None) -> Dict[str, Any]:
        logger.info("Iniciando análise completa do mercado de pneus...")
        resultado = self.buscar_palavras_chave(
            palavras or PALAVRAS_MERCADO,
            montar_prompt=prompts.prompt_mercado,
            texto_indisponivel=IA_MERCADO_INDISPONIVEL,
        )
        resultado["categorias"] = self._distribuicao(resultado["dados_palavras"])
        return resultado

    @staticmethod
    def _distribuicao(registros: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Participação (%) de cada palavra-chave no volume total coletado."""
        total = sum(r.get("total_resultados") or 0 for r in registros)
        if total <= 0:
            return []
        return [
            {
                "nome": r["palavra_chave"],
                "valor": round(100 * (r.get("total_resultados") or 0) / total, 1),
            }
            for r in registros
            if r.get("total_resultados")
        ]

    def analisar_comportamento_mercado(self, palavras: Optional[List[str]] = None) -> Dict[str, Any]:
        registros = self.coletar(_limpar_lista(palavras or PALAVRAS_TENDENCIAS))

        # Sem série histórica: a linha do tempo é ilustrativa e vem marcada como simulada
        timeline = [
            {
                "mes": MESES[i % len(MESES)],
                "volume": (r.get("total_resultados") or 0) // 1000,
                "crescimento": simular_crescimento(self.rng),
                "categoria": r["palavra_chave"],
                "simulado": True,
            }
            for i, r in enumerate(registros)
        ]

        n = len(registros)
        resumo = {
            "tendencias_emergentes": [
                r["palavra_chave"] for r in registros if r.get("tendencia") == CRESCENDO
            ],
            "alta_oportunidade": sum(1 for r in registros if r.get("nivel_oportunidade") == ALTA),
            "competicao_media": (sum(r.get("qtd_anuncios") or 0 for r in registros) / n) if n else 0.0,
        }

        analise_ia = self._analise_ia(
            prompts.prompt_tendencias(registros), IA_TENDENCIAS_INDISPONIVEL
        )

        return {
            "insights": registros,
            "timeline": timeline,
            "resumo": resumo,
            "analise_ia": analise_ia,
            "timestamp": datetime.now(),
        }

    def comparar_marcas(self, marcas: Optional[List[str]] = None) -> Dict[str, Any]:
        if marcas is None:
            marcas = MARCAS_PADRAO
        nomes = _limpar_lista([normalizar_marca(m) for m in marcas])
        if len(nomes) < 2:
            raise ValueError("Adicione pelo menos 2 marcas para comparar.")

        resultados_marcas: List[Dict[str, Any]] = []
        for i, marca in enumerate(nomes):
            if i > 0 and self.pausa_marcas > 0:
                self._sleep(self.pausa_marcas)

            registros = self.coletar(palavras_da_marca(marca))
            n = len(registros)

            # Força de marca: % dos itens da SERP (anúncios + orgânicos) que citam a marca
            itens = sum(len(r.get("titulos_serp") or []) for r in registros)
            mencoes = sum(contar_mencoes(r, marca) for r in registros)
            forca = round(100 * mencoes / itens) if itens else 0

            resultados_marcas.append(
                {
                    "nome": marca,
                    "volume_total": sum(r.get("total_resultados") or 0 for r in registros),
                    "competicao_media": sum(r.get("qtd_anuncios") or 0 for r in registros) / n,
                    "market_share": 0.0,
                    "forca_marca": forca,
                    "posicionamento_preco": posicionamento_preco(marca),
                    "palavras": registros,
                    "erros": sum(1 for r in registros if r.get("status") != STATUS_OK),
                }
            )

        volume_geral = sum(m["volume_total"] for m in resultados_marcas)
        for m in resultados_marcas:
            m["market_share"] = round(100 * m["volume_total"] / volume_geral, 1) if volume_geral else 0.0

        radar = [
            {
                "marca": m["nome"],
                "volume": min(m["volume_total"] / 10000, 100),
                "competicao": min(m["competicao_media"] * 10, 100),
                "forca": m["forca_marca"],
                "share": m["market_share"],
            }
            for m in resultados_marcas
        ]

        analise_ia = self._analise_ia(prompts.prompt_marcas(resultados_marcas), IA_MARCAS_INDISPONIVEL)

        return {
            "marcas": resultados_marcas,
            "radar": radar,
            "lider": max(resultados_marcas, key=lambda m: m["volume_total"]),
            "analise_ia": analise_ia,
            "timestamp": datetime.now(),
        }

    def detectar_oportunidades(self, nichos: Optional[List[str]] = None) -> Dict[str, Any]:
        registros = self.coletar(_limpar_lista(nichos or NICHOS_PADRAO))

        todas: List[Dict[str, Any]] = []
        for r in registros:
            volume = r.get("total_resultados") or 0
            razao = r["razao_volume_competicao"]
            roi = calcular_roi_potencial(razao, volume)
            todas.append(
                {
                    "palavra_chave": r["palavra_chave"],
                    "volume": volume,
                    "competicao": r.get("qtd_anuncios") or 0,
                    "oportunidade": r["nivel_oportunidade"],
                    "razao": razao,
                    "categoria": classificar_categoria(r["palavra_chave"]),
                    "roi_potencial": roi,
                    "dificuldade": r["nivel_competicao"],
                    "x": volume / 1000,
                    "y": razao / 1000,
                    "cor": cor_oportunidade(roi),
                    "status": r.get("status"),
                    "erro": r.get("erro"),
                }
            )

        top = sorted(
            (o for o in todas if o["oportunidade"] == ALTA or o["razao"] > RAZAO_MINIMA_TOP),
            key=lambda o: o["roi_potencial"],
            reverse=True,
        )[:5]

        analise_ia = self._analise_ia(
            prompts.prompt_oportunidades(top, todas), IA_OPORTUNIDADES_INDISPONIVEL
        )

        n = len(todas)
        resumo = {
            "total_nichos": n,
            "alta_oportunidade": sum(1 for o in todas if o["oportunidade"] == ALTA),
            "roi_medio": (sum(o["roi_potencial"] for o in todas) / n) if n else 0.0,
            "melhor_categoria": categoria_mais_frequente([o["categoria"] for o in todas]),
        }

        return {
            "todas": todas,
            "top": top,
            "analise_ia": analise_ia,
            "resumo": resumo,
            "timestamp": datetime.now(),
        }

    def busca_personalizada(self, palavras: List[str]) -> Dict[str, Any]:
        logger.info("Iniciando busca personalizada para: %s", palavras)
        resultado = self.buscar_palavras_chave(palavras)
        resultado["dados_grafico"] = [
            {
                "nome": r["palavra_chave"],
                "volume": (r.get("total_resultados") or 0) // 1000,
                "competicao": r.get("qtd_anuncios") or 0,
                "cor": CORES_GRAFICO[i % len(CORES_GRAFICO)],
            }
            for i, r in enumerate(resultado["dados_palavras"])
        ]
        return resultado

    def analisar_termo(self, termo: str) -> Dict[str, Any]:
        """Análise de um termo isolado. Erro da SERP sobe para a tela tratar."""
        termo = " ".join((termo or "").split())
        if not termo:
            raise ValueError("Informe um termo de busca.")

        logger.info("Analisando termo: %s", termo)
        registro = enriquecer_registro(
            extrair_metricas_palavra(self.buscar_serp(termo), termo), self.rng
        )
        indice = indice_competicao(registro["qtd_anuncios"])

        texto = self._analise_ia(prompts.prompt_termo(registro), IA_MERCADO_INDISPONIVEL)
        dados_ia = extrair_json(texto) or {}

        resumo = dados_ia.get("resumo")
        oportunidades = dados_ia.get("oportunidades")
        riscos = dados_ia.get("riscos")

        return {
            "termo": termo,
            "volume": registro["total_resultados"],
            "qtd_anuncios": registro["qtd_anuncios"],
            "qtd_organicos": registro["qtd_organicos"],
            "indice_competicao": indice,
            "nivel_competicao": rotulo_indice_competicao(indice),
            "nivel_oportunidade": registro["nivel_oportunidade"],
            "tendencia": registro["tendencia"],
            "tendencia_simulada": registro["tendencia_simulada"],
            "resultados_serp": registro["top_organicos"],
            "anuncios": registro["top_anuncios"],
            "buscas_relacionadas": registro["buscas_relacionadas"],
            "status": registro["status"],
            "insights_ia": {
                "resumo": resumo if isinstance(resumo, str) and resumo.strip() else texto,
                "oportunidades": oportunidades if isinstance(oportunidades, list) and oportunidades
                else list(OPORTUNIDADES_PADRAO_TERMO),
                "riscos": riscos if isinstance(riscos, list) and riscos else list(RISCOS_PADRAO_TERMO),
            },
            "timestamp": datetime.now(),
        }
