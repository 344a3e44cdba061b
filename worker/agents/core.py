import json
import logging
from typing import Any, Dict, Optional

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

# Imports internos
from .prompts import PROMPT_ANALISE_REDACAO, TIPOS_ESTRUTURADOS, criar_template
from shared.config import Configuracao
from shared.parsing import interpretar_analise, interpretar_quiz, interpretar_topico
from shared.parsing.analise import NOMES_COMPETENCIAS, montar_analise
from shared.parsing.quiz import resolver_resposta
from shared.parsing.topico import montar_topico
from shared.schemas import (
    AnaliseRedacao,
    AvaliacaoEstruturada,
    ModeloWire,
    QuestaoQuiz,
    QuizEstruturado,
    QuizGerado,
    RequisicaoAssistente,
    RespostaChat,
    TopicoEstruturado,
)

# Configuração de Logs
logger = logging.getLogger(__name__)

SCHEMAS_ESTRUTURADOS = {
    "quiz": QuizEstruturado,
    "essay": TopicoEstruturado,
    "essay-analysis": AvaliacaoEstruturada,
}


class ErroAssistente(RuntimeError):
    """Falha de transporte ou credencial ao chamar o LLM."""


def criar_llm(configuracao: Configuracao) -> BaseChatModel:
    """
    Instancia o modelo de chat do provedor configurado.

    Sem retentativas: uma falha do provedor vira erro da requisição.
    """
    provedor = configuracao.llm_provider

    if provedor == "openai":
        if not configuracao.openai_api_key:
            raise ErroAssistente("OPENAI_API_KEY não configurada")
        return ChatOpenAI(
            model=configuracao.modelo,
            temperature=configuracao.llm_temperature,
            api_key=configuracao.openai_api_key,
            timeout=configuracao.llm_timeout,
            max_retries=0,
        )

    if provedor == "google":
        if not configuracao.google_api_key:
            raise ErroAssistente("GOOGLE_API_KEY não configurada")
        return ChatGoogleGenerativeAI(
            model=configuracao.modelo,
            temperature=configuracao.llm_temperature,
            google_api_key=configuracao.google_api_key,
            timeout=configuracao.llm_timeout,
            max_retries=0,
        )

    raise ErroAssistente(f"Provedor de LLM desconhecido: {provedor}")


def _conteudo_texto(mensagem: Any) -> str:
    conteudo = getattr(mensagem, "content", mensagem)
    if isinstance(conteudo, list):
        partes = []
        for parte in conteudo:
            if isinstance(parte, str):
                partes.append(parte)
            elif isinstance(parte, dict) and parte.get("type") == "text":
                partes.append(parte.get("text", ""))
        return "".join(partes)
    return str(conteudo)


def formatar_resposta(tipo: str, texto: str) -> ModeloWire:
    """Converte o texto do LLM no formato de resposta do tipo pedido."""
    if tipo == "quiz":
        return interpretar_quiz(texto)
    if tipo == "essay":
        return interpretar_topico(texto)
    if tipo == "essay-analysis":
        return interpretar_analise(texto)
    return RespostaChat(response=texto)


def converter_estruturado(tipo: str, resultado: Any) -> Optional[ModeloWire]:
    """
    Normaliza a saída estruturada do LLM para os mesmos formatos dos parsers.
    Retorna None quando a saída não tem o conteúdo mínimo.
    """
    if tipo == "quiz":
        questoes = []
        for q in resultado.questoes:
            opcoes = [opcao.strip() for opcao in q.opcoes]
            questoes.append(
                QuestaoQuiz(
                    question=q.pergunta.strip(),
                    options=opcoes,
                    correct_answer=resolver_resposta(q.letra_correta.strip()[:1], opcoes),
                    explanation=q.explicacao.strip(),
                )
            )
        if not any(q.options for q in questoes):
            return None
        return QuizGerado(questions=questoes)

    if tipo == "essay":
        if not resultado.titulo.strip():
            return None
        return montar_topico(resultado.titulo.strip(), resultado.descricao.strip(), resultado.materiais)

    if tipo == "essay-analysis":
        # Cada item vai para a competência do seu número; repetidos e fora de 1..5 são descartados
        por_numero: Dict[int, Any] = {}
        for item in resultado.competencias:
            if 1 <= item.competencia <= len(NOMES_COMPETENCIAS) and item.competencia not in por_numero:
                por_numero[item.competencia] = item
        if not por_numero:
            return None
        numeros = sorted(por_numero)
        return montar_analise(
            [por_numero[n].nota for n in numeros],
            [por_numero[n].justificativa for n in numeros],
            resultado.comentario_geral.strip(),
            nomes=[NOMES_COMPETENCIAS[n - 1] for n in numeros],
        )

    return None


class AssistenteEduca:
    """
    Agente do assistente: monta o prompt, chama o LLM e estrutura a resposta.

    O LLM é criado sob demanda a partir da configuração, ou injetado.
    """

    def __init__(self, configuracao: Configuracao, llm: Optional[BaseChatModel] = None):
        self.configuracao = configuracao
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = criar_llm(self.configuracao)
        return self._llm

    def _preparar(self, requisicao: RequisicaoAssistente):
        com_dados = requisicao.type == "chat" and bool(requisicao.user_data)
        com_idioma = bool(requisicao.language)

        template = criar_template(requisicao.type, com_dados_usuario=com_dados, com_idioma=com_idioma)
        variaveis: Dict[str, Any] = {"prompt": requisicao.prompt}
        if com_dados:
            variaveis["dados_usuario"] = json.dumps(requisicao.user_data, ensure_ascii=False)
        if com_idioma:
            variaveis["idioma"] = requisicao.language
        return template, variaveis

    def _obter_llm(self) -> BaseChatModel:
        try:
            return self.llm
        except ErroAssistente:
            raise
        except Exception as e:
            logger.error(f"Erro ao criar o cliente do LLM: {e}")
            raise ErroAssistente(str(e)) from e

    async def _completar(self, template, variaveis: Dict[str, Any]) -> str:
        llm = self._obter_llm()
        try:
            resultado = await (template | llm).ainvoke(variaveis)
        except Exception as e:
            logger.error(f"Erro na chamada ao LLM: {e}")
            raise ErroAssistente(str(e)) from e
        return _conteudo_texto(resultado)

    async def _responder_estruturado(self, tipo: str, template, variaveis: Dict[str, Any]) -> Optional[ModeloWire]:
        llm = self._obter_llm()
        try:
            llm_estruturado = llm.with_structured_output(SCHEMAS_ESTRUTURADOS[tipo])
        except (NotImplementedError, ValueError):
            logger.warning(f"Modelo sem suporte a saída estruturada; usando texto livre ({tipo}).")
            return None
        except Exception as e:
            logger.error(f"Erro ao preparar a saída estruturada ({tipo}): {e}")
            raise ErroAssistente(str(e)) from e

        try:
            resultado = await (template | llm_estruturado).ainvoke(variaveis)
        except (OutputParserException, ValidationError, NotImplementedError) as e:
            logger.warning(f"Saída estruturada inválida ({tipo}): {e}. Usando texto livre.")
            return None
        except Exception as e:
            logger.error(f"Erro na chamada ao LLM: {e}")
            raise ErroAssistente(str(e)) from e

        if resultado is None:
            return None
        convertido = converter_estruturado(tipo, resultado)
        if convertido is None:
            logger.warning(f"Saída estruturada vazia ({tipo}). Usando texto livre.")
        return convertido

    async def responder(self, requisicao: RequisicaoAssistente) -> ModeloWire:
        """
        Atende uma requisição do SPA.

        Returns:
            ModeloWire: resposta de chat, quiz, tema ou análise. Falhas de
            parsing viram o objeto de falha do parser correspondente.

        Raises:
            ErroAssistente: se o LLM não puder ser chamado.
        """
        tipo = requisicao.type
        logger.info(f"Processando requisição {tipo}: {requisicao.prompt[:50]}...")

        template, variaveis = self._preparar(requisicao)

        if self.configuracao.saida_estruturada and tipo in TIPOS_ESTRUTURADOS:
            estruturado = await self._responder_estruturado(tipo, template, variaveis)
            if estruturado is not None:
                return estruturado

        texto = await self._completar(template, variaveis)
        logger.info("Resposta recebida do LLM")
        return formatar_resposta(tipo, texto)

    async def analisar_redacao(self, tema: str, texto_redacao: str) -> AnaliseRedacao:
        requisicao = RequisicaoAssistente(
            prompt=PROMPT_ANALISE_REDACAO.format(tema=tema, redacao=texto_redacao),
            type="essay-analysis",
        )
        return await self.responder(requisicao)
