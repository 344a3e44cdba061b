import logging
import re
from typing import List, Union

from shared.schemas import FalhaParsing, QuestaoQuiz, QuizGerado
from .texto import ErroParsing, linhas_nao_vazias

logger = logging.getLogger(__name__)

MENSAGEM_FALHA = "Failed to parse structured quiz"

# Uma questão começa com "N. " no início da linha
PADRAO_BLOCO = re.compile(r"^[ \t]*\d+\.\s+", re.MULTILINE)
PADRAO_OPCAO = re.compile(r"^([A-D])[.)]\s+(.+)$")
PADRAO_RESPOSTA = re.compile(r"(?:Resposta correta|Correct answer):?\s+([A-D])\b", re.IGNORECASE)
PADRAO_EXPLICACAO = re.compile(r"(?:Explicação|Explanation):?\s+(.+)", re.IGNORECASE)


def resolver_resposta(letra: str, opcoes: List[str]) -> str:
    """
    Converte a letra da resposta no texto da alternativa.

    Letra fora do intervalo de alternativas é devolvida como veio.
    """
    if not letra:
        return ""
    letra = letra.upper()
    indice = ord(letra) - ord("A")
    if 0 <= indice < len(opcoes):
        return opcoes[indice]
    return letra


def interpretar_bloco(bloco: str) -> QuestaoQuiz:
    linhas = linhas_nao_vazias(bloco)
    pergunta = linhas[0]

    opcoes: List[str] = []
    letra = ""
    explicacao = ""

    for linha in linhas[1:]:
        match = PADRAO_OPCAO.match(linha)
        if match:
            opcoes.append(match.group(2).strip())
            continue

        match = PADRAO_RESPOSTA.search(linha)
        if match:
            letra = match.group(1)
            continue

        match = PADRAO_EXPLICACAO.search(linha)
        if match:
            explicacao = match.group(1)
            continue

        # Linha solta depois das alternativas vira explicação
        if opcoes and not explicacao:
            explicacao += linha + " "

    return QuestaoQuiz(
        question=pergunta,
        options=opcoes,
        correct_answer=resolver_resposta(letra, opcoes),
        explanation=explicacao.strip(),
    )


def extrair_questoes(texto: str) -> List[QuestaoQuiz]:
    blocos = [bloco for bloco in PADRAO_BLOCO.split(texto) if bloco.strip()]
    if not blocos:
        raise ErroParsing("nenhuma questão encontrada")

    questoes = [interpretar_bloco(bloco) for bloco in blocos]
    if not any(questao.options for questao in questoes):
        raise ErroParsing("nenhuma alternativa encontrada")
    return questoes


def interpretar_quiz(texto: str) -> Union[QuizGerado, FalhaParsing]:
    """Transforma o texto livre do LLM em questões de quiz, ou no objeto de falha."""
    try:
        return QuizGerado(questions=extrair_questoes(texto))
    except Exception as e:
        logger.error(f"Erro ao interpretar quiz: {e}")
        return FalhaParsing(raw_response=texto, error=MENSAGEM_FALHA)
