import logging
import re
from typing import List, Optional, Sequence

from shared.schemas import AnaliseRedacao, CompetenciaAvaliada
from .texto import ErroParsing, extrair_notas

logger = logging.getLogger(__name__)

# Ordem oficial das 5 competências do ENEM
NOMES_COMPETENCIAS = [
    "Domínio da norma culta",
    "Compreensão da proposta",
    "Capacidade de argumentação",
    "Construção lógica",
    "Proposta de intervenção",
]

NOTA_MAXIMA_COMPETENCIA = 200
NOTA_MAXIMA_TOTAL = 1000
LIMITE_BOM = 160
LIMITE_RUIM = 120
FEEDBACK_PADRAO = "Sem feedback específico."

ROTULOS_COMENTARIO_GERAL = ("Comentário Geral", "General Feedback")


def classificar_nota(nota: int) -> str:
    if nota >= LIMITE_BOM:
        return "good"
    if nota < LIMITE_RUIM:
        return "bad"
    return "medium"


def extrair_comentario_geral(texto: str) -> str:
    # Tudo depois do rótulo até o fim do texto
    for rotulo in ROTULOS_COMENTARIO_GERAL:
        match = re.search(r"%s[:*\s]+(.+)$" % re.escape(rotulo), texto, re.IGNORECASE | re.DOTALL)
        if match:
            return match.group(1).strip()
    return ""


def extrair_feedback_competencia(texto: str, nome: str) -> str:
    match = re.search(r"%s[:\s]+([^\n]+)" % re.escape(nome), texto, re.IGNORECASE)
    return match.group(1).strip() if match else FEEDBACK_PADRAO


def _limitar(nota: int) -> int:
    if nota > NOTA_MAXIMA_COMPETENCIA:
        logger.warning(f"Nota {nota} acima de {NOTA_MAXIMA_COMPETENCIA}; limitando.")
        return NOTA_MAXIMA_COMPETENCIA
    return max(nota, 0)


def montar_analise(
    notas: Sequence[int],
    feedbacks: Sequence[str],
    comentario_geral: str,
    nomes: Sequence[str] = NOMES_COMPETENCIAS,
) -> AnaliseRedacao:
    """
    Monta a análise a partir das notas na ordem das competências.

    `nomes` permite atribuir as notas a competências específicas quando
    alguma delas não foi avaliada.

    Competências sem nota são omitidas (sem preenchimento), e a nota total é
    a soma apenas das notas atribuídas.
    """
    competencias: List[CompetenciaAvaliada] = []
    for nome, nota, feedback in zip(nomes, notas, feedbacks):
        nota = _limitar(nota)
        competencias.append(
            CompetenciaAvaliada(
                name=nome,
                score=nota,
                max_score=NOTA_MAXIMA_COMPETENCIA,
                feedback=feedback or FEEDBACK_PADRAO,
                status=classificar_nota(nota),
            )
        )

    return AnaliseRedacao(
        total_score=sum(c.score for c in competencias),
        max_score=NOTA_MAXIMA_TOTAL,
        competencies=competencias,
        general_feedback=comentario_geral,
    )


def extrair_analise(texto: str) -> AnaliseRedacao:
    notas = extrair_notas(texto, "/%d" % NOTA_MAXIMA_COMPETENCIA)
    if not notas:
        raise ErroParsing("nenhuma nota de competência encontrada")

    feedbacks = [extrair_feedback_competencia(texto, nome) for nome in NOMES_COMPETENCIAS]
    return montar_analise(notas, feedbacks, extrair_comentario_geral(texto))


def analise_com_erro(texto: Optional[str]) -> AnaliseRedacao:
    return AnaliseRedacao(
        total_score=0,
        max_score=NOTA_MAXIMA_TOTAL,
        competencies=[],
        general_feedback=texto or "",
        parsing_error=True,
    )


def interpretar_analise(texto: str) -> AnaliseRedacao:
    """Transforma a correção em texto livre nas 5 competências e no comentário geral."""
    try:
        return extrair_analise(texto)
    except Exception as e:
        logger.error(f"Erro ao interpretar análise de redação: {e}")
        return analise_com_erro(texto)
