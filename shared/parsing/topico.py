import logging
from itertools import islice
from typing import Iterable, List, Tuple

from shared.schemas import MaterialApoio, TopicoRedacao
from .texto import (
    URL_PADRAO,
    ErroParsing,
    extrair_campo_rotulado,
    extrair_itens_lista,
    linhas_nao_vazias,
)

logger = logging.getLogger(__name__)

TOTAL_MATERIAIS = 3
PRAZO_PADRAO = "7 dias"
MENSAGEM_FALHA = "Failed to parse structured essay topic"

ROTULOS_TITULO = ("Título", "Title")
ROTULOS_DESCRICAO = ("Descrição", "Description")


def material_padrao(numero: int) -> MaterialApoio:
    return MaterialApoio(title=f"Material de apoio {numero}", url=URL_PADRAO)


def completar_materiais(materiais: Iterable[MaterialApoio]) -> List[MaterialApoio]:
    """Garante exatamente TOTAL_MATERIAIS itens: completa com placeholders ou corta o excesso."""
    resultado = list(islice(materiais, TOTAL_MATERIAIS))
    while len(resultado) < TOTAL_MATERIAIS:
        resultado.append(material_padrao(len(resultado) + 1))
    return resultado


def _materiais_por_linha(linhas: List[str]) -> List[Tuple[str, str]]:
    # Fallback: linhas 2 a 4, "titulo: url"
    pares = []
    for linha in linhas[2:5]:
        titulo, separador, url = linha.partition(":")
        if separador:
            pares.append((titulo.strip(), url.strip() or URL_PADRAO))
        else:
            pares.append((linha, URL_PADRAO))
    return pares


def montar_topico(titulo: str, descricao: str, materiais: Iterable[MaterialApoio]) -> TopicoRedacao:
    return TopicoRedacao(
        title=titulo,
        description=descricao,
        materials=completar_materiais(materiais),
        deadline=PRAZO_PADRAO,
    )


def topico_padrao(texto: str) -> TopicoRedacao:
    return TopicoRedacao(
        title="Tópico de Redação",
        description="Não foi possível analisar o tema corretamente.",
        materials=completar_materiais([]),
        deadline=PRAZO_PADRAO,
        raw_response=texto,
        error=MENSAGEM_FALHA,
    )


def extrair_topico(texto: str) -> TopicoRedacao:
    linhas = linhas_nao_vazias(texto)
    if not linhas:
        raise ErroParsing("resposta vazia")

    titulo = extrair_campo_rotulado(texto, ROTULOS_TITULO, indice_fallback=0)
    descricao = extrair_campo_rotulado(texto, ROTULOS_DESCRICAO, indice_fallback=1)

    pares = list(islice(extrair_itens_lista(texto), TOTAL_MATERIAIS))
    if not pares:
        pares = _materiais_por_linha(linhas)

    materiais = [MaterialApoio(title=titulo_material, url=url) for titulo_material, url in pares]
    return montar_topico(titulo, descricao, materiais)


def interpretar_topico(texto: str) -> TopicoRedacao:
    """Transforma o texto livre do LLM em um tema de redação com 3 materiais."""
    try:
        return extrair_topico(texto)
    except Exception as e:
        logger.error(f"Erro ao interpretar tema de redação: {e}")
        return topico_padrao(texto)
