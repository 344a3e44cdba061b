"""
Utilitários de extração de texto reaproveitados pelos parsers.

Todos operam sobre a saída em texto livre do LLM e nunca levantam exceção
por conteúdo ausente: devolvem string vazia ou sequência vazia.
"""

import re
from typing import Iterator, List, Optional, Sequence, Tuple

URL_PADRAO = "#"


class ErroParsing(ValueError):
    """A estrutura esperada não foi encontrada na resposta do LLM."""


# Prefixo de item de lista no início da linha: "1.", "•" ou "-"
PADRAO_ITEM_LISTA = re.compile(
    r"^[ \t]*(?:\d+\.|•|-)[ \t]*(?:Material[ \t]*\d+:)?[ \t]*"
    r"(.+?)(?:[ \t]*(?:URL|Link):[ \t]*(.+?))?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)

# "Título do material: https://..." (URL depois de dois-pontos)
PADRAO_TITULO_URL = re.compile(r"^(.+?):\s*(https?://\S+)$")


def linhas_nao_vazias(texto: str) -> List[str]:
    return [linha.strip() for linha in texto.split("\n") if linha.strip()]


def extrair_campo_rotulado(
    texto: str,
    rotulos: Sequence[str],
    indice_fallback: Optional[int] = None,
) -> str:
    """
    Extrai o conteúdo de um campo rotulado (ex.: "Título: ...") até o fim da linha.

    Args:
        texto: Texto livre retornado pelo LLM.
        rotulos: Rótulos aceitos, comparados sem diferenciar maiúsculas.
        indice_fallback: Linha não vazia usada quando nenhum rótulo aparece.

    Returns:
        str: O conteúdo do campo, a linha de fallback ou "" se não houver.
    """
    alternativas = "|".join(re.escape(rotulo) for rotulo in rotulos)
    padrao = re.compile(r"(?:%s)\**:\**\s*([^\n]+)" % alternativas, re.IGNORECASE)

    match = padrao.search(texto)
    if match:
        return match.group(1).strip()

    if indice_fallback is None:
        return ""

    linhas = linhas_nao_vazias(texto)
    if indice_fallback < len(linhas):
        return linhas[indice_fallback]
    return ""


def separar_titulo_url(item: str) -> Tuple[str, str]:
    match = PADRAO_TITULO_URL.match(item.strip())
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return item.strip(), URL_PADRAO


def extrair_itens_lista(texto: str) -> Iterator[Tuple[str, str]]:
    """Percorre os itens numerados/marcados do texto, em ordem, como pares (título, url)."""
    for match in PADRAO_ITEM_LISTA.finditer(texto):
        titulo, url = match.group(1), match.group(2)
        # separadores markdown ("---") não são itens
        if not re.search(r"\w", titulo):
            continue
        if url:
            yield titulo.strip().rstrip("-–—:").strip(), url.strip()
        else:
            yield separar_titulo_url(titulo)


def extrair_notas(texto: str, denominador: str = "/200") -> List[int]:
    """Inteiros imediatamente antes do denominador, na ordem em que aparecem."""
    padrao = re.compile(r"(\d+)%s(?!\d)" % re.escape(denominador))
    return [int(numero) for numero in padrao.findall(texto)]
