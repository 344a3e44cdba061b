from typing import Dict

from langchain_core.prompts import ChatPromptTemplate

from shared.parsing.analise import NOMES_COMPETENCIAS

PROMPT_BASE = "Você é um assistente prestativo de uma plataforma educacional chamada Educa. "

PROMPT_PADRAO = "Forneça informações úteis e educativas para os estudantes."

# Instruções por tipo de requisição. O formato pedido é o contrato lido pelos parsers.
INSTRUCOES_POR_TIPO: Dict[str, str] = {
    "chat": (
        "Você ajuda estudantes com dúvidas sobre a plataforma e dá conselhos acadêmicos "
        "personalizados com base nos dados deles. Seja amigável, prestativo e educativo."
    ),
    "quiz": (
        "Você gera questões de quiz educativas sobre o tema informado. Para cada questão, forneça:\n"
        "1) O enunciado numerado (ex.: \"1. Enunciado\"),\n"
        "2) Quatro alternativas, uma por linha, rotuladas \"A.\", \"B.\", \"C.\" e \"D.\",\n"
        "3) Uma linha \"Resposta correta: <letra>\",\n"
        "4) Uma linha \"Explicação: <texto>\" explicando por que a resposta está correta.\n"
        "Gere exatamente a quantidade de questões pedida, sempre no mesmo formato."
    ),
    "essay": (
        "Você gera temas de redação com materiais de apoio. Forneça:\n"
        "Título: <um título instigante>\n"
        "Descrição: <uma breve descrição do tema>\n"
        "e uma lista numerada com exatamente 3 materiais de apoio (artigos, vídeos, infográficos), "
        "no formato \"1. <título do material> - URL: <link>\". "
        "O tema deve ser desafiador, mas adequado ao ensino médio ou à graduação."
    ),
    "essay-analysis": (
        "Você avalia redações com base nas cinco competências do ENEM: "
        + ", ".join(NOMES_COMPETENCIAS)
        + ". Para cada competência escreva uma linha \"<nome da competência>: <nota>/200 - <feedback>\", "
        "com nota de 0 a 200, na ordem acima. Termine com \"Comentário Geral: <texto>\"."
    ),
}

TIPOS_ESTRUTURADOS = ("quiz", "essay", "essay-analysis")

PROMPT_ANALISE_REDACAO = "Tema: {tema}\n\nRedação do aluno:\n{redacao}"


def montar_prompt_sistema(tipo: str, com_dados_usuario: bool, com_idioma: bool) -> str:
    """
    Monta o texto do prompt de sistema. Dados do usuário e idioma entram como
    variáveis do template, para que chaves no JSON não sejam interpretadas.
    """
    sistema = PROMPT_BASE + INSTRUCOES_POR_TIPO.get(tipo, PROMPT_PADRAO)
    if tipo == "chat" and com_dados_usuario:
        sistema += "\n\nDados do usuário: {dados_usuario}"
    if com_idioma:
        sistema += "\n\nResponda no idioma: {idioma}"
    return sistema


def criar_template(tipo: str, com_dados_usuario: bool = False, com_idioma: bool = False) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", montar_prompt_sistema(tipo, com_dados_usuario, com_idioma)),
            ("human", "{prompt}"),
        ]
    )
