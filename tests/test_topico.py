"""Parser de tema de redação"""

import pytest

from shared.parsing.topico import completar_materiais, interpretar_topico
from shared.schemas import MaterialApoio

TOPICO_COMPLETO = """Título: O impacto das redes sociais na saúde mental dos jovens
Descrição: Discuta como o uso intenso das redes afeta o bem-estar dos adolescentes.

Materiais de apoio:
1. Material 1: Relatório da OMS - URL: https://who.int/relatorio
2. Vídeo: Documentário O Dilema das Redes
3. Infográfico sobre tempo de tela Link: https://exemplo.org/tela
"""


def test_topico_rotulado():
    topico = interpretar_topico(TOPICO_COMPLETO)

    assert topico.title == "O impacto das redes sociais na saúde mental dos jovens"
    assert topico.description.startswith("Discuta como o uso intenso")
    assert topico.deadline == "7 dias"
    assert topico.error is None
    assert [m.title for m in topico.materials] == [
        "Relatório da OMS",
        "Vídeo: Documentário O Dilema das Redes",
        "Infográfico sobre tempo de tela",
    ]
    assert [m.url for m in topico.materials] == ["https://who.int/relatorio", "#", "https://exemplo.org/tela"]


def test_fallback_posicional_sem_rotulos():
    texto = "Os desafios da educação a distância\nReflita sobre o ensino remoto no Brasil.\n- Artigo da Folha"
    topico = interpretar_topico(texto)

    assert topico.title == "Os desafios da educação a distância"
    assert topico.description == "Reflita sobre o ensino remoto no Brasil."
    assert topico.materials[0] == MaterialApoio(title="Artigo da Folha", url="#")
    assert topico.materials[1].title == "Material de apoio 2"
    assert topico.materials[2].title == "Material de apoio 3"


def test_fallback_de_materiais_por_linha():
    texto = (
        "Tema livre\n"
        "Descrição curta\n"
        "Artigo: https://a.org/x\n"
        "Livro Vidas Secas\n"
        "Podcast:\n"
        "Linha extra ignorada"
    )
    topico = interpretar_topico(texto)

    assert [(m.title, m.url) for m in topico.materials] == [
        ("Artigo", "https://a.org/x"),
        ("Livro Vidas Secas", "#"),
        ("Podcast", "#"),
    ]


@pytest.mark.parametrize("quantidade", [0, 1, 5, 10])
def test_sempre_tres_materiais(quantidade):
    itens = "\n".join(f"{i}. Material número {i}" for i in range(1, quantidade + 1))
    texto = f"Título: Tema\nDescrição: Desc\n{itens}"
    topico = interpretar_topico(texto)

    assert len(topico.materials) == 3
    if quantidade >= 3:
        assert [m.title for m in topico.materials] == ["Material número 1", "Material número 2", "Material número 3"]


def test_texto_vazio_retorna_topico_padrao():
    topico = interpretar_topico("")

    assert topico.error == "Failed to parse structured essay topic"
    assert topico.raw_response == ""
    assert topico.title == "Tópico de Redação"
    assert [m.title for m in topico.materials] == [
        "Material de apoio 1",
        "Material de apoio 2",
        "Material de apoio 3",
    ]
    assert topico.para_json()["rawResponse"] == ""


def test_json_sem_campos_de_erro_quando_ok():
    dados = interpretar_topico(TOPICO_COMPLETO).para_json()
    assert set(dados) == {"title", "description", "materials", "deadline"}


def test_completar_materiais_corta_excesso():
    materiais = [MaterialApoio(title=str(i)) for i in range(5)]
    assert [m.title for m in completar_materiais(materiais)] == ["0", "1", "2"]


def test_funcao_pura():
    assert interpretar_topico(TOPICO_COMPLETO) == interpretar_topico(TOPICO_COMPLETO)
