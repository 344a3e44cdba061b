"""Utilitários de extração de texto"""

import types

from shared.parsing.texto import (
    extrair_campo_rotulado,
    extrair_itens_lista,
    extrair_notas,
    linhas_nao_vazias,
)


class TestCampoRotulado:
    def test_rotulo_portugues(self):
        texto = "Título: Desafios da mobilidade urbana\nDescrição: Discuta o tema."
        assert extrair_campo_rotulado(texto, ("Título", "Title")) == "Desafios da mobilidade urbana"

    def test_rotulo_ingles_sem_diferenciar_maiusculas(self):
        texto = "TITLE: Climate change\nsomething else"
        assert extrair_campo_rotulado(texto, ("Título", "Title")) == "Climate change"

    def test_rotulo_em_negrito(self):
        texto = "**Título:** Educação financeira nas escolas"
        assert extrair_campo_rotulado(texto, ("Título",)) == "Educação financeira nas escolas"

    def test_fallback_posicional(self):
        texto = "\nPrimeira linha\n\n  Segunda linha  \n"
        assert extrair_campo_rotulado(texto, ("Descrição",), indice_fallback=1) == "Segunda linha"

    def test_fallback_alem_do_fim(self):
        assert extrair_campo_rotulado("só uma linha", ("Descrição",), indice_fallback=3) == ""

    def test_sem_fallback(self):
        assert extrair_campo_rotulado("nada aqui", ("Título",)) == ""


class TestItensLista:
    def test_retorna_gerador(self):
        assert isinstance(extrair_itens_lista("- item"), types.GeneratorType)

    def test_prefixos_e_ordem(self):
        texto = "Introdução\n1. Primeiro\n• Segundo\n- Terceiro\n"
        assert list(extrair_itens_lista(texto)) == [
            ("Primeiro", "#"),
            ("Segundo", "#"),
            ("Terceiro", "#"),
        ]

    def test_marcador_url_e_link(self):
        texto = (
            "1. Material 1: Artigo sobre o SUS - URL: https://exemplo.org/sus\n"
            "2. Vídeo explicativo Link: https://video.example/abc\n"
        )
        assert list(extrair_itens_lista(texto)) == [
            ("Artigo sobre o SUS", "https://exemplo.org/sus"),
            ("Vídeo explicativo", "https://video.example/abc"),
        ]

    def test_url_depois_de_dois_pontos(self):
        texto = "- Infográfico do IBGE: https://ibge.gov.br/info"
        assert list(extrair_itens_lista(texto)) == [("Infográfico do IBGE", "https://ibge.gov.br/info")]

    def test_ignora_separador_markdown(self):
        assert list(extrair_itens_lista("---\n- Item real")) == [("Item real", "#")]

    def test_texto_sem_itens(self):
        assert list(extrair_itens_lista("Nenhuma lista aqui.")) == []


class TestNotas:
    def test_ordem_de_aparicao(self):
        texto = "C1: 180/200\nC2: 40/200 e C3: 200/200"
        assert extrair_notas(texto, "/200") == [180, 40, 200]

    def test_ignora_outros_denominadores(self):
        assert extrair_notas("Nota final 900/1000, ano 2023/2024, C1 160/200", "/200") == [160]

    def test_nenhuma_nota(self):
        assert extrair_notas("sem notas", "/200") == []


def test_linhas_nao_vazias():
    assert linhas_nao_vazias("  a \n\n \t\nb") == ["a", "b"]
