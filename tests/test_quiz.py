"""Parser de quiz"""

from shared.parsing.quiz import interpretar_quiz, resolver_resposta
from shared.schemas import FalhaParsing, QuizGerado

QUIZ_DUAS_QUESTOES = """1. Qual é a capital do Brasil?
A. São Paulo
B. Rio de Janeiro
C. Brasília
D. Salvador
Resposta correta: C
Explicação: Brasília é a capital desde 1960.

2. Quanto é 3 x 3?
A. 6
B. 9
C. 12
D. 33
Correct answer: B
Explanation: Multiplication table.
"""


def test_cenario_basico():
    texto = "1. What is 2+2?\nA. 3\nB. 4\nC. 5\nD. 6\nResposta correta: B\nExplicação: Basic arithmetic."
    resultado = interpretar_quiz(texto)

    assert isinstance(resultado, QuizGerado)
    assert len(resultado.questions) == 1
    questao = resultado.questions[0]
    assert questao.question == "What is 2+2?"
    assert questao.options == ["3", "4", "5", "6"]
    assert questao.correct_answer == "4"
    assert questao.explanation == "Basic arithmetic."


def test_resposta_corresponde_a_alternativa():
    resultado = interpretar_quiz(QUIZ_DUAS_QUESTOES)

    assert [q.question for q in resultado.questions] == ["Qual é a capital do Brasil?", "Quanto é 3 x 3?"]
    for questao, letra in zip(resultado.questions, "CB"):
        assert len(questao.options) == 4
        assert questao.correct_answer == questao.options[ord(letra) - ord("A")]
    assert resultado.questions[1].explanation == "Multiplication table."


def test_json_usa_chaves_do_spa():
    dados = interpretar_quiz(QUIZ_DUAS_QUESTOES).para_json()
    assert set(dados["questions"][0]) == {"question", "options", "correctAnswer", "explanation"}
    assert dados["questions"][0]["correctAnswer"] == "Brasília"


def test_letra_fora_do_intervalo_fica_crua():
    texto = "1. Pergunta curta?\nA. Sim\nB. Não\nResposta correta: D\nExplicação: Só há duas."
    questao = interpretar_quiz(texto).questions[0]
    assert questao.options == ["Sim", "Não"]
    assert questao.correct_answer == "D"


def test_sem_linha_de_resposta():
    texto = "1. Pergunta?\nA. um\nB. dois\nC. três\nD. quatro\nExplicação: sem gabarito."
    questao = interpretar_quiz(texto).questions[0]
    assert questao.correct_answer == ""
    assert questao.explanation == "sem gabarito."


def test_letra_minuscula_e_alternativa_com_parenteses():
    texto = "1. Cor do céu?\nA) verde\nB) azul\nresposta correta: b"
    questao = interpretar_quiz(texto).questions[0]
    assert questao.options == ["verde", "azul"]
    assert questao.correct_answer == "azul"


def test_linha_solta_vira_explicacao():
    texto = "1. Pergunta?\nA. x\nB. y\nResposta correta: A\nPorque x é o certo.\nOutra linha ignorada."
    questao = interpretar_quiz(texto).questions[0]
    assert questao.explanation == "Porque x é o certo."


def test_linha_antes_das_alternativas_e_ignorada():
    texto = "1. Pergunta?\nContexto adicional\nA. x\nB. y"
    questao = interpretar_quiz(texto).questions[0]
    assert questao.options == ["x", "y"]
    assert questao.explanation == ""


def test_numero_no_meio_da_linha_nao_divide_questao():
    texto = "1. Em que ano terminou a 2. Guerra Mundial?\nA. 1945\nB. 1939\nResposta correta: A"
    resultado = interpretar_quiz(texto)
    assert len(resultado.questions) == 1
    assert resultado.questions[0].correct_answer == "1945"


def test_texto_vazio_retorna_falha():
    resultado = interpretar_quiz("   \n ")
    assert isinstance(resultado, FalhaParsing)
    assert resultado.para_json() == {"rawResponse": "   \n ", "error": "Failed to parse structured quiz"}


def test_texto_sem_alternativas_retorna_falha():
    texto = "Desculpe, não consigo gerar questões sobre isso."
    resultado = interpretar_quiz(texto)
    assert isinstance(resultado, FalhaParsing)
    assert resultado.raw_response == texto


def test_funcao_pura():
    assert interpretar_quiz(QUIZ_DUAS_QUESTOES) == interpretar_quiz(QUIZ_DUAS_QUESTOES)


def test_resolver_resposta():
    assert resolver_resposta("a", ["x", "y"]) == "x"
    assert resolver_resposta("C", ["x", "y"]) == "C"
    assert resolver_resposta("", ["x"]) == ""
