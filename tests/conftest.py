"""Fixtures globais — banco em memória, LLM falso e fila falsa."""

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel

from backend.main import create_app
from shared.config import Configuracao
from shared.models import criar_engine, criar_sessao_factory
from worker.agents.core import AssistenteEduca


class FilaFalsa:
    def __init__(self):
        self.enviadas = []

    def send_task(self, nome, args=None, kwargs=None):
        self.enviadas.append((nome, args or [], kwargs or {}))


@pytest.fixture(autouse=True)
def sem_apis_reais(monkeypatch):
    """Nenhum teste depende de credenciais reais."""
    for nome in ("OPENAI_API_KEY", "GOOGLE_API_KEY", "LLM_PROVIDER", "LLM_MODEL", "LLM_STRUCTURED_OUTPUT"):
        monkeypatch.delenv(nome, raising=False)


@pytest.fixture
def configuracao():
    return Configuracao(database_url="sqlite://")


@pytest.fixture
def sessao_factory():
    return criar_sessao_factory(criar_engine("sqlite://"))


@pytest.fixture
def db(sessao_factory):
    sessao = sessao_factory()
    try:
        yield sessao
    finally:
        sessao.close()


@pytest.fixture
def fila():
    return FilaFalsa()


@pytest.fixture
def criar_assistente(configuracao):
    def _criar(*respostas, **opcoes):
        llm = opcoes.pop("llm", None) or FakeListChatModel(responses=list(respostas) or [""])
        config = configuracao.model_copy(update=opcoes)
        return AssistenteEduca(config, llm=llm)

    return _criar


@pytest.fixture
def criar_cliente(configuracao, sessao_factory, fila):
    def _criar(assistente=None, **opcoes):
        app = create_app(
            configuracao,
            assistente=assistente,
            sessao_factory=sessao_factory,
            fila=fila,
        )
        return TestClient(app, **opcoes)

    return _criar


@pytest.fixture
def client(criar_cliente, criar_assistente):
    return criar_cliente(criar_assistente("Olá! Como posso ajudar?"))
