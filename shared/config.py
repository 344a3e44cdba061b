import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

MODELOS_PADRAO = {
    "openai": "gpt-3.5-turbo",
    "google": "models/gemini-flash-latest",
}


class Configuracao(BaseModel):
    """
    Configuração explícita do serviço, construída uma única vez e repassada
    para a API, o assistente, o worker e o banco.
    """

    llm_provider: str = "openai"
    llm_model: Optional[str] = None
    llm_temperature: float = 0.7
    llm_timeout: float = 60.0
    openai_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    saida_estruturada: bool = False

    database_url: Optional[str] = None

    cors_origin: str = "*"
    log_level: str = "INFO"

    @property
    def modelo(self) -> str:
        return self.llm_model or MODELOS_PADRAO.get(self.llm_provider, MODELOS_PADRAO["openai"])


def _env_bool(nome: str, padrao: bool = False) -> bool:
    valor = os.getenv(nome)
    if valor is None:
        return padrao
    return valor.strip().lower() in ("1", "true", "yes", "sim", "on")


def carregar_configuracao() -> Configuracao:
    """Lê o .env (se existir) e as variáveis de ambiente."""
    load_dotenv()

    return Configuracao(
        llm_provider=os.getenv("LLM_PROVIDER", "openai").lower(),
        llm_model=os.getenv("LLM_MODEL") or None,
        llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        llm_timeout=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        saida_estruturada=_env_bool("LLM_STRUCTURED_OUTPUT"),
        database_url=os.getenv("DATABASE_URL"),
        cors_origin=os.getenv("CORS_ALLOW_ORIGIN", "*"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configurar_logs(configuracao: Configuracao) -> None:
    # basicConfig é no-op se o root logger já tiver handlers
    logging.basicConfig(
        level=configuracao.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
