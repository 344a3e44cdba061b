import asyncio
import logging
import math
import re
from typing import Optional

from google.api_core.exceptions import ResourceExhausted
from openai import RateLimitError
from sqlalchemy.orm import Session, sessionmaker

from shared.config import Configuracao, carregar_configuracao, configurar_logs
from shared.models import Essay, criar_engine, criar_sessao_factory
from shared.schemas import AnaliseRedacao
from worker.agents.core import AssistenteEduca, ErroAssistente
from worker.celery_app import celery_app

logger = logging.getLogger(__name__)

ERROS_LIMITE_TAXA = (ResourceExhausted, RateLimitError)
ESPERA_PADRAO = 60
MAX_RETENTATIVAS = 5

PADRAO_ESPERA = re.compile(r"(?:retry|try again) in (\d+\.?\d*)\s*(ms|s)?", re.IGNORECASE)

_configuracao: Optional[Configuracao] = None
_sessao_factory: Optional[sessionmaker] = None


def obter_configuracao() -> Configuracao:
    """Carrega a configuração do worker na primeira tarefa, não na importação."""
    global _configuracao
    if _configuracao is None:
        _configuracao = carregar_configuracao()
        configurar_logs(_configuracao)
    return _configuracao


def _abrir_sessao() -> Session:
    global _sessao_factory
    if _sessao_factory is None:
        _sessao_factory = criar_sessao_factory(criar_engine(obter_configuracao().database_url))
    return _sessao_factory()


def extrair_espera(erro: Exception) -> int:
    """Segundos até a próxima tentativa, conforme sugerido pelo provedor."""
    match = PADRAO_ESPERA.search(str(erro))
    if not match:
        logger.warning(f"Não foi possível extrair o tempo de espera. Usando padrão de {ESPERA_PADRAO}s.")
        return ESPERA_PADRAO

    espera = float(match.group(1))
    if (match.group(2) or "").lower() == "ms":
        espera = espera / 1000
    segundos = math.ceil(espera) + 1
    logger.warning(f"API sugeriu esperar {espera}s. Reagendando em {segundos}s.")
    return segundos


def processar_avaliacao(db: Session, redacao_id: int, assistente: AssistenteEduca) -> Optional[AnaliseRedacao]:
    """
    Corrige uma redação salva e grava o resultado.

    Com parsing bem-sucedido a nota total é gravada e a redação passa a
    "evaluated"; com falha de parsing a redação continua "submitted" e só a
    análise bruta é guardada.
    """
    redacao = db.query(Essay).filter(Essay.id == redacao_id).first()
    if not redacao:
        logger.error(f"Redação com ID {redacao_id} não encontrada.")
        return None

    if redacao.status == "evaluated":
        logger.info(f"Redação ID {redacao_id} já avaliada; ignorando.")
        return None

    logger.info(f"Iniciando avaliação da redação ID: {redacao_id}")
    analise = asyncio.run(assistente.analisar_redacao(redacao.title, redacao.content))

    redacao.resultado_json = analise.para_json()
    if analise.parsing_error:
        logger.warning(f"Análise da redação ID {redacao_id} não pôde ser estruturada.")
    else:
        redacao.score = analise.total_score
        redacao.status = "evaluated"
    db.commit()

    logger.info(f"Avaliação da redação ID {redacao_id} finalizada. Nota: {analise.total_score}")
    return analise


@celery_app.task(name="evaluate_essay", bind=True)
def avaliar_redacao(self, redacao_id: int):
    """
    Ponto de entrada da avaliação de redação em background.
    """
    db = _abrir_sessao()

    try:
        processar_avaliacao(db, redacao_id, AssistenteEduca(obter_configuracao()))

    except ErroAssistente as e:
        db.rollback()
        if isinstance(e.__cause__, ERROS_LIMITE_TAXA):
            logger.warning(f"Erro de Limite de Taxa (429) detectado: {e}")
            raise self.retry(exc=e, countdown=extrair_espera(e), max_retries=MAX_RETENTATIVAS)

        logger.error(f"Erro do LLM ao avaliar redação ID {redacao_id}: {e}")
        redacao = db.query(Essay).filter(Essay.id == redacao_id).first()
        if redacao:
            redacao.resultado_json = {"erro": str(e)}
            db.commit()

    except Exception as e:
        db.rollback()
        logger.error(f"Erro GERAL ao avaliar redação ID {redacao_id}: {e}")
    finally:
        db.close()
