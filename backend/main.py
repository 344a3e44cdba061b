import logging
import os
from typing import Any, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
import uvicorn

from backend.database import get_db
from backend.progresso import obter_progresso, obter_ranking
from shared import models, schemas
from shared.config import Configuracao, carregar_configuracao, configurar_logs
from worker.agents.core import AssistenteEduca, ErroAssistente

logger = logging.getLogger(__name__)

CABECALHOS_PERMITIDOS = "authorization, x-client-info, apikey, content-type"
METODOS_PERMITIDOS = "GET, POST, PUT, PATCH, OPTIONS"


def get_assistente(request: Request) -> AssistenteEduca:
    return request.app.state.assistente


def get_fila(request: Request):
    fila = request.app.state.fila
    if fila is None:
        from worker.celery_app import celery_app

        fila = request.app.state.fila = celery_app
    return fila


def _buscar_redacao(db: Session, essay_id: int) -> models.Essay:
    redacao = db.query(models.Essay).filter(models.Essay.id == essay_id).first()
    if redacao is None:
        raise HTTPException(status_code=404, detail="Redação não encontrada")
    return redacao


def create_app(
    configuracao: Optional[Configuracao] = None,
    assistente: Optional[AssistenteEduca] = None,
    sessao_factory: Any = None,
    fila: Any = None,
) -> FastAPI:
    """
    Cria a API. Dependências não informadas são construídas a partir da
    configuração (ou das variáveis de ambiente).
    """
    configuracao = configuracao or carregar_configuracao()
    configurar_logs(configuracao)

    app = FastAPI(title="API do Assistente Educa", version="1.0.0")
    app.state.configuracao = configuracao
    app.state.assistente = assistente or AssistenteEduca(configuracao)
    app.state.sessao_factory = sessao_factory or models.criar_sessao_factory(
        models.criar_engine(configuracao.database_url)
    )
    app.state.fila = fila

    cabecalhos_cors = {
        "Access-Control-Allow-Origin": configuracao.cors_origin,
        "Access-Control-Allow-Headers": CABECALHOS_PERMITIDOS,
        "Access-Control-Allow-Methods": METODOS_PERMITIDOS,
    }

    @app.middleware("http")
    async def aplicar_cors(request: Request, call_next):
        # Preflight responde sem corpo
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=cabecalhos_cors)
        response = await call_next(request)
        response.headers.update(cabecalhos_cors)
        return response

    # Roda fora do middleware http, então os cabeçalhos CORS vão explícitos
    @app.exception_handler(Exception)
    async def erro_inesperado(request: Request, exc: Exception):
        logger.error(f"Erro inesperado em {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)}, headers=cabecalhos_cors)

    @app.get("/", summary="Endpoint raiz da API")
    def read_root():
        return {"message": "API do Assistente Educa no ar!"}

    @app.post("/api/v1/ai-assistant", summary="Chat, quiz, tema e análise de redação via LLM")
    async def assistente_ia(
        requisicao: schemas.RequisicaoAssistente,
        assistente: AssistenteEduca = Depends(get_assistente),
    ):
        try:
            resultado = await assistente.responder(requisicao)
        except ErroAssistente as e:
            logger.error(f"Erro no assistente de IA: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})
        return resultado.para_json()

    @app.put(
        "/api/v1/users/{user_id}/profile",
        response_model=schemas.PerfilUsuarioOut,
        summary="Criar ou atualizar o perfil do usuário",
    )
    def salvar_perfil(user_id: str, perfil: schemas.PerfilUsuario, db: Session = Depends(get_db)):
        info = db.query(models.UserInfo).filter(models.UserInfo.id == user_id).first()
        if info is None:
            info = models.UserInfo(id=user_id)
            db.add(info)
        for campo, valor in perfil.model_dump().items():
            setattr(info, campo, valor)
        db.commit()
        db.refresh(info)
        return info

    @app.post(
        "/api/v1/quiz-results",
        response_model=schemas.QuizResultadoOut,
        status_code=201,
        summary="Registrar o resultado de um quiz",
    )
    def registrar_quiz(resultado: schemas.QuizResultadoCreate, db: Session = Depends(get_db)):
        db_resultado = models.QuizResult(**resultado.model_dump())
        db.add(db_resultado)
        db.commit()
        db.refresh(db_resultado)
        return db_resultado

    @app.get(
        "/api/v1/users/{user_id}/quiz-results",
        response_model=List[schemas.QuizResultadoOut],
        summary="Listar os quizzes do usuário (mais recentes primeiro)",
    )
    def listar_quizzes(user_id: str, db: Session = Depends(get_db)):
        return (
            db.query(models.QuizResult)
            .filter(models.QuizResult.user_id == user_id)
            .order_by(models.QuizResult.created_at.desc(), models.QuizResult.id.desc())
            .all()
        )

    @app.post(
        "/api/v1/essays",
        response_model=schemas.RedacaoOut,
        status_code=201,
        summary="Submeter uma redação",
    )
    def submeter_redacao(redacao: schemas.RedacaoCreate, db: Session = Depends(get_db)):
        dados = redacao.model_dump()
        if dados["word_count"] is None:
            dados["word_count"] = len(redacao.content.split())
        db_redacao = models.Essay(**dados, status="submitted")
        db.add(db_redacao)
        db.commit()
        db.refresh(db_redacao)
        return db_redacao

    @app.get(
        "/api/v1/users/{user_id}/essays",
        response_model=List[schemas.RedacaoOut],
        summary="Listar as redações do usuário (mais recentes primeiro)",
    )
    def listar_redacoes(user_id: str, db: Session = Depends(get_db)):
        return (
            db.query(models.Essay)
            .filter(models.Essay.user_id == user_id)
            .order_by(models.Essay.created_at.desc(), models.Essay.id.desc())
            .all()
        )

    @app.patch(
        "/api/v1/essays/{essay_id}/score",
        response_model=schemas.RedacaoOut,
        summary="Registrar a nota de uma redação",
    )
    def atualizar_nota(essay_id: int, nota: schemas.NotaRedacaoUpdate, db: Session = Depends(get_db)):
        redacao = _buscar_redacao(db, essay_id)
        if redacao.status == "evaluated":
            raise HTTPException(status_code=409, detail="Redação já avaliada")
        redacao.score = nota.score
        redacao.status = "evaluated"
        db.commit()
        db.refresh(redacao)
        return redacao

    @app.post(
        "/api/v1/essays/{essay_id}/evaluation",
        response_model=schemas.RedacaoStatus,
        status_code=202,
        summary="Enfileirar a correção automática de uma redação",
    )
    def enfileirar_avaliacao(essay_id: int, db: Session = Depends(get_db), fila=Depends(get_fila)):
        redacao = _buscar_redacao(db, essay_id)
        if redacao.status == "evaluated":
            raise HTTPException(status_code=409, detail="Redação já avaliada")

        fila.send_task("evaluate_essay", args=[redacao.id])

        return {
            "id": redacao.id,
            "status": redacao.status,
            "message": "Sua redação foi recebida e está na fila para correção.",
        }

    @app.get("/api/v1/ranking", response_model=schemas.RankingOut, summary="Top 3 e posição do usuário")
    def ranking(user_id: Optional[str] = None, db: Session = Depends(get_db)):
        return obter_ranking(db, user_id)

    @app.get(
        "/api/v1/users/{user_id}/progress",
        response_model=schemas.ProgressoOut,
        summary="Estatísticas de progresso do usuário",
    )
    def progresso(user_id: str, db: Session = Depends(get_db)):
        return obter_progresso(db, user_id)

    return app


def main():
    """Sobe a API com o uvicorn (HOST/PORT do ambiente)."""
    uvicorn.run(
        create_app,
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
