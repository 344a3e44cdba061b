"""
Ranking e estatísticas de progresso dos estudantes.

A pontuação de um usuário é a soma das notas dos quizzes com as notas das
redações já avaliadas.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from shared.models import Essay, QuizResult, UserInfo
from shared.schemas import PosicaoRanking, ProgressoMateria, ProgressoOut, RankingOut

TOP_RANKING = 3
DIAS_MAXIMOS_SEQUENCIA = 30


def _nome_exibicao(info: Optional[UserInfo]) -> str:
    if info is None:
        return "Usuário"
    if info.full_name:
        return info.full_name
    if info.email:
        return info.email.split("@")[0]
    return "Usuário"


def calcular_pontos(db: Session) -> Dict[str, int]:
    pontos: Dict[str, int] = {}

    for user_id, score in db.query(QuizResult.user_id, QuizResult.score).order_by(QuizResult.id):
        pontos[user_id] = pontos.get(user_id, 0) + int(score or 0)

    redacoes = (
        db.query(Essay.user_id, Essay.score)
        .filter(Essay.status == "evaluated", Essay.score.isnot(None))
        .order_by(Essay.id)
    )
    for user_id, score in redacoes:
        pontos[user_id] = pontos.get(user_id, 0) + int(score)

    return pontos


def montar_ranking(db: Session) -> List[PosicaoRanking]:
    pontos = calcular_pontos(db)
    infos = {info.id: info for info in db.query(UserInfo).filter(UserInfo.id.in_(list(pontos)))}

    ordenados = sorted(pontos.items(), key=lambda item: item[1], reverse=True)
    return [
        PosicaoRanking(id=user_id, name=_nome_exibicao(infos.get(user_id)), total_points=total, rank=posicao)
        for posicao, (user_id, total) in enumerate(ordenados, start=1)
    ]


def obter_ranking(db: Session, user_id: Optional[str] = None) -> RankingOut:
    ranking = montar_ranking(db)
    posicao_usuario = None
    if user_id:
        posicao_usuario = next((p for p in ranking if p.id == user_id), None)
    return RankingOut(top=ranking[:TOP_RANKING], user_rank=posicao_usuario)


def _dia(momento: datetime) -> date:
    if momento.tzinfo is not None:
        momento = momento.astimezone(timezone.utc)
    return momento.date()


def calcular_sequencia(datas: Iterable[datetime], hoje: date) -> int:
    """Dias seguidos com atividade terminando hoje (sem atividade hoje, zero)."""
    dias = {_dia(momento) for momento in datas}
    if hoje not in dias:
        return 0

    sequencia = 1
    for atraso in range(1, DIAS_MAXIMOS_SEQUENCIA + 1):
        if hoje - timedelta(days=atraso) not in dias:
            break
        sequencia += 1
    return sequencia


def progresso_por_materia(quizzes: Iterable[QuizResult]) -> List[ProgressoMateria]:
    acumulado: Dict[str, List[int]] = {}
    for quiz in quizzes:
        materia = quiz.quiz_name.split(":")[0].strip() or quiz.quiz_name
        acertos, total = acumulado.get(materia, [0, 0])
        acumulado[materia] = [acertos + quiz.score, total + quiz.total_questions]

    return [
        ProgressoMateria(subject=materia, progress=math.floor(acertos * 100 / total + 0.5) if total else 0)
        for materia, (acertos, total) in acumulado.items()
    ]


def obter_progresso(db: Session, user_id: str, hoje: Optional[date] = None) -> ProgressoOut:
    hoje = hoje or datetime.now(timezone.utc).date()

    quizzes = db.query(QuizResult).filter(QuizResult.user_id == user_id).order_by(QuizResult.created_at.desc()).all()
    redacoes = db.query(Essay).filter(Essay.user_id == user_id).order_by(Essay.created_at.desc()).all()

    datas = [q.created_at for q in quizzes] + [r.created_at for r in redacoes]

    return ProgressoOut(
        completed_quizzes=len(quizzes),
        submitted_essays=len(redacoes),
        total_points=sum(q.score for q in quizzes),
        current_streak=calcular_sequencia(datas, hoje),
        subjects=progresso_por_materia(quizzes),
    )
