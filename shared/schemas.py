from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TipoRequisicao = Literal["chat", "quiz", "essay", "essay-analysis"]
StatusCompetencia = Literal["good", "medium", "bad"]


class ModeloWire(BaseModel):
    """Base dos modelos trocados com o SPA (chaves em camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    def para_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Requisição do assistente ---


class RequisicaoAssistente(ModeloWire):
    prompt: str
    type: str = "chat"
    user_data: Optional[Dict[str, Any]] = Field(default=None, alias="userData")
    language: Optional[str] = None


class RespostaChat(ModeloWire):
    response: str


class FalhaParsing(ModeloWire):
    raw_response: str = Field(alias="rawResponse")
    error: str


# --- Quiz ---


class QuestaoQuiz(ModeloWire):
    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer: str = Field(default="", alias="correctAnswer")
    explanation: str = ""


class QuizGerado(ModeloWire):
    questions: List[QuestaoQuiz]


# --- Tema de redação ---


class MaterialApoio(ModeloWire):
    title: str
    url: str = "#"


class TopicoRedacao(ModeloWire):
    title: str
    description: str
    materials: List[MaterialApoio]
    deadline: str = "7 dias"
    raw_response: Optional[str] = Field(default=None, alias="rawResponse")
    error: Optional[str] = None


# --- Análise de redação ---


class CompetenciaAvaliada(ModeloWire):
    name: str
    score: int
    max_score: int = Field(default=200, alias="maxScore")
    feedback: str
    status: StatusCompetencia


class AnaliseRedacao(ModeloWire):
    total_score: int = Field(alias="score")
    max_score: int = Field(default=1000, alias="maxScore")
    competencies: List[CompetenciaAvaliada] = Field(default_factory=list)
    general_feedback: str = Field(default="", alias="generalFeedback")
    parsing_error: Optional[bool] = Field(default=None, alias="parsingError")


# --- Saída estruturada do LLM ---


class QuestaoEstruturada(BaseModel):
    pergunta: str = Field(description="O enunciado da questão.")
    opcoes: List[str] = Field(description="Exatamente 4 alternativas, na ordem A, B, C, D.")
    letra_correta: str = Field(description="A letra da alternativa correta (A, B, C ou D).")
    explicacao: str = Field(description="Breve explicação de por que a alternativa está correta.")


class QuizEstruturado(BaseModel):
    questoes: List[QuestaoEstruturada]


class TopicoEstruturado(BaseModel):
    titulo: str = Field(description="Título do tema de redação.")
    descricao: str = Field(description="Breve descrição do tema.")
    materiais: List[MaterialApoio] = Field(description="Exatamente 3 materiais de apoio (título e URL).")


class AvaliacaoCompetencia(BaseModel):
    competencia: int = Field(description="O número da competência (de 1 a 5)")
    analise_critica: str = Field(description="Análise detalhada dos erros encontrados e raciocínio antes da nota.")
    nota: int = Field(description="A nota para esta competência (0, 40, 80, 120, 160, ou 200)")
    justificativa: str = Field(description="A justificativa final resumida para a nota atribuída.")


class AvaliacaoEstruturada(BaseModel):
    competencias: List[AvaliacaoCompetencia]
    comentario_geral: str = Field(description="Parágrafo de comentário geral para o aluno.")


# --- Persistência ---


class PerfilUsuario(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    education_level: Optional[str] = None


class PerfilUsuarioOut(PerfilUsuario):
    model_config = ConfigDict(from_attributes=True)

    id: str
    updated_at: Optional[datetime] = None


class QuizResultadoCreate(BaseModel):
    user_id: str
    quiz_name: str
    score: int = Field(ge=0)
    total_questions: int = Field(ge=0)
    time_spent: int = Field(default=0, ge=0)


class QuizResultadoOut(QuizResultadoCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class RedacaoCreate(BaseModel):
    user_id: str
    title: str
    content: str
    word_count: Optional[int] = None
    time_spent: int = Field(default=0, ge=0)


class RedacaoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    title: str
    content: str
    word_count: int
    time_spent: int
    score: Optional[int]
    status: Literal["submitted", "evaluated"]
    resultado_json: Optional[Dict[str, Any]] = None
    created_at: datetime


class NotaRedacaoUpdate(BaseModel):
    score: int = Field(ge=0, le=1000)


class RedacaoStatus(BaseModel):
    id: int
    status: str
    message: str


class PosicaoRanking(BaseModel):
    id: str
    name: str
    total_points: int
    rank: int


class RankingOut(BaseModel):
    top: List[PosicaoRanking]
    user_rank: Optional[PosicaoRanking] = None


class ProgressoMateria(BaseModel):
    subject: str
    progress: int


class ProgressoOut(BaseModel):
    completed_quizzes: int
    submitted_essays: int
    total_points: int
    current_streak: int
    subjects: List[ProgressoMateria]
