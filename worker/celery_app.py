import os

from celery import Celery
from dotenv import load_dotenv


def criar_celery(broker_url=None, result_backend=None) -> Celery:
    app = Celery(
        "worker",
        broker=broker_url,
        backend=result_backend,
        include=["worker.tasks"],
    )

    app.conf.update(
        task_routes={"evaluate_essay": {"queue": "avaliacoes"}},
        task_default_rate_limit="1/m",
    )
    return app


load_dotenv()

# Só os endereços do broker; a configuração completa é lida pela primeira tarefa
celery_app = criar_celery(os.getenv("CELERY_BROKER_URL"), os.getenv("CELERY_RESULT_BACKEND"))
