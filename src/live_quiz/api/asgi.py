"""ASGI entrypoint: ``uvicorn live_quiz.api.asgi:app``.

Sessions live in process memory, so run a single worker.
"""

from live_quiz.api.app import create_app
from live_quiz.containers import build_container

app = create_app(build_container())
