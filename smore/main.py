from prometheus_fastapi_instrumentator import Instrumentator

from .core.config import settings
from .core.logging import setup_logging
from .api import app as api_app

setup_logging(settings.LOG_LEVEL)
app = api_app
instrumentator = Instrumentator(excluded_handlers=["/metrics", "/health"])


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


instrumentator.instrument(app).expose(app, include_in_schema=False)

# The SPA catch-all has to be registered after every other route.
from .routers import spa as spa_router  # noqa: E402

app.include_router(spa_router.router)


def run() -> None:
    import uvicorn

    uvicorn.run("smore.main:app", host=settings.HOST, port=settings.PORT)
