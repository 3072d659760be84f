from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .database import init_db
from .log import configure_logging
from .routers import accounts as accounts_router
from .routers import analytics as analytics_router
from .routers import budgets as budgets_router
from .routers import categories as categories_router
from .routers import dashboard as dashboard_router
from .routers import goals as goals_router
from .routers import imports as imports_router
from .routers import insights as insights_router
from .routers import transactions as transactions_router


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Personal Finance Tracker – Backend", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def on_startup():
        init_db()

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(accounts_router.router)
    app.include_router(transactions_router.router)
    app.include_router(categories_router.router)
    app.include_router(budgets_router.router)
    app.include_router(goals_router.router)
    app.include_router(imports_router.router)
    app.include_router(analytics_router.router)
    app.include_router(insights_router.router)
    app.include_router(dashboard_router.router)

    return app


app = create_app()
