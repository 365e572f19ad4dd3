import logging
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from call_tracker import __version__
from call_tracker.config import Settings, settings
from call_tracker.db.init_db import init_db
from call_tracker.db.kv_store import KeyValueStore
from call_tracker.repositories.record_store import RecordStore
from call_tracker.routers import calls_router, reports_router, settings_router
from call_tracker.services.call_service import CallController
from call_tracker.services.report_scheduler import ReportScheduler
from call_tracker.utils.helper import local_now


def create_app(config: Settings = settings, clock: Optional[Callable[[], datetime]] = None) -> FastAPI:
    app = FastAPI(title="Call Tracker", version=__version__)

    # CORS middleware for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        logging.basicConfig(
            level=config.LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        print("\n" + "="*50)
        print("Call Tracker - Starting")
        print("="*50)
        print(f"Backend: http://{config.BACKEND_HOST}:{config.BACKEND_PORT}")
        print(f"Database: {config.DB_PATH}")
        print(f"Report check every {config.REPORT_CHECK_INTERVAL_SECONDS}s")
        print("="*50 + "\n")

        init_db(config.DB_PATH)

        now = clock or partial(local_now, config.tz)
        store = RecordStore(KeyValueStore(config.DB_PATH), clock=now)

        app.state.store = store
        app.state.controller = CallController(store)
        app.state.scheduler = ReportScheduler(
            store,
            interval_seconds=config.REPORT_CHECK_INTERVAL_SECONDS,
            clock=now,
        )
        app.state.scheduler.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.scheduler.stop()

    @app.get("/")
    def health():
        return {
            "status": "alive",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
        }

    app.include_router(calls_router.router)
    app.include_router(reports_router.router)
    app.include_router(settings_router.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.BACKEND_HOST, port=settings.BACKEND_PORT)
