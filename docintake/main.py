import uvicorn

from docintake.api.app import create_app
from docintake.config.settings import Settings
from docintake.database.connection import apply_schema, close_pool, init_pool
from docintake.database.factory import RepositoryFactory
from docintake.logging.logger import Log
from docintake.processor.controller import IntakeController, build_controller


def report_unfinished(controller: IntakeController) -> int:
    """Log documents a previous run left mid-pipeline. No status is changed."""
    unfinished = controller.find_unfinished()
    for document in unfinished:
        Log.warning(
            f"Document {document.id} left in status '{document.status}', needs reconciliation",
            owner_id=document.owner_id,
            uploaded_at=document.uploaded_at.isoformat(),
        )
    return len(unfinished)


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)
    uses_database = RepositoryFactory.uses_database(settings)
    if uses_database:
        init_pool(settings)
        apply_schema()

    try:
        controller = build_controller(settings)
        report_unfinished(controller)
        app = create_app(controller)
        Log.info(f"Serving on {settings.api_host}:{settings.api_port}", app_env=settings.app_env)
        uvicorn.run(app, host=settings.api_host, port=settings.api_port)
    finally:
        if uses_database:
            close_pool()


if __name__ == "__main__":
    main()
