"""Run the VaR API server."""

from config.settings import Settings
from var_service.api.app import create_app


def main() -> None:
    """Entrypoint for uvicorn-based API server."""
    import uvicorn

    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    main()
