"""Run the SQL gateway: python -m sqlgateway"""

import logging

import uvicorn

logger = logging.getLogger("sqlgateway")


def main() -> None:
    # Importing the app loads settings; incomplete DB config exits here.
    from sqlgateway.main import app

    settings = app.state.settings
    logger.info(
        "%s %s listening on %s:%s, database %s at %s:%s",
        settings.PROJECT_NAME,
        settings.API_VERSION,
        settings.API_HOST,
        settings.API_PORT,
        settings.DB_PRODUCT_TYPE.value,
        settings.DB_HOST,
        settings.DB_PORT,
    )
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()
