from markupgen.api.main import app

if __name__ == "__main__":
    import logging
    import os

    import uvicorn

    from markupgen.core.settings import GeneratorSettings

    logging.basicConfig(level=GeneratorSettings.from_env().log_level)
    host = os.getenv("MARKUPGEN_HOST", "0.0.0.0")
    port = int(os.getenv("MARKUPGEN_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)
