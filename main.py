import uvicorn

from src.corpus.config import configure_logging

if __name__ == "__main__":
    configure_logging()
    uvicorn.run("src.corpus.api:app", host="0.0.0.0", port=8000)
