"""Development server entry point."""

from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")

from app import create_app
from config import get_config

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=get_config().runtime.port)
