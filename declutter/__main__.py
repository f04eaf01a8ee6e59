import os

from dotenv import load_dotenv

from declutter.cli.commands import app

# Load .env file from ~/.declutter/ if it exists
# Precedence: existing env vars > .env file (override=False)
load_dotenv(os.path.expanduser("~/.declutter/.env"), override=False)

if __name__ == "__main__":
    app()
