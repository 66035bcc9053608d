# cinema_api/cli/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

# cinema_api/cli/config.py -> project root
project_root = Path(__file__).parent.parent.parent.resolve()

# Values in .env win over the shell environment
load_dotenv(dotenv_path=project_root / '.env', override=True)

# Defaults for `cinema serve`
CINEMA_SERVER_HOST = os.getenv("CINEMA_SERVER_HOST", "127.0.0.1")
CINEMA_SERVER_PORT = int(os.getenv("CINEMA_SERVER_PORT", "4000"))
CINEMA_SERVER_RELOAD = os.getenv("CINEMA_SERVER_RELOAD", "false").lower() in ["true", "1", "yes", "on", "t"]
