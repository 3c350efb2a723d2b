import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tsbapp.db")

# Admin gate
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me")
RESET_KEY = os.getenv("RESET_KEY", "reset-change-me")

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

# Document generation
GENERATED_DIR = Path(os.getenv("GENERATED_DIR", "./generated"))
LOGO_PATH = Path(os.getenv("LOGO_PATH", "./assets/logo.png"))
LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
LATEX_TIMEOUT_SECONDS = int(os.getenv("LATEX_TIMEOUT_SECONDS", "60"))
