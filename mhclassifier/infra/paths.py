# mhclassifier/infra/paths.py
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = PACKAGE_DIR / "data"

KEYWORD_PROFILES_PATH = DATA_DIR / "keyword_profiles.yaml"
