import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.environ.get("PIPELINETHEATRE_DATA_DIR", REPO_ROOT / "data"))
STORE_PATH = DATA_DIR / "representations.json"
STORE_KEY = "representations.json"

R2_ACCOUNT_ID = os.environ.get("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.environ.get("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.environ.get("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.environ.get("R2_BUCKET_NAME", "pipelinetheatre-data")

IMAGE_RECOVERY_BUDGET = int(os.environ.get("IMAGE_RECOVERY_BUDGET", "20"))
HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "15"))
HTTP_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "fr-BE,fr;q=0.9,en;q=0.7,nl;q=0.6",
}

THEATRE_FILTER_STRICT = os.environ.get("THEATRE_FILTER_STRICT", "1") != "0"
THEATRE_KEYWORDS_PATH = os.environ.get("THEATRE_KEYWORDS_PATH")

REQUIRED_FIELDS = ["date"]
PERSISTED_FIELDS = [
    "date",
    "heure",
    "titre",
    "theatre_nom",
    "theatre_adresse",
    "url",
    "source",
    "source_url",
    "genre",
    "style",
    "description",
    "image_url",
    "is_theatre",
    "is_complet",
    "fingerprint",
]
# Never written as null, so values found by enrichment survive later runs
ENRICHMENT_FIELDS = ["genre", "style", "description", "image_url"]

TRACKING_PARAMS = {"fbclid", "gclid"}
TRACKING_PREFIXES = ("utm_",)

GENRES = ["comedie", "drame", "autre"]
STYLES = ["classique", "contemporain"]
