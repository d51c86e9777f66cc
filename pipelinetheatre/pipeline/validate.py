from pipelinetheatre import config
from pipelinetheatre.utils.dates import is_iso_date, normalize_time
from pipelinetheatre.utils.text import normalize_genre, normalize_style


def validate_representation(record):
    """Check that a representation has all required fields with valid data."""
    for field in config.REQUIRED_FIELDS:
        value = record.get(field)
        if not value or not str(value).strip():
            return False
    if not is_iso_date(record["date"]):
        return False
    if record.get("heure") and normalize_time(record["heure"]) is None:
        return False
    return True


def prepare_representation(record):
    """
    Coerce connector output into persisted shape:
    heure as HH:MM:SS, genre/style mapped onto the known vocabulary,
    titre and theatre_nom trimmed.
    """
    record["heure"] = normalize_time(record.get("heure"))
    if "genre" in record:
        record["genre"] = normalize_genre(record["genre"])
    if "style" in record:
        record["style"] = normalize_style(record["style"])
    for field in ("titre", "theatre_nom"):
        if isinstance(record.get(field), str):
            record[field] = record[field].strip()
    return record
