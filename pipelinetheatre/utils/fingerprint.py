import hashlib

from pipelinetheatre.utils.text import canonicalize_title, norm_key, normalize_url


def fingerprint_parts(record):
    """
    Identity segments of a representation, most specific first:
    URL (ticket link, else listing page), date, time, venue key, title key.
    The producing source is not part of the identity: the same performance
    found by two connectors collapses to one row.
    """
    key_url = normalize_url(record.get("url") or record.get("source_url") or "")
    venue = record.get("theatre_nom") or ""
    return [
        key_url,
        str(record.get("date") or ""),
        str(record.get("heure") or ""),
        norm_key(venue),
        norm_key(canonicalize_title(record.get("titre") or "", venue)),
    ]


def compute_fingerprint(record):
    """SHA-1 hex digest of the "|"-joined identity segments."""
    base = "|".join(fingerprint_parts(record))
    return hashlib.sha1(base.encode("utf-8")).hexdigest()


def ensure_fingerprint(record):
    """Set record["fingerprint"] unless a connector already computed one."""
    if not record.get("fingerprint"):
        record["fingerprint"] = compute_fingerprint(record)
    return record
