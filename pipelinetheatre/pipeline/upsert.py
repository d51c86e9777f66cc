import time

from pipelinetheatre import config
from pipelinetheatre.enrich.og_image import fetch_preview_image
from pipelinetheatre.pipeline.metrics import UpsertMetrics
from pipelinetheatre.pipeline.validate import prepare_representation, validate_representation
from pipelinetheatre.utils.classify import is_vetoed, load_keywords, should_emit
from pipelinetheatre.utils.fingerprint import ensure_fingerprint


def dedupe_by_fingerprint(records):
    """
    Collapse records sharing a fingerprint, first seen wins.
    Returns (unique_records, duplicate_count). Input order is preserved.
    """
    unique = {}
    for record in records:
        fingerprint = record.get("fingerprint")
        if fingerprint and fingerprint not in unique:
            unique[fingerprint] = record
    return list(unique.values()), len(records) - len(unique)


def recover_images(records, budget, fetcher=None, log_func=None):
    """
    Fill image_url from the page preview image for records that have a url
    but no image. At most `budget` pages are fetched; the rest stay as they are.
    Returns (attempted, recovered).
    """
    log = log_func or print
    fetcher = fetcher or fetch_preview_image
    attempted = 0
    recovered = 0

    for record in records:
        if attempted >= budget:
            break
        if record.get("image_url") or not record.get("url"):
            continue

        attempted += 1
        try:
            image_url = fetcher(record["url"])
        except Exception as e:
            log(f"  Warning: preview image lookup failed for {record['url']}: {e}")
            image_url = None

        if image_url:
            record["image_url"] = image_url
            recovered += 1

    return attempted, recovered


def to_row(record):
    """Project a record onto the persisted columns, leaving out null enrichment fields."""
    row = {}
    for field in config.PERSISTED_FIELDS:
        if field not in record:
            continue
        if field in config.ENRICHMENT_FIELDS and record[field] is None:
            continue
        row[field] = record[field]
    return row


def upsert_representations(
    records,
    store,
    strict=None,
    keywords=None,
    image_fetcher=None,
    image_budget=None,
    log_func=None,
):
    """
    Publish one connector batch.

    1. drop records a connector flagged is_theatre=False
    2. drop records missing a valid date (or with an unparseable time)
    3. (strict given) drop records the theatre gate rejects;
       strict=None skips the gate
    4. fingerprint, then keep the first record per fingerprint
    5. recover missing preview images, within image_budget fetches
    6. upsert everything in one store call keyed on fingerprint

    Store errors propagate; nothing else raises. Returns UpsertMetrics.
    """
    log = log_func or print
    start_time = time.time()
    budget = config.IMAGE_RECOVERY_BUDGET if image_budget is None else image_budget
    records = list(records)
    metrics = UpsertMetrics(received=len(records))
    if strict is not None and keywords is None:
        keywords = load_keywords()

    candidates = []
    for original in records:
        record = dict(original)

        if is_vetoed(record):
            metrics.vetoed += 1
            continue

        if not validate_representation(record):
            metrics.invalid += 1
            continue
        prepare_representation(record)

        if strict is not None:
            ok, _ = should_emit(record, strict=strict, keywords=keywords)
            if not ok:
                metrics.rejected += 1
                continue

        candidates.append(ensure_fingerprint(record))

    if metrics.vetoed:
        log(f"  Vetoed {metrics.vetoed} records flagged as not theatre")
    if metrics.invalid:
        log(f"  Skipped {metrics.invalid} invalid records")
    if metrics.rejected:
        log(f"  Rejected {metrics.rejected} records by theatre classifier")

    unique, metrics.duplicates = dedupe_by_fingerprint(candidates)
    if metrics.duplicates:
        log(f"  Collapsed {metrics.duplicates} duplicate fingerprints")

    metrics.images_attempted, metrics.images_recovered = recover_images(
        unique, budget, fetcher=image_fetcher, log_func=log
    )
    if metrics.images_attempted:
        log(f"  Recovered {metrics.images_recovered}/{metrics.images_attempted} preview images")

    if unique:
        metrics.upserted = store.upsert([to_row(r) for r in unique], conflict_key="fingerprint")
    log(f"  Upserted {metrics.upserted} representations")

    metrics.duration_ms = (time.time() - start_time) * 1000
    return metrics
