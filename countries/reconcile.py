from .errors import StoreFailure


def reconcile(store, merged):
    """
    Upsert every merged country into ``store`` by case-insensitive name.

    Existing rows are updated in place and keep their id; rows missing from
    ``merged`` are left alone. The first ``StoreFailure`` stops the pass, and
    the writes made before it stay applied. The re-raised error carries how
    many records made it in ``applied``.
    """
    applied = 0
    for record in merged:
        try:
            existing = store.find_by_name(record.name)
            if existing is None:
                store.create(record)
            else:
                store.update(existing, record)
        except StoreFailure as exc:
            raise StoreFailure(str(exc), applied=applied) from exc
        applied += 1
    return applied
