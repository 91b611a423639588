import hashlib
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from careers.core import errors
from careers.crud.common import atomic
from careers.crud.economic_regions import upsert_economic_region
from careers.crud.outlooks import (
    delete_outlook,
    get_outlook,
    query_outlooks,
    record_outlook,
    trends_hash,
)
from careers.crud.unit_groups import upsert_unit_group
from careers.models.outlook import Outlook


def _count(db):
    return db.execute(select(func.count()).select_from(Outlook)).scalar_one()


def test_trends_hash_is_sha256_of_exact_text():
    assert trends_hash("Demand is rising.") == hashlib.sha256(b"Demand is rising.").hexdigest()
    assert trends_hash("Demand is rising.") == trends_hash("Demand is rising.")
    assert trends_hash("Demand is rising.") != trends_hash("Demand is rising. ")
    assert len(trends_hash("")) == 64


def test_record_then_duplicate_then_changed_trends(seeded):
    first = record_outlook(seeded, "1234", "5920", "Outlook Title", "Good", "Demand is rising.", date(2024, 1, 1), "ON")
    assert first.id is not None
    assert first.lang == "EN"
    assert first.trends_hash == trends_hash("Demand is rising.")

    with pytest.raises(errors.ConflictError) as exc:
        record_outlook(seeded, "1234", "5920", "Outlook Title", "Good", "Demand is rising.", date(2024, 1, 1), "ON")
    assert exc.value.key == first.id
    assert _count(seeded) == 1

    second = record_outlook(
        seeded, "1234", "5920", "Outlook Title", "Good", "Demand is rising fast.", date(2024, 1, 1), "ON"
    )
    assert second.id != first.id
    assert second.trends_hash != first.trends_hash
    assert _count(seeded) == 2


@pytest.mark.parametrize(
    "change",
    [
        {"title": "Another title"},
        {"outlook": "Fair"},
        {"province": "QC"},
        {"lang": "FR"},
        {"release_date": datetime(2024, 7, 1)},
    ],
)
def test_any_key_field_makes_a_distinct_row(seeded, release, change):
    base = dict(
        noc="1234", economic_region_code="5920", title="Outlook Title", outlook="Good",
        trends="Demand is rising.", release_date=release, province="ON",
    )
    record_outlook(seeded, **base)
    record_outlook(seeded, **{**base, **change})
    assert _count(seeded) == 2


def test_other_region_is_distinct(seeded, release):
    upsert_economic_region(seeded, "3510", "Montreal")
    record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON")
    record_outlook(seeded, "1234", "3510", "T", "Good", "x", release, "ON")
    assert _count(seeded) == 2


def test_unknown_noc_or_region(seeded, release):
    with pytest.raises(errors.ReferenceError):
        record_outlook(seeded, "9999", "5920", "T", "Good", "x", release, "ON")
    with pytest.raises(errors.ReferenceError):
        record_outlook(seeded, "1234", "0000", "T", "Good", "x", release, "ON")
    with pytest.raises(errors.ReferenceError):
        record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON", program_nid=5)
    assert _count(seeded) == 0


def test_lang_is_upper_cased(seeded, release):
    row = record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON", lang="fr")
    assert row.lang == "FR"
    with pytest.raises(errors.ConflictError):
        record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON", lang="FR")


def test_date_and_midnight_datetime_are_the_same_release(seeded):
    record_outlook(seeded, "1234", "5920", "T", "Good", "x", date(2024, 1, 1), "ON")
    with pytest.raises(errors.ConflictError):
        record_outlook(seeded, "1234", "5920", "T", "Good", "x", datetime(2024, 1, 1), "ON")


def test_aware_release_date_stored_as_utc(seeded):
    eastern = timezone(timedelta(hours=-5))
    row = record_outlook(seeded, "1234", "5920", "T", "Good", "x", datetime(2024, 1, 1, 19, 0, tzinfo=eastern), "ON")
    assert row.release_date == datetime(2024, 1, 2, 0, 0)


@pytest.mark.parametrize("bad", ["2024-01-01", None, 20240101])
def test_release_date_must_be_a_date(seeded, bad):
    with pytest.raises(errors.ValidationError):
        record_outlook(seeded, "1234", "5920", "T", "Good", "x", bad, "ON")


def test_trends_must_be_text(seeded, release):
    with pytest.raises(errors.ValidationError):
        record_outlook(seeded, "1234", "5920", "T", "Good", None, release, "ON")


def test_unique_constraint_enforced_by_database(seeded, release):
    row = record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON")
    clone = Outlook(
        noc=row.noc, economic_region_code=row.economic_region_code, title=row.title, outlook=row.outlook,
        trends=row.trends, trends_hash=row.trends_hash, release_date=row.release_date,
        province=row.province, lang=row.lang,
    )
    with pytest.raises(errors.ConflictError):
        with atomic(seeded, entity="outlook"):
            seeded.add(clone)
    assert _count(seeded) == 1


def test_foreign_keys_enforced_by_database(seeded, release):
    orphan = Outlook(
        noc="9999", economic_region_code="5920", title="T", outlook="Good", trends="x",
        trends_hash=trends_hash("x"), release_date=release, province="ON", lang="EN",
    )
    with pytest.raises(errors.ReferenceError):
        with atomic(seeded, entity="outlook"):
            seeded.add(orphan)
    assert _count(seeded) == 0


@pytest.fixture
def populated(seeded):
    upsert_unit_group(seeded, "5678", "Nurses")
    upsert_economic_region(seeded, "3510", "Montreal")
    rows = [
        ("1234", "5920", "ON", "EN", date(2023, 1, 1)),
        ("1234", "5920", "ON", "EN", date(2024, 1, 1)),
        ("1234", "3510", "QC", "FR", date(2024, 1, 1)),
        ("5678", "5920", "ON", "EN", date(2024, 6, 1)),
        ("5678", "3510", "QC", "EN", date(2025, 1, 1)),
    ]
    for noc, er, prov, lang, when in rows:
        record_outlook(seeded, noc, er, "Outlook", "Good", f"{noc}-{er}-{when}", when, prov, lang=lang)
    return seeded


def test_query_without_filters_returns_all_ordered(populated):
    rows = query_outlooks(populated)
    assert len(rows) == 5
    assert [r.release_date for r in rows] == sorted(r.release_date for r in rows)


def test_query_filters_combine(populated):
    assert len(query_outlooks(populated, noc="1234")) == 3
    assert len(query_outlooks(populated, noc="1234", economic_region_code="5920")) == 2
    assert len(query_outlooks(populated, province="QC")) == 2
    assert len(query_outlooks(populated, lang="fr")) == 1
    assert len(query_outlooks(populated, noc="1234", lang="EN", province="ON")) == 2
    assert query_outlooks(populated, noc="0000") == []


def test_query_release_range_is_inclusive(populated):
    rows = query_outlooks(populated, released_from=date(2024, 1, 1), released_to=date(2024, 6, 1))
    assert len(rows) == 3
    assert len(query_outlooks(populated, released_from=date(2024, 6, 2))) == 1
    assert len(query_outlooks(populated, released_to=date(2023, 12, 31))) == 1


def test_query_pagination(populated):
    everything = query_outlooks(populated)
    page = query_outlooks(populated, offset=1, limit=2)
    assert [r.id for r in page] == [r.id for r in everything[1:3]]


def test_get_and_delete_outlook(seeded, release):
    row = record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON")
    assert get_outlook(seeded, row.id).trends == "x"
    delete_outlook(seeded, row.id)
    with pytest.raises(errors.NotFoundError):
        get_outlook(seeded, row.id)
    # the same record can be ingested again after removal
    record_outlook(seeded, "1234", "5920", "T", "Good", "x", release, "ON")
