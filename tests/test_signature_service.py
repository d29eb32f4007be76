"""Testy digitálních podpisů na úrovni služby."""
import pytest
from datetime import datetime, timedelta, timezone

from bandtrack.errors import NotFoundError, InvalidStateError
from bandtrack.models.signature import DigitalSignature, SignatureType
from bandtrack.schemas.signature import SignatureCreate
import bandtrack.services.signature_service as svc

SVG = "PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciLz4="


def _create(db, user, **extra):
    return svc.create_signature(db, user.id, SignatureCreate(signature_data=SVG, **extra), ip_address="10.0.0.5")


def test_create_signature(db, student):
    sig = _create(db, student, signature_type=SignatureType.equipment_checkout)

    assert sig.signature_hash == svc.compute_hash(SVG)
    assert len(sig.signature_hash) == 64
    assert sig.legal_name == "student"
    assert sig.ip_address == "10.0.0.5"
    assert sig.usage_count == 0
    assert sig.active is True
    assert sig.is_verified is False
    assert sig.display_name == "Podpis: Výpůjčka vybavení"


def test_create_signature_named(db, student):
    sig = _create(db, student, signature_name="Hlavní podpis", legal_name="Jan Novák")
    assert sig.display_name == "Hlavní podpis"
    assert sig.legal_name == "Jan Novák"


def test_create_signature_unknown_user(db):
    with pytest.raises(NotFoundError):
        svc.create_signature(db, 999, SignatureCreate(signature_data=SVG))


def test_record_usage(db, student):
    sig = _create(db, student)
    assert not svc.is_recently_used(sig)

    svc.record_usage(db, sig.id)
    sig = svc.record_usage(db, sig.id)

    assert sig.usage_count == 2
    assert sig.last_used_at is not None
    assert svc.is_recently_used(sig)
    assert not svc.is_recently_used(sig, now=datetime.now(timezone.utc) + timedelta(days=2))


def test_record_usage_of_inactive_signature(db, student):
    sig = _create(db, student)
    svc.deactivate_signature(db, sig.id)
    with pytest.raises(InvalidStateError):
        svc.record_usage(db, sig.id)


def test_by_user_hides_inactive(db, student, director):
    first = _create(db, student)
    second = _create(db, student, signature_type=SignatureType.photo_release)
    _create(db, director)
    svc.deactivate_signature(db, first.id)

    assert [s.id for s in svc.get_by_user(db, student.id)] == [second.id]
    assert {s.id for s in svc.get_by_user(db, student.id, active_only=False)} == {first.id, second.id}


def test_mark_verified(db, student):
    sig = _create(db, student)
    sig = svc.mark_verified(db, sig.id, "osobní kontrola")
    assert sig.is_verified is True
    assert sig.verification_method == "osobní kontrola"
    assert sig.verification_date is not None


def test_tampered_signature_fails_verification(db, student):
    sig = _create(db, student)
    db.get(DigitalSignature, sig.id).signature_data = "jiná data"
    db.commit()

    with pytest.raises(InvalidStateError):
        svc.mark_verified(db, sig.id, "osobní kontrola")
    db.rollback()
    assert svc.get_signature(db, sig.id).is_verified is False


def test_type_queries_and_stats(db, student, director):
    _create(db, student, signature_type=SignatureType.equipment_checkout)
    _create(db, director, signature_type=SignatureType.equipment_checkout)
    _create(db, student)

    assert len(svc.get_by_type(db, SignatureType.equipment_checkout)) == 2
    assert len(svc.get_recent(db, 1)) == 3
    assert svc.count_by_type(db) == [
        {"signature_type": SignatureType.equipment_checkout, "count": 2},
        {"signature_type": SignatureType.general, "count": 1},
    ]
