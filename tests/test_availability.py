from roster.models import Availability
from roster.services.availability import AvailabilityIndex

def test_status_distinguishes_declared_and_missing():
    index = AvailabilityIndex.build([
        Availability(member_id=1, celebration_id=10, available=True),
        Availability(member_id=2, celebration_id=10, available=False),
    ])
    assert index.status(10, 1) is True
    assert index.status(10, 2) is False
    assert index.status(10, 3) is None
    assert index.is_available(10, 1)
    assert not index.is_available(10, 2)
    assert not index.is_available(10, 3)

def test_build_restricts_to_given_celebrations():
    index = AvailabilityIndex.build(
        [
            Availability(member_id=1, celebration_id=10, available=True),
            Availability(member_id=1, celebration_id=11, available=True),
        ],
        celebration_ids=[10],
    )
    assert index.status(10, 1) is True
    assert index.status(11, 1) is None
    assert 11 not in index.by_celebration

def test_for_celebration_returns_copy_of_declared_members():
    index = AvailabilityIndex.build([
        Availability(member_id=1, celebration_id=10, available=True),
        Availability(member_id=2, celebration_id=10, available=False),
    ])
    members = index.for_celebration(10)
    assert members == {1: True, 2: False}
    members[3] = True
    assert index.status(10, 3) is None
    assert index.for_celebration(11) == {}
    assert 11 not in index.by_celebration
