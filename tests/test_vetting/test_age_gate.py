from src.vetting.age_gate import check_age


def test_young_token_fails(make_snapshot):
    gate = check_age(make_snapshot(age_days=10), 14)
    assert gate.passed is False
    assert gate.age_display == "10 days"
    assert gate.minimum_age_required == 14


def test_boundary_passes(make_snapshot):
    assert check_age(make_snapshot(age_days=14), 14).passed is True


def test_hours_old(make_snapshot):
    gate = check_age(make_snapshot(age_days=0.5), 14)
    assert gate.passed is False
    assert gate.age_display == "12 hours"
