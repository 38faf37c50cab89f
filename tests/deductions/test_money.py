from src.hostel_attendance.hostel_attendance.common.money import round_money


def test_round_money_rounds_half_up():
    assert round_money(0.125) == 0.13
    # round() would give 2.67 here.
    assert round_money(2.675) == 2.68
    assert round_money(333.3333333) == 333.33
    assert round_money(0) == 0.0
