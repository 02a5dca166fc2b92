"""Tests for party-size reallocation"""

from app.engine import ErrorKind, validate_and_reallocate_tables, validate_reinstatement


def test_unchanged_party_size_is_a_no_op(lunch, make_table, make_reservation):
    table = make_table(4)
    reservation = make_reservation(lunch, [table], party_size=4)

    result = validate_and_reallocate_tables(reservation, 4, [table], [reservation], lunch)

    assert result.ok
    assert not result.value.needs_reallocation
    assert result.value.tables == [table]


def test_shrink_keeps_single_table(lunch, make_table, make_reservation):
    six = make_table(6)
    reservation = make_reservation(lunch, [six], party_size=6)

    plan = validate_and_reallocate_tables(reservation, 2, [six, make_table(2)], [reservation], lunch).value

    assert not plan.needs_reallocation
    assert plan.tables == [six]
    assert plan.freed_tables == []


def test_shrink_keeps_largest_held_table_that_fits(lunch, make_table, make_reservation):
    six, two = make_table(6), make_table(2)
    reservation = make_reservation(lunch, [six, two], party_size=8)

    plan = validate_and_reallocate_tables(reservation, 2, [six, two], [reservation], lunch).value

    # descending search: the 6-seat table is found before the 2-seat one
    assert plan.needs_reallocation
    assert plan.tables == [six]
    assert plan.freed_tables == ["Mesa 2"]


def test_shrink_without_single_fit_drops_surplus_tables(lunch, make_table, make_reservation):
    a, b, c = make_table(4, name="A"), make_table(4, name="B"), make_table(4, name="C")
    reservation = make_reservation(lunch, [a, b, c], party_size=12)

    plan = validate_and_reallocate_tables(reservation, 7, [a, b, c], [reservation], lunch).value

    assert plan.needs_reallocation
    assert plan.tables == [a, b]
    assert plan.freed_tables == ["C"]
    assert plan.total_seats == 8


def test_grow_within_current_seats(lunch, make_table, make_reservation):
    six = make_table(6)
    reservation = make_reservation(lunch, [six], party_size=2)

    plan = validate_and_reallocate_tables(reservation, 5, [six], [reservation], lunch).value

    assert not plan.needs_reallocation
    assert plan.tables == [six]


def test_grow_moves_to_exact_fit(lunch, make_table, make_reservation):
    two, four, six = make_table(2), make_table(4), make_table(6)
    reservation = make_reservation(lunch, [two], party_size=2)

    plan = validate_and_reallocate_tables(reservation, 6, [two, four, six], [reservation], lunch).value

    assert plan.needs_reallocation
    assert plan.tables == [six]
    assert plan.previous_tables == ["Mesa 2"]
    assert plan.freed_tables == ["Mesa 2"]
    assert plan.total_seats == 6


def test_grow_can_keep_own_table_in_combination(lunch, make_table, make_reservation):
    own, other = make_table(4, name="A"), make_table(4, name="B")
    reservation = make_reservation(lunch, [own], party_size=4)

    plan = validate_and_reallocate_tables(reservation, 8, [own, other], [reservation], lunch).value

    assert plan.needs_reallocation
    assert plan.tables == [own, other]
    assert plan.freed_tables == []


def test_grow_skips_tables_held_by_others(lunch, make_table, make_reservation):
    own, busy, free = make_table(2, name="A"), make_table(6, name="B"), make_table(6, name="C")
    reservation = make_reservation(lunch, [own], party_size=2)
    neighbour = make_reservation(lunch, [busy], party_size=6)

    plan = validate_and_reallocate_tables(
        reservation, 6, [own, busy, free], [reservation, neighbour], lunch
    ).value

    assert plan.tables == [free]


def test_grow_ignores_cancelled_neighbours(lunch, make_table, make_reservation):
    own, six = make_table(2), make_table(6)
    reservation = make_reservation(lunch, [own], party_size=2)
    cancelled = make_reservation(lunch, [six], party_size=6, status="CANCELLED")

    plan = validate_and_reallocate_tables(reservation, 6, [own, six], [reservation, cancelled], lunch).value

    assert plan.tables == [six]


def test_grow_with_every_table_taken(lunch, make_table, make_reservation):
    # own table taken out of service after booking
    own, six = make_table(4, is_active=False), make_table(6)
    reservation = make_reservation(lunch, [own], party_size=4)
    neighbour = make_reservation(lunch, [six], party_size=6)

    result = validate_and_reallocate_tables(reservation, 6, [own, six], [reservation, neighbour], lunch)

    assert not result.ok
    assert result.kind == ErrorKind.NO_AVAILABILITY


def test_grow_beyond_free_seats(lunch, make_table, make_reservation):
    own, two = make_table(4), make_table(2)
    reservation = make_reservation(lunch, [own], party_size=4)

    result = validate_and_reallocate_tables(reservation, 10, [own, two], [reservation], lunch)

    assert not result.ok
    assert result.kind == ErrorKind.INSUFFICIENT_CAPACITY
    assert result.extra == {"available_seats": 6, "required_seats": 10}


def test_reinstated_reservation_keeps_free_tables(lunch, make_table, make_reservation):
    six = make_table(6)
    reservation = make_reservation(lunch, [six], party_size=6, status="CANCELLED")

    result = validate_reinstatement(reservation, [make_table(2), six], [reservation], lunch)

    assert result.ok
    assert result.value.tables == [six]


def test_reinstated_reservation_moves_off_a_rebooked_table(lunch, make_table, make_reservation):
    two, four, six = make_table(2), make_table(4), make_table(6)
    reservation = make_reservation(lunch, [six], party_size=6, status="CANCELLED")
    newcomer = make_reservation(lunch, [six], party_size=6)

    result = validate_reinstatement(reservation, [two, four, six], [reservation, newcomer], lunch)

    assert result.ok
    assert result.value.tables == [two, four]


def test_reinstatement_refused_when_tables_are_gone(lunch, make_table, make_reservation):
    two, six = make_table(2), make_table(6)
    reservation = make_reservation(lunch, [six], party_size=6, status="NO_SHOW")
    newcomers = [
        make_reservation(lunch, [six], party_size=6),
        make_reservation(lunch, [two], party_size=2),
    ]

    result = validate_reinstatement(reservation, [two, six], [reservation, *newcomers], lunch)

    assert not result.ok
    assert result.kind == ErrorKind.NO_TABLES_AVAILABLE


def test_reinstatement_respects_shift_capacity(make_shift, make_table, make_reservation):
    shift = make_shift(max_capacity=8)
    own, other = make_table(4), make_table(4)
    reservation = make_reservation(shift, [own], party_size=4, status="CANCELLED")
    newcomer = make_reservation(shift, [other], party_size=6)

    result = validate_reinstatement(reservation, [own, other], [reservation, newcomer], shift)

    assert not result.ok
    assert result.kind == ErrorKind.SHIFT_CAPACITY_EXCEEDED
