from __future__ import annotations

from uuid import uuid4

from lettrly.features.inbox.diff import diff_snapshot, snapshot_ids

from .factories import make_letter


def test_diff_reports_new_letters_in_snapshot_order():
    l1 = make_letter(10)
    l2 = make_letter(5)
    l3 = make_letter(15)
    l4 = make_letter(12)

    delta = diff_snapshot({l1.id, l2.id}, [l3, l4, l1, l2])

    assert [letter.id for letter in delta.new_letters] == [l3.id, l4.id]
    assert delta.removed_ids == ()
    assert delta.letters == (l3, l4, l1, l2)
    assert not delta.is_empty


def test_diff_reports_removed_ids():
    l1 = make_letter(10)
    l2 = make_letter(5)

    delta = diff_snapshot({l1.id, l2.id}, [l1])

    assert delta.new_letters == ()
    assert delta.removed_ids == (l2.id,)
    assert delta.current_ids == frozenset({l1.id})
    assert not delta.is_empty


def test_diff_ignores_field_level_changes():
    letter_id = uuid4()
    before = make_letter(10, letter_id=letter_id)
    after = make_letter(10, letter_id=letter_id, is_read=True, is_favorited=True)

    delta = diff_snapshot(snapshot_ids([before]), [after])

    assert delta.is_empty
    assert delta.letters == (after,)


def test_diff_with_empty_baseline_marks_everything_new():
    letters = [make_letter(3), make_letter(2), make_letter(1)]

    delta = diff_snapshot(set(), letters)

    assert delta.new_letters == tuple(letters)
    assert delta.removed_ids == ()


def test_diff_with_empty_snapshot_removes_everything():
    ids = {uuid4(), uuid4()}

    delta = diff_snapshot(ids, [])

    assert delta.new_letters == ()
    assert set(delta.removed_ids) == ids
    assert list(delta.removed_ids) == sorted(ids, key=str)


def test_diff_with_disjoint_sets():
    old_ids = {uuid4(), uuid4()}
    letters = [make_letter(2), make_letter(1)]

    delta = diff_snapshot(old_ids, letters)

    assert delta.new_letters == tuple(letters)
    assert set(delta.removed_ids) == old_ids
    assert not set(delta.removed_ids) & delta.current_ids


def test_diff_is_repeatable():
    l1 = make_letter(1)
    l2 = make_letter(2)
    baseline = {l1.id}

    first = diff_snapshot(baseline, [l2, l1])
    second = diff_snapshot(baseline, [l2, l1])

    assert first == second
    assert baseline == {l1.id}
