from __future__ import annotations

from lettrly.features.inbox.notifications import NotificationAggregator, count_unread

from .factories import make_letter


def test_add_new_letters_accumulates_most_recent_first():
    notifications = NotificationAggregator()
    a = make_letter(1)
    b = make_letter(2)

    notifications.add_new_letters([a])
    notifications.add_new_letters([b])

    assert notifications.pending_letters == (b, a)
    assert notifications.banner_visible is True
    assert notifications.banner_title == "You have 2 new letters!"
    assert notifications.banner_subtitle == "2 new messages just arrived"


def test_add_empty_list_leaves_banner_hidden():
    notifications = NotificationAggregator()

    notifications.add_new_letters([])

    assert notifications.pending_letters == ()
    assert notifications.banner_visible is False
    assert notifications.banner_title is None


def test_dismiss_hides_banner_but_keeps_pending_letters():
    notifications = NotificationAggregator()
    a = make_letter(1, sender_display_name=None)
    notifications.add_new_letters([a])
    notifications.set_unread_count(4)

    notifications.dismiss_batch_notification()

    assert notifications.pending_letters == (a,)
    assert notifications.banner_visible is False
    assert notifications.unread_count == 4
    assert notifications.banner_subtitle is None

    notifications.clear_new_letters()

    assert notifications.pending_letters == ()
    assert notifications.banner_visible is False
    assert notifications.unread_count == 4


def test_single_letter_banner_names_the_sender():
    notifications = NotificationAggregator()

    notifications.add_new_letters([make_letter(1)])

    assert notifications.banner_title == "You have a new letter!"
    assert notifications.banner_subtitle == "From Anonymous"


def test_set_unread_count_replaces_the_value():
    notifications = NotificationAggregator()

    notifications.set_unread_count(7)
    notifications.set_unread_count(2)

    assert notifications.unread_count == 2


def test_apply_snapshot_publishes_count_and_arrivals_together():
    notifications = NotificationAggregator()
    seen = []
    notifications.subscribe(seen.append)
    old = make_letter(1, is_read=True)
    unread = make_letter(2)
    arrived = make_letter(3)

    notifications.apply_snapshot([arrived, unread, old], [arrived])

    assert len(seen) == 1
    assert seen[0].unread_count == 2
    assert seen[0].pending_letters == (arrived,)
    assert seen[0].banner_visible is True


def test_unsubscribe_and_failing_listener_do_not_break_updates():
    notifications = NotificationAggregator()
    seen = []

    def _broken(_state):
        raise RuntimeError("render failed")

    notifications.subscribe(_broken)
    unsubscribe = notifications.subscribe(seen.append)
    notifications.set_unread_count(1)
    unsubscribe()
    notifications.set_unread_count(2)

    assert [state.unread_count for state in seen] == [1]
    assert notifications.unread_count == 2


def test_instances_are_independent():
    first = NotificationAggregator()
    second = NotificationAggregator()

    first.add_new_letters([make_letter(1)])

    assert second.pending_letters == ()
    assert second.banner_visible is False


def test_count_unread():
    letters = [make_letter(1), make_letter(2, is_read=True), make_letter(3)]

    assert count_unread(letters) == 2
    assert count_unread([]) == 0
