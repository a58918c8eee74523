import pytest

from farmwatch.domain.exceptions import RepositoryError
from farmwatch.enums import EventType, NotificationChannel, NotificationStatus


def _event_id(db_handler):
    return db_handler.insert_event(str(EventType.MODE_CHANGED), "changement")["event_id"]


def test_create_pending_returns_pending_rows(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    event_id = _event_id(db_handler)

    rows = notification_repo.create_pending(
        event_id, [(user_id, NotificationChannel.WEB), (user_id, NotificationChannel.WHATSAPP)]
    )

    assert [n.status for n in rows] == [NotificationStatus.PENDING, NotificationStatus.PENDING]
    assert all(n.id is not None for n in rows)
    assert notification_repo.list_for_event(event_id) == rows


def test_batch_is_all_or_nothing(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    event_id = _event_id(db_handler)

    # Second row references a missing user: the foreign key rejects it
    with pytest.raises(RepositoryError):
        notification_repo.create_pending(
            event_id, [(user_id, NotificationChannel.WEB), (9999, NotificationChannel.WEB)]
        )

    assert notification_repo.list_for_event(event_id) == []


def test_set_status_records_error_and_sent_at(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    (row,) = notification_repo.create_pending(_event_id(db_handler), [(user_id, NotificationChannel.WHATSAPP)])

    assert notification_repo.set_status(row.id, NotificationStatus.ERROR, error="timeout") is True

    stored = notification_repo.get(row.id)
    assert stored.status == NotificationStatus.ERROR
    assert stored.error == "timeout"
    assert stored.sent_at is not None


def test_mark_read_requires_sent_status(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    (row,) = notification_repo.create_pending(_event_id(db_handler), [(user_id, NotificationChannel.WEB)])

    assert notification_repo.mark_read(row.id) is False
    notification_repo.set_status(row.id, NotificationStatus.SENT)
    assert notification_repo.mark_read(row.id) is True
    assert notification_repo.mark_read(row.id) is False


def test_list_for_user_newest_first_with_limit(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    ids = []
    for _ in range(3):
        (row,) = notification_repo.create_pending(_event_id(db_handler), [(user_id, NotificationChannel.WEB)])
        ids.append(row.id)

    listed = notification_repo.list_for_user(user_id, limit=2)

    assert [n.id for n in listed] == [ids[2], ids[1]]


def test_stats_unread_counts_readable_channels_only(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    rows = notification_repo.create_pending(
        _event_id(db_handler), [(user_id, NotificationChannel.WEB), (user_id, NotificationChannel.WHATSAPP)]
    )
    notification_repo.set_status(rows[0].id, NotificationStatus.SENT)
    notification_repo.set_status(rows[1].id, NotificationStatus.ERROR, error="x")

    stats = notification_repo.get_stats(user_id)

    assert stats.to_dict() == {"total": 2, "sent": 1, "pending": 0, "error": 1, "unread": 1}


def test_deleting_an_event_cascades_to_notifications(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    event_id = _event_id(db_handler)
    notification_repo.create_pending(event_id, [(user_id, NotificationChannel.WEB)])

    with db_handler.connection() as conn:
        conn.execute("DELETE FROM Event WHERE event_id = ?", (event_id,))

    assert notification_repo.list_for_event(event_id) == []


def test_unread_listing_uses_the_counter_rules(seed, db_handler, notification_repo):
    user_id = seed.create_user()
    web_sent, web_pending, whatsapp = notification_repo.create_pending(
        _event_id(db_handler),
        [
            (user_id, NotificationChannel.WEB),
            (user_id, NotificationChannel.WEB),
            (user_id, NotificationChannel.WHATSAPP),
        ],
    )
    notification_repo.set_status(web_sent.id, NotificationStatus.SENT)
    notification_repo.set_status(whatsapp.id, NotificationStatus.SENT)

    unread = notification_repo.list_for_user(user_id, unread_only=True)

    assert [n.id for n in unread] == [web_sent.id]
    assert notification_repo.get_stats(user_id).unread == 1
    assert web_pending.id not in {n.id for n in unread}
