from datetime import datetime, timezone

import scheduler
from conftest import make_service_hours

# Monday Feb 2 2026, 12:00 PM CST
MONDAY_NOON = datetime(2026, 2, 2, 18, 0, tzinfo=timezone.utc)


def add_menu(db, location_id):
    conn = db.get_db_connection()
    conn.execute('INSERT INTO menu (id, location_id) VALUES (?, ?)', (f'menu-{location_id}', location_id))
    conn.commit()
    conn.close()


def test_refresh_location_statuses(db, location_data):
    open_now = db.add_location(location_data(name='J2'))
    no_menus = db.add_location(location_data(name='Kins'))
    forced = db.add_location(location_data(name='Littlefield', force_close=True))
    add_menu(db, open_now['id'])
    add_menu(db, forced['id'])

    summary = scheduler.refresh_location_statuses(MONDAY_NOON)

    assert summary == {"open": 1, "closed": 2, "changed": 1, "errors": 0}
    assert db.get_location(open_now['id'])['status'] == 'open'
    assert db.get_location(no_menus['id'])['status'] == 'closed'
    assert db.get_location(forced['id'])['status'] == 'closed'

    # Nothing changes on a second pass
    assert scheduler.refresh_location_statuses(MONDAY_NOON)["changed"] == 0


def test_refresh_closes_after_hours(db, location_data):
    location = db.add_location(location_data(regular_service_hours=make_service_hours([{"open": 700, "close": 1100}])))
    add_menu(db, location['id'])
    db.update_location_status(location['id'], 'open')

    summary = scheduler.refresh_location_statuses(MONDAY_NOON)

    assert summary["changed"] == 1
    assert db.get_location(location['id'])['status'] == 'closed'


def test_refresh_counts_bad_schedules(db, location_data):
    location = db.add_location(location_data())
    add_menu(db, location['id'])
    conn = db.get_db_connection()
    conn.execute("UPDATE location SET regular_service_hours = '{}' WHERE id = ?", (location['id'],))
    conn.commit()
    conn.close()

    assert scheduler.refresh_location_statuses(MONDAY_NOON)["errors"] == 1


def test_update_statuses_logs_failures(monkeypatch, capsys):
    def boom(now=None):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(scheduler, 'refresh_location_statuses', boom)

    scheduler.update_statuses()

    assert "❌ Error: database is locked" in capsys.readouterr().out
