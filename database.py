"""
database.py - SQLite storage for dining locations, app configuration and notifications
"""

import json
import sqlite3
import uuid
from datetime import datetime, timezone

import config

DATABASE_PATH = config.DATABASE_PATH

# Columns holding JSON text
LOCATION_JSON_FIELDS = ('regular_service_hours', 'meal_times', 'methods_of_payment')

LOCATION_FIELDS = (
    'name',
    'colloquial_name',
    'description',
    'address',
    'image',
    'apple_maps_link',
    'google_maps_link',
    'regular_service_hours',
    'meal_times',
    'methods_of_payment',
    'type_id',
    'force_close',
    'has_menus',
)


def get_db_connection():
    """Get a database connection with row factory for dict-like access"""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute('PRAGMA foreign_keys = ON')
    return conn


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _new_id():
    return str(uuid.uuid4())


def init_db():
    """Initialize the database schema"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS location_type (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE,
            created_at TEXT,
            updated_at TEXT
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS location (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            colloquial_name TEXT,
            description TEXT NOT NULL DEFAULT '',
            address TEXT NOT NULL DEFAULT '',
            image TEXT,
            apple_maps_link TEXT NOT NULL DEFAULT '',
            google_maps_link TEXT NOT NULL DEFAULT '',
            regular_service_hours TEXT NOT NULL,
            meal_times TEXT NOT NULL DEFAULT '[]',
            methods_of_payment TEXT NOT NULL DEFAULT '[]',
            status TEXT NOT NULL DEFAULT 'closed' CHECK(status IN ('open', 'closed')),
            type_id TEXT REFERENCES location_type(id),
            force_close INTEGER NOT NULL DEFAULT 0,
            has_menus INTEGER NOT NULL DEFAULT 0,
            display_order INTEGER NOT NULL DEFAULT 0,
            created_at TEXT,
            updated_at TEXT
        )
    ''')

    # Menu content is written by the menu importer; we only check for presence
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS menu (
            id TEXT PRIMARY KEY,
            location_id TEXT NOT NULL REFERENCES location(id) ON DELETE CASCADE,
            name TEXT,
            date TEXT,
            created_at TEXT
        )
    ''')

    cursor.execute('''
        CREATE INDEX IF NOT EXISTS idx_menu_location
        ON menu(location_id)
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS app_information (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            about_title TEXT NOT NULL,
            about_description TEXT NOT NULL,
            credits_contributors TEXT NOT NULL DEFAULT '[]',
            support_links TEXT NOT NULL DEFAULT '[]',
            created_at TEXT,
            updated_at TEXT
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS notification_types (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS notifications (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            body TEXT NOT NULL,
            redirect_url TEXT,
            scheduled_at TEXT,
            type TEXT REFERENCES notification_types(id),
            created_at TEXT
        )
    ''')

    cursor.execute('''
        CREATE INDEX IF NOT EXISTS idx_notifications_scheduled
        ON notifications(scheduled_at)
    ''')

    conn.commit()
    conn.close()
    print("Database initialized successfully")


# ============================================================================
# LOCATIONS
# ============================================================================

def _row_to_location(row):
    location = dict(row)
    for field in LOCATION_JSON_FIELDS:
        location[field] = json.loads(location[field]) if location[field] else []
    location['force_close'] = bool(location['force_close'])
    location['has_menus'] = bool(location['has_menus'])
    return location


def _location_values(location):
    values = {}
    for field in LOCATION_FIELDS:
        value = location.get(field)
        if field in LOCATION_JSON_FIELDS:
            value = json.dumps(value if value is not None else [])
        elif field in ('force_close', 'has_menus'):
            value = 1 if value else 0
        values[field] = value
    for field in ('description', 'address', 'apple_maps_link', 'google_maps_link'):
        if values[field] is None:
            values[field] = ''
    return values


def get_locations():
    """Get all locations ordered for display"""
    conn = get_db_connection()
    rows = conn.execute('SELECT * FROM location ORDER BY display_order ASC, name ASC').fetchall()
    conn.close()

    print("📍 Locations fetched")
    return [_row_to_location(row) for row in rows]


def get_location(location_id):
    """
    Get one location by id

    Returns:
        Location dict if it exists, None otherwise
    """
    conn = get_db_connection()
    row = conn.execute('SELECT * FROM location WHERE id = ?', (location_id,)).fetchone()
    conn.close()

    return _row_to_location(row) if row else None


def add_location(location):
    """Insert a new location at the end of the display order"""
    values = _location_values(location)
    values['id'] = location.get('id') or _new_id()
    values['status'] = location.get('status') or 'closed'
    values['created_at'] = values['updated_at'] = _now_iso()

    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute('SELECT COALESCE(MAX(display_order), -1) + 1 AS next_order FROM location')
    values['display_order'] = cursor.fetchone()['next_order']

    columns = ', '.join(values)
    placeholders = ', '.join('?' for _ in values)
    cursor.execute(
        f'INSERT INTO location ({columns}) VALUES ({placeholders})',
        tuple(values.values()),
    )

    conn.commit()
    conn.close()

    print(f"✅ Location added successfully: {values['name']}")
    return get_location(values['id'])


def update_location(location_id, location):
    """
    Replace the editable fields of a location

    Returns:
        Updated location dict, or None if no location has that id
    """
    values = _location_values(location)
    values['updated_at'] = _now_iso()

    assignments = ', '.join(f'{column} = ?' for column in values)

    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute(
        f'UPDATE location SET {assignments} WHERE id = ?',
        tuple(values.values()) + (location_id,),
    )
    updated = cursor.rowcount
    conn.commit()
    conn.close()

    if not updated:
        return None

    print(f"✏️ Location updated successfully: {values['name']}")
    return get_location(location_id)


def delete_location(location_id):
    """Delete a location and its menus. Returns True if a row was removed."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute('DELETE FROM location WHERE id = ?', (location_id,))
    deleted = cursor.rowcount
    conn.commit()
    conn.close()

    if deleted:
        print("🗑️ Location deleted successfully")
    return bool(deleted)


def toggle_force_close(location_id, force_close):
    """Set or clear the force-close override for a location"""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute(
        'UPDATE location SET force_close = ?, updated_at = ? WHERE id = ?',
        (1 if force_close else 0, _now_iso(), location_id),
    )
    updated = cursor.rowcount
    conn.commit()
    conn.close()

    if not updated:
        return None

    location = get_location(location_id)
    print(f"🔒 Location force close {'enabled' if force_close else 'disabled'}: {location['name']}")
    return location


def update_location_display_order(location_id, display_order):
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute(
        'UPDATE location SET display_order = ?, updated_at = ? WHERE id = ?',
        (display_order, _now_iso(), location_id),
    )
    updated = cursor.rowcount
    conn.commit()
    conn.close()

    if updated:
        print(f"🔢 Location {location_id} display_order set to {display_order}")
    return bool(updated)


def update_location_status(location_id, status):
    """Store the computed open/closed status for a location"""
    conn = get_db_connection()
    conn.execute('UPDATE location SET status = ? WHERE id = ?', (status, location_id))
    conn.commit()
    conn.close()


def check_location_has_menus(location_id):
    """Check whether any menu rows exist for a location"""
    conn = get_db_connection()
    row = conn.execute(
        'SELECT id FROM menu WHERE location_id = ? LIMIT 1',
        (location_id,),
    ).fetchone()
    conn.close()

    has_menus = row is not None
    print(f"🍽️ Location {location_id} has menus: {has_menus}")
    return has_menus


def get_location_menu_status(location_ids):
    """
    Check menu presence for many locations with one query

    Returns:
        Dict mapping each location id to True/False
    """
    location_ids = [location_id for location_id in location_ids if location_id]
    if not location_ids:
        return {}

    placeholders = ', '.join('?' for _ in location_ids)
    conn = get_db_connection()
    rows = conn.execute(
        f'SELECT DISTINCT location_id FROM menu WHERE location_id IN ({placeholders})',
        tuple(location_ids),
    ).fetchall()
    conn.close()

    with_menus = {row['location_id'] for row in rows}
    print("🍽️  Menu status loaded for all locations")
    return {location_id: location_id in with_menus for location_id in location_ids}


def get_location_types():
    conn = get_db_connection()
    rows = conn.execute('SELECT * FROM location_type ORDER BY name ASC').fetchall()
    conn.close()
    return [dict(row) for row in rows]


def add_location_type(name, type_id=None):
    """Create a location type (e.g. 'Dining Hall', 'Coffee Shop')"""
    type_id = type_id or _new_id()
    now = _now_iso()

    conn = get_db_connection()
    conn.execute(
        'INSERT INTO location_type (id, name, created_at, updated_at) VALUES (?, ?, ?, ?)',
        (type_id, name, now, now),
    )
    conn.commit()
    conn.close()

    return {"id": type_id, "name": name, "created_at": now, "updated_at": now}


# ============================================================================
# APP CONFIGURATION
# ============================================================================

def _get_app_information():
    conn = get_db_connection()
    row = conn.execute('SELECT * FROM app_information ORDER BY id ASC LIMIT 1').fetchone()
    conn.close()
    return row


def _upsert_app_information(**fields):
    """Update the single app_information row, creating it with default about text if missing"""
    now = _now_iso()
    existing = _get_app_information()

    conn = get_db_connection()
    if existing is None:
        values = {
            'about_title': config.DEFAULT_APP_TITLE,
            'about_description': config.DEFAULT_APP_DESCRIPTION,
            'created_at': now,
            'updated_at': now,
        }
        values.update(fields)
        columns = ', '.join(values)
        placeholders = ', '.join('?' for _ in values)
        conn.execute(
            f'INSERT INTO app_information ({columns}) VALUES ({placeholders})',
            tuple(values.values()),
        )
    else:
        fields['updated_at'] = now
        assignments = ', '.join(f'{column} = ?' for column in fields)
        conn.execute(
            f'UPDATE app_information SET {assignments} WHERE id = ?',
            tuple(fields.values()) + (existing['id'],),
        )
    conn.commit()
    conn.close()

    return _get_app_information()


def get_app_config():
    """Get the about section, falling back to the default text"""
    row = _get_app_information()
    if row is None:
        return {"title": config.DEFAULT_APP_TITLE, "description": config.DEFAULT_APP_DESCRIPTION}

    return {
        "title": row['about_title'] or config.DEFAULT_APP_TITLE,
        "description": row['about_description'] or config.DEFAULT_APP_DESCRIPTION,
    }


def update_app_config(app_config):
    row = _upsert_app_information(
        about_title=app_config['title'],
        about_description=app_config['description'],
    )
    return {
        "title": row['about_title'] or app_config['title'],
        "description": row['about_description'] or app_config['description'],
    }


def _contributors_from(raw):
    return [
        {"id": item.get('id'), "name": item.get('name'), "order": item.get('order')}
        for item in json.loads(raw or '[]')
    ]


def _links_from(raw):
    return [
        {"id": item.get('id'), "label": item.get('label'), "url": item.get('url'), "order": item.get('order')}
        for item in json.loads(raw or '[]')
    ]


def get_credits_config():
    row = _get_app_information()
    if row is None:
        return {"contributors": []}
    return {"contributors": _contributors_from(row['credits_contributors'])}


def update_credits_config(credits_config):
    row = _upsert_app_information(credits_contributors=json.dumps(credits_config['contributors']))
    return {"contributors": _contributors_from(row['credits_contributors'])}


def get_help_support_config():
    row = _get_app_information()
    if row is None:
        return {"links": []}
    return {"links": _links_from(row['support_links'])}


def update_help_support_config(help_support_config):
    row = _upsert_app_information(support_links=json.dumps(help_support_config['links']))
    return {"links": _links_from(row['support_links'])}


# ============================================================================
# NOTIFICATIONS
# ============================================================================

def insert_scheduled_notification(title, body, redirect_url, scheduled_at, notification_type):
    """
    Store a notification for later delivery

    Args:
        scheduled_at: ISO 8601 timestamp (UTC)

    Returns:
        Id of the new notification row
    """
    notification_id = _new_id()

    conn = get_db_connection()
    conn.execute('''
        INSERT INTO notifications (id, title, body, redirect_url, scheduled_at, type, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
    ''', (notification_id, title, body, redirect_url, scheduled_at, notification_type, _now_iso()))
    conn.commit()
    conn.close()

    return notification_id


def get_scheduled_notifications():
    """Get scheduled notifications (soonest first) with their type name"""
    conn = get_db_connection()
    rows = conn.execute('''
        SELECT n.*, t.name AS type_name
        FROM notifications n
        LEFT JOIN notification_types t ON t.id = n.type
        WHERE n.scheduled_at IS NOT NULL
        ORDER BY n.scheduled_at ASC
    ''').fetchall()
    conn.close()

    notifications = []
    for row in rows:
        notification = dict(row)
        type_name = notification.pop('type_name')
        notification['notification_types'] = {"name": type_name} if type_name else None
        notifications.append(notification)
    return notifications


def delete_notification(notification_id):
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute('DELETE FROM notifications WHERE id = ?', (notification_id,))
    deleted = cursor.rowcount
    conn.commit()
    conn.close()
    return bool(deleted)


def get_notification_types():
    conn = get_db_connection()
    rows = conn.execute('SELECT * FROM notification_types ORDER BY name ASC').fetchall()
    conn.close()
    return [dict(row) for row in rows]


def add_notification_type(name, type_id=None):
    type_id = type_id or _new_id()

    conn = get_db_connection()
    conn.execute('INSERT INTO notification_types (id, name) VALUES (?, ?)', (type_id, name))
    conn.commit()
    conn.close()

    return {"id": type_id, "name": name}


# Initialize database when run directly
if __name__ == "__main__":
    init_db()
    print(f"Database created at: {DATABASE_PATH}")
