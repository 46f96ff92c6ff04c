"""
notifications.py - Push notifications for the dining app

Immediate notifications are handed to the push dispatch function over HTTP.
Scheduled notifications are stored in the notifications table, where the
push service picks them up when they are due.
"""

import re
import sqlite3
from datetime import datetime, timedelta, timezone

import requests

import config
import database

URL_PATTERN = re.compile(
    r'^(https?://)?'
    r'((([a-z\d]([a-z\d-]*[a-z\d])*)\.)+[a-z]{2,}|'
    r'((\d{1,3}\.){3}\d{1,3}))'
    r'(:\d+)?(/[-a-z\d%_.~+]*)*'
    r'(\?[;&a-z\d%_.~+=-]*)?'
    r'(#[-a-z\d_]*)?$',
    re.IGNORECASE,
)

# Scheduled notifications must be at least this far ahead
MIN_SCHEDULE_LEAD = timedelta(minutes=1)


def parse_scheduled_at(value):
    """
    Parse a scheduled time into an aware UTC datetime

    Args:
        value: datetime or ISO 8601 string. Naive values are treated as UTC.

    Returns:
        datetime, or None if the value can't be parsed
    """
    if isinstance(value, datetime):
        scheduled_at = value
    elif isinstance(value, str) and value.strip():
        try:
            scheduled_at = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    else:
        return None

    if scheduled_at.tzinfo is None:
        scheduled_at = scheduled_at.replace(tzinfo=timezone.utc)
    return scheduled_at.astimezone(timezone.utc)


def _is_text(value):
    return isinstance(value, str) and bool(value.strip())


def validate_notification(data, now=None):
    """
    Validate a notification form payload

    Returns:
        str: Error message, or None if valid
    """
    if not _is_text(data.get('title')):
        return "Title is required"

    if not _is_text(data.get('body')):
        return "Body is required"

    if not _is_text(data.get('notification_type_id')):
        return "Notification type is required"

    redirect_link = data.get('redirectLink')
    if redirect_link and (not isinstance(redirect_link, str) or not URL_PATTERN.match(redirect_link)):
        return "Please enter a valid URL"

    if data.get('isScheduled'):
        scheduled_at = parse_scheduled_at(data.get('scheduledAt'))
        if scheduled_at is None:
            return "Scheduled time is required"

        now = now or datetime.now(timezone.utc)
        if scheduled_at < now + MIN_SCHEDULE_LEAD:
            return "Scheduled time must be at least one minute in the future"

    return None


def send_notification(data):
    """
    Send a push notification to all devices right away

    Args:
        data: {"title", "body", "redirectLink", "notification_type_id"}

    Returns:
        dict: {"success": bool, "message": str}
    """
    print("⏳ Sending notification...")

    if not config.PUSH_FUNCTION_URL:
        print("❌ Error sending notification: PUSH_FUNCTION_URL is not set")
        return {"success": False, "message": "Push notification service is not configured"}

    payload = {
        "title": data['title'],
        "body": data['body'],
        "redirect_url": data.get('redirectLink'),
        "type": data['notification_type_id'],
    }
    headers = {"Content-Type": "application/json"}
    if config.PUSH_API_KEY:
        headers["Authorization"] = f"Bearer {config.PUSH_API_KEY}"

    try:
        response = requests.post(
            config.PUSH_FUNCTION_URL,
            json=payload,
            headers=headers,
            timeout=config.PUSH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        result = response.json()
    except (requests.RequestException, ValueError) as e:
        print(f"❌ Error sending notification: {e}")
        return {"success": False, "message": str(e)}

    print("✅ Notification sent successfully")
    return {
        "success": True,
        "message": f"Notification sent successfully to {result.get('sent', 0)} devices.",
    }


def schedule_notification(data):
    """
    Store a notification to be sent at data['scheduledAt']

    Returns:
        dict: {"success": bool, "message": str, "id": str (on success)}
    """
    if not data.get('scheduledAt'):
        return {"success": False, "message": "Scheduled time is required"}

    scheduled_at = parse_scheduled_at(data['scheduledAt'])
    if scheduled_at is None:
        return {"success": False, "message": "Invalid scheduled time provided"}

    print("⏳ Scheduling notification...")

    try:
        notification_id = database.insert_scheduled_notification(
            title=data['title'],
            body=data['body'],
            redirect_url=data.get('redirectLink'),
            scheduled_at=scheduled_at.isoformat(),
            notification_type=data['notification_type_id'],
        )
    except sqlite3.Error as e:
        print(f"❌ Error scheduling notification: {e}")
        return {"success": False, "message": str(e)}

    print("✅ Notification scheduled successfully")
    return {
        "success": True,
        "id": notification_id,
        "message": f"Notification scheduled successfully for {scheduled_at.strftime('%Y-%m-%d %I:%M %p UTC')}",
    }


def get_scheduled_notifications():
    try:
        return database.get_scheduled_notifications()
    except sqlite3.Error as e:
        print(f"❌ Error fetching scheduled notifications: {e}")
        return []


def delete_scheduled_notification(notification_id):
    try:
        deleted = database.delete_notification(notification_id)
    except sqlite3.Error as e:
        print(f"❌ Error deleting scheduled notification: {e}")
        return {"success": False, "message": str(e)}

    if not deleted:
        return {"success": False, "message": "Scheduled notification not found"}

    print("✅ Scheduled notification deleted successfully")
    return {"success": True, "message": "Scheduled notification deleted successfully"}


def get_notification_types():
    try:
        return database.get_notification_types()
    except sqlite3.Error as e:
        print(f"❌ Error fetching notification types: {e}")
        return []
