#!/usr/bin/env python3
"""
Flask server for the dining locations dashboard, with a background status scheduler
"""

from flask import Flask, jsonify, request
from flask_cors import CORS
import sqlite3
import threading
from datetime import datetime

import config
import database
import notifications
from location_utils import InvalidScheduleError, get_location_availability, get_location_type_name
from payment_methods import get_payment_method_options
from scheduler import run_scheduler
from validation import validate_location

app = Flask(__name__)
CORS(app)


def _location_with_availability(location, has_menus, location_types):
    result = dict(location)
    result['has_menus_today'] = has_menus
    result['type_name'] = get_location_type_name(location.get('type_id'), location_types)
    try:
        result['availability'] = get_location_availability(location, has_menus)
    except InvalidScheduleError as e:
        print(f"❌ Bad service hours for {location['name']}: {e}")
        result['availability'] = None
        result['availability_error'] = str(e)
    return result


@app.route('/api/status', methods=['GET'])
def status():
    """Health check endpoint"""
    return jsonify({"status": "running", "timestamp": datetime.now().isoformat()})


# ============================================================================
# LOCATION ENDPOINTS
# ============================================================================

@app.route('/api/locations', methods=['GET'])
def list_locations():
    """
    Return all locations in display order with live availability

    Each location carries:
    - has_menus_today: whether any menu rows exist for it
    - availability: {"is_open", "status", "current_meal", "next_opening_description"}
    """
    try:
        locations = database.get_locations()
        location_types = database.get_location_types()
        menu_status = database.get_location_menu_status([loc['id'] for loc in locations])

        return jsonify([
            _location_with_availability(location, menu_status.get(location['id'], False), location_types)
            for location in locations
        ])
    except Exception as e:
        print(f"Error getting locations: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/api/locations', methods=['POST'])
def create_location():
    data = request.get_json(silent=True)

    error = validate_location(data)
    if error:
        return jsonify({"error": error}), 400

    try:
        location = database.add_location(data)
        return jsonify(location), 201
    except sqlite3.IntegrityError as e:
        print(f"❌ Insert error: {e}")
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        print(f"❌ Insert error: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/api/locations/<location_id>', methods=['GET'])
def get_location(location_id):
    location = database.get_location(location_id)
    if location is None:
        return jsonify({"error": "Location not found"}), 404
    return jsonify(location)


@app.route('/api/locations/<location_id>', methods=['PUT'])
def update_location(location_id):
    data = request.get_json(silent=True)

    error = validate_location(data)
    if error:
        return jsonify({"error": error}), 400

    try:
        location = database.update_location(location_id, data)
    except sqlite3.IntegrityError as e:
        print(f"❌ Update error: {e}")
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        print(f"❌ Update error: {e}")
        return jsonify({"error": f"Failed to update location: {e}"}), 500

    if location is None:
        return jsonify({"error": "Location not found"}), 404
    return jsonify(location)


@app.route('/api/locations/<location_id>', methods=['DELETE'])
def delete_location(location_id):
    try:
        deleted = database.delete_location(location_id)
    except Exception as e:
        print(f"❌ Delete error: {e}")
        return jsonify({"error": f"Failed to delete location: {e}"}), 500

    if not deleted:
        return jsonify({"error": "Location not found"}), 404
    return jsonify({"success": True})


@app.route('/api/locations/<location_id>/availability', methods=['GET'])
def location_availability(location_id):
    """
    Availability of one location right now

    Query params:
    - at: ISO 8601 instant to evaluate instead of now (optional)
    """
    location = database.get_location(location_id)
    if location is None:
        return jsonify({"error": "Location not found"}), 404

    now = None
    at = request.args.get('at')
    if at:
        try:
            now = datetime.fromisoformat(at.replace('Z', '+00:00'))
        except ValueError:
            return jsonify({"error": "Invalid 'at' timestamp"}), 400

    has_menus = database.check_location_has_menus(location_id)

    try:
        availability = get_location_availability(location, has_menus, now)
    except InvalidScheduleError as e:
        return jsonify({"error": str(e)}), 422

    availability['has_menus_today'] = has_menus
    return jsonify(availability)


@app.route('/api/locations/<location_id>/force-close', methods=['POST'])
def force_close_location(location_id):
    """
    Request body:
    {
        "force_close": true
    }
    """
    data = request.get_json(silent=True)
    if not data or not isinstance(data.get('force_close'), bool):
        return jsonify({"error": "force_close must be true or false"}), 400

    try:
        location = database.toggle_force_close(location_id, data['force_close'])
    except Exception as e:
        print(f"❌ Force close toggle error: {e}")
        return jsonify({"error": f"Failed to toggle force close: {e}"}), 500

    if location is None:
        return jsonify({"error": "Location not found"}), 404
    return jsonify(location)


@app.route('/api/locations/reorder', methods=['POST'])
def reorder_locations():
    """
    Store a new display order

    Request body:
    {
        "order": ["location-id-1", "location-id-2", ...]
    }
    """
    data = request.get_json(silent=True)
    order = data.get('order') if data else None
    if not isinstance(order, list) or not all(isinstance(i, str) for i in order):
        return jsonify({"error": "order must be a list of location ids"}), 400

    try:
        missing = [
            location_id for index, location_id in enumerate(order)
            if not database.update_location_display_order(location_id, index)
        ]
    except Exception as e:
        print(f"❌ Display order update error: {e}")
        return jsonify({"error": f"Failed to update display order: {e}"}), 500

    return jsonify({"success": not missing, "missing": missing})


@app.route('/api/location-types', methods=['GET'])
def list_location_types():
    try:
        return jsonify(database.get_location_types())
    except Exception as e:
        print(f"❌ Failed to fetch location types: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/api/payment-methods', methods=['GET'])
def list_payment_methods():
    return jsonify(get_payment_method_options())


# ============================================================================
# CONFIGURATION ENDPOINTS
# ============================================================================

def _bad_config(message):
    return jsonify({"error": message}), 400


@app.route('/api/config/about', methods=['GET', 'PUT'])
def about_config():
    """
    About section shown in the app

    PUT body:
    {
        "title": "UT Dining",
        "description": "Find dining locations..."
    }
    """
    if request.method == 'GET':
        return jsonify(database.get_app_config())

    data = request.get_json(silent=True) or {}
    title = (data.get('title') or '').strip()
    description = (data.get('description') or '').strip()
    if not title or not description:
        return _bad_config("Title and description are required")

    try:
        return jsonify(database.update_app_config({"title": title, "description": description}))
    except Exception as e:
        print(f"Error updating app configuration: {e}")
        return jsonify({"error": str(e)}), 500


def _ordered_items(items, required):
    """Check list items have the required keys and renumber their order"""
    if not isinstance(items, list):
        return None
    for item in items:
        if not isinstance(item, dict) or not all(str(item.get(key) or '').strip() for key in required):
            return None
    items = sorted(items, key=lambda item: item.get('order', 0))
    return [dict(item, order=index) for index, item in enumerate(items)]


@app.route('/api/config/credits', methods=['GET', 'PUT'])
def credits_config():
    """
    Contributors listed in the credits section

    PUT body:
    {
        "contributors": [{"id": "1", "name": "Jane", "order": 0}]
    }
    """
    if request.method == 'GET':
        return jsonify(database.get_credits_config())

    data = request.get_json(silent=True) or {}
    contributors = _ordered_items(data.get('contributors'), ('id', 'name'))
    if contributors is None:
        return _bad_config("Each contributor needs an id and a name")

    try:
        return jsonify(database.update_credits_config({"contributors": contributors}))
    except Exception as e:
        print(f"Error updating credits configuration: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/api/config/help-support', methods=['GET', 'PUT'])
def help_support_config():
    """
    Help & support links

    PUT body:
    {
        "links": [{"id": "1", "label": "Report a bug", "url": "https://...", "order": 0}]
    }
    """
    if request.method == 'GET':
        return jsonify(database.get_help_support_config())

    data = request.get_json(silent=True) or {}
    links = _ordered_items(data.get('links'), ('id', 'label', 'url'))
    if links is None:
        return _bad_config("Each link needs an id, a label and a URL")

    for link in links:
        if not notifications.URL_PATTERN.match(link['url']):
            return _bad_config(f"Invalid URL for {link['label']}")

    try:
        return jsonify(database.update_help_support_config({"links": links}))
    except Exception as e:
        print(f"Error updating help & support configuration: {e}")
        return jsonify({"error": str(e)}), 500


# ============================================================================
# NOTIFICATION ENDPOINTS
# ============================================================================

@app.route('/api/notifications', methods=['POST'])
def post_notification():
    """
    Send a notification now, or schedule it

    Request body:
    {
        "title": "Free cookies!",
        "body": "J2 is handing out cookies until 3 PM",
        "redirectLink": "https://example.com",
        "notification_type_id": "type-id",
        "isScheduled": true,
        "scheduledAt": "2026-02-03T18:00:00Z"
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"success": False, "message": "Missing request body"}), 400

    error = notifications.validate_notification(data)
    if error:
        return jsonify({"success": False, "message": error}), 400

    if data.get('isScheduled'):
        result = notifications.schedule_notification(data)
    else:
        result = notifications.send_notification(data)

    return jsonify(result), 200 if result['success'] else 502


@app.route('/api/notifications/scheduled', methods=['GET'])
def list_scheduled_notifications():
    return jsonify(notifications.get_scheduled_notifications())


@app.route('/api/notifications/scheduled/<notification_id>', methods=['DELETE'])
def delete_scheduled_notification(notification_id):
    result = notifications.delete_scheduled_notification(notification_id)
    if result['success']:
        return jsonify(result)
    if result['message'] == "Scheduled notification not found":
        return jsonify(result), 404
    return jsonify(result), 500


@app.route('/api/notification-types', methods=['GET'])
def list_notification_types():
    return jsonify(notifications.get_notification_types())


if __name__ == '__main__':
    database.init_db()

    # Start scheduler in background thread
    scheduler_thread = threading.Thread(target=run_scheduler, daemon=True)
    scheduler_thread.start()

    app.run(host='0.0.0.0', port=config.PORT)
