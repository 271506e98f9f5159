from flask import Flask, render_template_string, jsonify
import sys
import logging

from aih_backup.core.backup_engine import API_LIST_LIMIT
from aih_backup.core.errors import BackupNotFoundError

logger = logging.getLogger(__name__)

WEB_BACKUP_NAME = "Web Backup"

DASHBOARD_TEMPLATE = """<!DOCTYPE html>
<html><head><meta charset="UTF-8"><meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>AIH Backup</title>
<style>
*{margin:0;padding:0;box-sizing:border-box}
body{font-family:-apple-system,sans-serif;background:linear-gradient(135deg,#1a1a2e,#16213e);min-height:100vh;color:#e2e8f0;padding:20px}
.container{max-width:800px;margin:0 auto}
h1{text-align:center;margin:30px 0;font-size:2rem}
.card{background:rgba(255,255,255,0.05);border-radius:16px;padding:24px;margin:20px 0;border:1px solid rgba(255,255,255,0.1)}
button{padding:12px 24px;border-radius:8px;border:none;font-size:1rem;cursor:pointer;background:#22c55e;color:white}
button:hover{opacity:0.9}
table{width:100%;border-collapse:collapse;margin-top:20px}
th,td{padding:12px;text-align:left;border-bottom:1px solid rgba(255,255,255,0.1)}
th{color:#94a3b8}
</style></head><body><div class="container">
<h1>AIH OpenClaw Backup</h1>
<div class="card"><h2>Create Backup</h2>
<p style="color:#94a3b8;margin:10px 0">Backs up workspace, memory, and config</p>
<button id="create-backup" onclick="createBackup()">Create New Backup</button>
</div>
<div class="card"><h2>Available Backups</h2>
<table><thead><tr><th>ID</th><th>Name</th><th>Created</th><th>Action</th></tr></thead>
<tbody>
{% for backup in backups %}
<tr><td>{{ backup.id }}</td><td>{{ backup.name }}</td><td>{{ backup.created_at }}</td>
<td><button onclick="restore({{ backup.id }})">Restore</button></td></tr>
{% else %}
<tr><td colspan="4">No backups yet</td></tr>
{% endfor %}
</tbody></table>
</div></div>
<script>
async function createBackup(){const btn=document.getElementById('create-backup');btn.textContent='Creating...';btn.disabled=true;
try{const r=await fetch('/api/backup',{method:'POST'});const d=await r.json();
if(d.success){alert('Backup created! ID: '+d.id);location.reload();}
else{alert('Error: '+d.error);}}
catch(e){alert('Error: '+e.message);}
btn.textContent='Create New Backup';btn.disabled=false;}
async function restore(id){if(!confirm('Restore backup #'+id+'?'))return;
try{const r=await fetch('/api/restore/'+id,{method:'POST'});const d=await r.json();
alert(d.success?'Restore complete!':'Error: '+d.error);}
catch(e){alert('Error: '+e.message);}}
</script></body></html>
"""

def create_app(backup_engine):
    app = Flask(__name__)

    # --- Routes ---

    @app.after_request
    def allow_any_origin(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.errorhandler(404)
    def not_found(e):
        return "Not Found", 404

    @app.route("/api/status")
    def status():
        backups = backup_engine.list_backups(limit=API_LIST_LIMIT)
        return jsonify({"status": "ok", "backups": backups})

    @app.route("/api/backup", methods=["POST"])
    def create_backup():
        try:
            backup_id = backup_engine.run_backup(WEB_BACKUP_NAME)
            return jsonify({"success": True, "id": backup_id})
        except Exception as e:
            logger.error(f"Backup failed: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/restore/<int:backup_id>", methods=["POST"])
    def restore_backup(backup_id):
        try:
            backup_engine.run_restore(backup_id)
            return jsonify({"success": True})
        except BackupNotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except Exception as e:
            logger.error(f"Restore of backup {backup_id} failed: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/")
    def index():
        backups = backup_engine.list_backups(limit=API_LIST_LIMIT)
        return render_template_string(DASHBOARD_TEMPLATE, backups=backups)

    # --- Suppress HTTP 200 Logging (Werkzeug) ---
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    return app

class AccessLogFilter:
    def __init__(self, stream):
        self.stream = stream
    def write(self, message):
        if "GET /api/status" in message and '" 200 ' in message:
            return
        self.stream.write(message)
    def flush(self):
        self.stream.flush()

def start_server(app, host="0.0.0.0", port=3000):
    logger.info(f"Web Interface: http://{host}:{port}")
    logger.info(f"API: http://{host}:{port}/api/status")

    # Try Gevent first
    try:
        from gevent.pywsgi import WSGIServer
        logger.info(f"Starting production server (Gevent) on port {port}...")
        http_server = WSGIServer((host, port), app, log=AccessLogFilter(sys.stdout))
        http_server.serve_forever()
        return
    except ImportError:
        pass

    # Fallback to Waitress
    try:
        from waitress import serve
        logger.info(f"Starting production server (Waitress) on port {port}...")
        serve(app, host=host, port=port, threads=6)
        return
    except ImportError:
        pass

    # Fallback to Flask Dev Server
    logger.warning("Production servers (Gevent/Waitress) not found. Using Flask dev server.")
    app.run(host=host, port=port, debug=False, threaded=True)
