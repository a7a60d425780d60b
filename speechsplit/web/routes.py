"""Web UI routes for speechsplit."""

import json
import logging
import queue
import threading
import uuid
from pathlib import Path

from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    render_template,
    request,
    send_file,
)

from speechsplit.engine import process
from speechsplit.errors import FFmpegProcessError
from speechsplit.manifest import Manifest, SplitConfig, TranscriptionConfig

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="templates")

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


@bp.route("/")
def index():
    return render_template("index.html")


@bp.route("/api/upload", methods=["POST"])
def upload():
    if "file" not in request.files:
        return jsonify({"error": "No file provided"}), 400

    f = request.files["file"]
    if not f.filename:
        return jsonify({"error": "Empty filename"}), 400

    job_id = uuid.uuid4().hex[:12]
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id
    job_dir.mkdir(parents=True, exist_ok=True)

    ext = Path(f.filename).suffix
    input_path = job_dir / f"input{ext}"
    f.save(input_path)

    _jobs[job_id] = {
        "dir": job_dir,
        "input_path": input_path,
        "filename": f.filename,
        "status": "uploaded",
    }

    return jsonify({"job_id": job_id, "filename": f.filename})


@bp.route("/api/jobs/<job_id>/split", methods=["POST"])
def start_split(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] not in ("uploaded", "done", "error"):
        return jsonify({"error": f"Job is already {job['status']}"}), 409

    config = request.get_json(silent=True) or {}
    if not isinstance(config, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    tc = config.get("transcription", {})

    try:
        max_size_mb = float(config.get("max_size_mb", 25.0))
    except (TypeError, ValueError):
        return jsonify({"error": "max_size_mb must be a number"}), 400
    if max_size_mb <= 0:
        return jsonify({"error": "max_size_mb must be positive"}), 400

    if not isinstance(tc, dict):
        return jsonify({"error": "transcription must be an object"}), 400
    if tc.get("output_format", "txt") not in ("txt", "srt", "vtt"):
        return jsonify({"error": "output_format must be one of txt, srt, vtt"}), 400

    manifest = Manifest(
        input=job["input_path"],
        split=SplitConfig(
            max_size_mb=max_size_mb,
            bitrate=config.get("bitrate", "64k"),
        ),
        transcription=TranscriptionConfig(
            enabled=tc.get("enabled", False),
            model=tc.get("model", "base"),
            language=tc.get("language"),
            output_format=tc.get("output_format", "txt"),
        ),
    )

    progress_queue: queue.Queue = queue.Queue()
    job["progress_queue"] = progress_queue
    job["status"] = "processing"
    job["error"] = None

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = process(manifest, on_progress=on_progress)
            job["result"] = {
                "kind": result.kind.value,
                "duration": result.audio.duration,
                "size_bytes": result.audio.size_bytes,
                "parts": [
                    {
                        "name": part.path.name,
                        "path": str(part.path),
                        "duration": part.duration,
                        "size_bytes": part.size_bytes,
                    }
                    for part in result.parts
                ],
                "transcript_path": str(result.transcript_path) if result.transcript_path else None,
            }
            job["status"] = "done"
        except FFmpegProcessError as e:
            job["status"] = "error"
            job["error"] = f"{e}: {e.stderr[-500:]}" if e.stderr else str(e)
        except Exception as e:
            logger.exception("Job %s failed", job_id)
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    q = job.get("progress_queue")

    if q is None:
        return jsonify({"error": "No processing in progress"}), 409

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "error":
                    data = json.dumps({"error": job["error"]})
                else:
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/parts/<int:number>")
def download_part(job_id: str, number: int):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409

    parts = job["result"]["parts"]
    if not 1 <= number <= len(parts):
        return jsonify({"error": "Part not found"}), 404

    part = parts[number - 1]
    return send_file(Path(part["path"]), as_attachment=True, download_name=part["name"])


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    resp = {"status": job["status"], "filename": job.get("filename")}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] == "error":
        resp["error"] = job.get("error")
    return jsonify(resp)
