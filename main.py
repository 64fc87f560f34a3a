"""
HTTP entry point.

    flask --app main run
"""

from flask import Flask, jsonify, request

from adapters.http import handle_request

app = Flask(__name__)


@app.route("/", defaults={"path": ""}, methods=["GET", "POST"])
@app.route("/<path:path>", methods=["GET", "POST"])
def entry(path):
    body, status = handle_request(request)
    return jsonify(body), status
