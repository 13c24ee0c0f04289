from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from marshmallow.exceptions import ValidationError

from .config.db import init_db
from .config.logging import get_logger
from .config.settings import SETTINGS
from .services.facet_manager import init_facet_backend
from .shared.auth import validate_api_auth
from .resources import register_resources

logger = get_logger(__name__)

app = Flask(__name__, static_folder=None)
app.config.update(SETTINGS)

# Enable CORS
CORS(app, resources={r"*": {"origins": app.config["ALLOWED_CLIENT_URL"]}})

# Set up the database that stores block configurations
init_db(app)

# Connect to the faceted-search backend
init_facet_backend(app)

# Wire up the API
register_resources(app)

# Check that its auth configuration is valid
validate_api_auth(app)


@app.errorhandler(Exception)
def handle_errors(e: Exception):
    """Format exceptions as JSON, with status code and error message info."""
    if isinstance(e, HTTPException):
        status_code = e.code
        _error = {}
        if hasattr(e, "exc") and isinstance(e.exc, ValidationError):
            _error["message"] = e.data["messages"]
        else:
            _error["message"] = e.description
    else:
        status_code = 500
        # This is an internal server error, so log the traceback for debugging purposes.
        logger.error(f"unhandled {type(e).__name__}: {e}", exc_info=e)
        _error = {
            "message": "The server encountered an internal error and was unable to complete your request."
        }

    error_json = {"_status": "ERR", "_error": _error}
    response = jsonify(error_json)
    response.status_code = status_code
    return response


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5000)
