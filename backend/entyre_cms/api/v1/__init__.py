from flask import Blueprint, current_app

from entyre_cms.extensions import limiter

# Create the versioned blueprint
v1_bp = Blueprint("v1", __name__)

# Tighter budget on the API, on top of the app-wide default
limiter.limit(lambda: current_app.config["API_RATE_LIMIT"], override_defaults=False)(v1_bp)

# Import route modules so they register with v1_bp
from . import health
from . import auth
from . import sections
from . import articles
from . import banners
from . import videos
from . import workflows
from . import excel_files
from . import mcda
from . import media
from . import audit
